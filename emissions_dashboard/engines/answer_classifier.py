"""Maps a question echoed by the analysis service back to its data-point label."""

import re

from emissions_dashboard.domain.data_points import REVENUE, UNKNOWN_LABEL

_SCOPE_PATTERN = re.compile(r"scope\s*\d+(?:\s*\(market-based\))?")


def classify(question: str) -> str:
    """Return "Revenue", a "Scope N[ (Market-based)]" label, or "Unknown".

    Revenue is checked first, so a question mentioning both revenue and a
    scope is classified as revenue.

    Examples:
        >>> classify("What was Acme's total scope 2 (market-based) in 2023?")
        'Scope 2 (Market-based)'
        >>> classify("How many employees?")
        'Unknown'
    """
    q_lower = (question or "").lower()
    if "revenue" in q_lower:
        return REVENUE

    match = _SCOPE_PATTERN.search(q_lower)
    if match is None:
        return UNKNOWN_LABEL

    label = "S" + match.group(0)[1:]
    return label.replace("(market-based)", "(Market-based)")
