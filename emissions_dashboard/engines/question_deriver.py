"""Turns a data-point label into the question and search keywords sent to
the document-analysis service.

The phrasing here is the inverse of ``answer_classifier.classify``: the
label is the only part of the question that mentions revenue or a scope, so
the classifier can recover it from the question the service echoes back.
"""

from typing import Iterable, List

QUESTION_TEMPLATE = (
    "What was {company}'s total {label} in {year}? "
    "Rules: report a single company-level figure covering all operations, "
    "state the unit of measurement, and only use values reported for the year {year}."
)

# Checked in order; the first topic found in the question wins.
_KEYWORDS_BY_TOPIC: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("revenue", ("revenue", "sale")),
    ("scope", ("scope",)),
)


def derive_question(label: str, company_name: str, year: int) -> str:
    return QUESTION_TEMPLATE.format(company=company_name, label=label.lower(), year=year)


def _keywords_in_order(question: str) -> tuple[str, ...]:
    q_lower = question.lower()
    for topic, keywords in _KEYWORDS_BY_TOPIC:
        if topic in q_lower:
            return keywords
    return ()


def derive_keywords(question: str) -> frozenset[str]:
    """Keywords used by the analysis service to pre-filter document pages."""
    return frozenset(_keywords_in_order(question))


def merge_keywords(questions: Iterable[str]) -> List[str]:
    """Union of the keywords of all *questions*, first-seen order, no duplicates."""
    merged: dict[str, None] = {}
    for question in questions:
        for keyword in _keywords_in_order(question):
            merged.setdefault(keyword, None)
    return list(merged)
