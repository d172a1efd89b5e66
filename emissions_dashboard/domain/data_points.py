"""Data-point labels shared by the deriver, classifier, reconciler and UI."""

REVENUE = "Revenue"
SCOPE_1 = "Scope 1"
SCOPE_2_MARKET = "Scope 2 (Market-based)"
SCOPE_3 = "Scope 3"

# Display order of the dashboard columns. Labels not listed here go last.
PREFERRED_COLUMN_ORDER: tuple[str, ...] = (REVENUE, SCOPE_1, SCOPE_2_MARKET, SCOPE_3)

CANONICAL_LABELS: frozenset[str] = frozenset(PREFERRED_COLUMN_ORDER)

# Sentinels
UNKNOWN_LABEL = "Unknown"  # classifier could not map a question back to a label
INIT_LABEL = "Init"  # placeholder row created by "add company"
