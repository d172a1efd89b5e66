"""Groups the flat list of stored records into the dashboard's
company → year → data point structure and picks the column order.

Works with ORM ``EmissionModel`` rows, pydantic ``EmissionRecord`` objects,
or anything else exposing ``company_name``, ``year`` and
``data_point_type`` attributes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from emissions_dashboard.domain.data_points import INIT_LABEL, PREFERRED_COLUMN_ORDER

R = TypeVar("R")


@dataclass
class ReconciledData(Generic[R]):
    data: Dict[str, Dict[int, Dict[str, R]]] = field(default_factory=dict)
    companies: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)

    def years(self, company: str) -> List[int]:
        """Years recorded for *company*, newest first."""
        return sorted(self.data.get(company, {}), reverse=True)

    def cell(self, company: str, year: int, label: str) -> Optional[R]:
        return self.data.get(company, {}).get(year, {}).get(label)


def column_sort_key(preferred_order: Sequence[str]):
    """Key function: index in *preferred_order*, unknown labels one past the end."""
    positions = {label: i for i, label in enumerate(preferred_order)}
    missing = len(preferred_order)

    def key(label: str) -> int:
        return positions.get(label, missing)

    return key


def order_columns(
    columns: Iterable[str], preferred_order: Sequence[str] = PREFERRED_COLUMN_ORDER
) -> List[str]:
    # sorted() is stable, so unlisted columns keep their first-seen order
    return sorted(columns, key=column_sort_key(preferred_order))


def reconcile(
    records: Iterable[Any], preferred_order: Sequence[str] = PREFERRED_COLUMN_ORDER
) -> ReconciledData:
    """Build the nested display structure from records in query order.

    Companies appear in first-seen order, so the caller's query sort
    (alphabetical or most recent first) decides the display order. The
    "Init" placeholder never becomes a column. A duplicate
    (company, year, label) triple overwrites the earlier one.
    """
    result: ReconciledData = ReconciledData()
    seen_columns: dict[str, None] = {}

    for record in records:
        company = record.company_name
        label = record.data_point_type

        if company not in result.data:
            result.data[company] = {}
            result.companies.append(company)
        if label != INIT_LABEL:
            seen_columns.setdefault(label, None)

        result.data[company].setdefault(record.year, {})[label] = record

    result.columns = order_columns(seen_columns, preferred_order)
    return result
