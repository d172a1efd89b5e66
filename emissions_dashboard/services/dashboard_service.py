"""Read side of the dashboard: reconciled table and single-record details."""

import logging

from emissions_dashboard.engines.data_reconciler import reconcile
from emissions_dashboard.errors import NotFound
from emissions_dashboard.repositories.emission_repo import DashboardOrder, EmissionRepository
from emissions_dashboard.schemas.emission import DashboardView, EmissionRecord

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, emission_repo: EmissionRepository):
        self.emissions = emission_repo

    def get_dashboard(self, order: DashboardOrder = "company") -> DashboardView:
        records = [
            EmissionRecord.model_validate(r) for r in self.emissions.list_for_dashboard(order)
        ]
        reconciled = reconcile(records)
        logger.debug(
            "Reconciled %d record(s) into %d companies, %d columns",
            len(records),
            len(reconciled.companies),
            len(reconciled.columns),
        )
        return DashboardView(
            companies=reconciled.companies,
            columns=reconciled.columns,
            data=reconciled.data,
        )

    def get_record(self, record_id: int) -> EmissionRecord:
        record = self.emissions.get_with_evidence(record_id)
        if record is None:
            raise NotFound(f"No data point with id {record_id}.")
        return EmissionRecord.model_validate(record)
