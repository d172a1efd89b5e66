"""Emission data repository."""

from typing import Iterable, List, Literal, Optional

from sqlalchemy.orm import Session, selectinload

from emissions_dashboard.domain.data_points import INIT_LABEL
from emissions_dashboard.models.emission import EmissionModel
from emissions_dashboard.models.evidence import EvidenceModel
from emissions_dashboard.models.feedback import FeedbackModel
from emissions_dashboard.repositories.base import BaseRepository

DashboardOrder = Literal["company", "recent"]


class EmissionRepository(BaseRepository[EmissionModel]):
    def __init__(self, db: Session):
        super().__init__(db, EmissionModel)

    # ── reads ────────────────────────────────────────────────────────

    def get_with_evidence(self, record_id: int) -> Optional[EmissionModel]:
        return (
            self.db.query(self.model)
            .options(selectinload(self.model.evidence))
            .filter(self.model.id == record_id)
            .first()
        )

    def get_for_data_point(
        self, company_name: str, year: int, data_point_type: str
    ) -> Optional[EmissionModel]:
        return (
            self.db.query(self.model)
            .filter(
                self.model.company_name == company_name,
                self.model.year == year,
                self.model.data_point_type == data_point_type,
            )
            .first()
        )

    def exists_for_company_year(self, company_name: str, year: int) -> bool:
        return (
            self.db.query(self.model.id)
            .filter(self.model.company_name == company_name, self.model.year == year)
            .first()
            is not None
        )

    def list_for_dashboard(self, order: DashboardOrder = "company") -> List[EmissionModel]:
        """All records with evidence, in display order.

        ``company``: alphabetical by company, most recent year first.
        ``recent``: newest records first, so recently refreshed companies lead.
        """
        query = self.db.query(self.model).options(selectinload(self.model.evidence))
        if order == "recent":
            query = query.order_by(self.model.created_at.desc(), self.model.id.desc())
        else:
            query = query.order_by(self.model.company_name.asc(), self.model.year.desc())
        return query.all()

    # ── writes ───────────────────────────────────────────────────────

    def delete_data_points(
        self, company_name: str, year: int, data_point_types: Iterable[str]
    ) -> int:
        """Delete the selected data points of one company/year with their
        evidence and feedback (caller must commit). Returns records deleted.
        """
        types = list(data_point_types)
        if not types:
            return 0

        ids = [
            row[0]
            for row in self.db.query(self.model.id).filter(
                self.model.company_name == company_name,
                self.model.year == year,
                self.model.data_point_type.in_(types),
            )
        ]
        return self.delete_by_ids(ids)

    def delete_by_ids(self, ids: List[int]) -> int:
        """Owned rows go first so the delete also holds where FKs are not enforced."""
        if not ids:
            return 0
        self.db.query(EvidenceModel).filter(EvidenceModel.data_id.in_(ids)).delete(
            synchronize_session=False
        )
        self.db.query(FeedbackModel).filter(FeedbackModel.data_id.in_(ids)).delete(
            synchronize_session=False
        )
        count = (
            self.db.query(self.model)
            .filter(self.model.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.db.flush()
        self.db.expire_all()
        return count

    def add_placeholder_if_missing(self, company_name: str, year: int) -> Optional[EmissionModel]:
        """Insert an empty "Init" row unless the company/year already has one.

        Returns the new row, or None when the company/year already exists.
        """
        if self.exists_for_company_year(company_name, year):
            return None
        return self.create(
            EmissionModel(
                company_name=company_name,
                year=year,
                data_point_type=INIT_LABEL,
                source_documents=[],
            )
        )
