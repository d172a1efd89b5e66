"""Emission data ORM model: one value per (company, year, data point)."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from emissions_dashboard.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmissionModel(Base):
    __tablename__ = "emissions_data"
    __table_args__ = (
        UniqueConstraint(
            "company_name", "year", "data_point_type", name="uq_emission_company_year_type"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(String, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    data_point_type = Column(String, nullable=False)  # canonical label, "Unknown" or "Init"

    final_answer = Column(Text)
    explanation = Column(Text)
    discrepancy = Column(Text)  # "None" or NULL → no conflict between sources
    source_documents = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    thumbs_up_count = Column(Integer, nullable=False, default=0)
    thumbs_down_count = Column(Integer, nullable=False, default=0)

    # Relationships
    evidence = relationship(
        "EvidenceModel",
        back_populates="emission",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="EvidenceModel.id",
    )
    feedback = relationship(
        "FeedbackModel",
        back_populates="emission",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Emission {self.company_name} {self.year} {self.data_point_type}>"
