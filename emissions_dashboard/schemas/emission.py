"""Emission and evidence schemas returned by the read endpoints."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from emissions_dashboard.domain.approval import ApprovalLevel, approval_level, approval_rating


class Evidence(BaseModel):
    id: int
    data_id: int
    answer: Optional[str] = None
    explanation: Optional[str] = None
    quotes: Optional[str] = None
    page_number: Optional[int] = None
    document_name: Optional[str] = None

    model_config = {"from_attributes": True}


class EmissionRecord(BaseModel):
    """One dashboard cell: a value, its provenance and its feedback."""

    id: int
    company_name: str
    year: int
    data_point_type: str
    final_answer: Optional[str] = None
    explanation: Optional[str] = None
    discrepancy: Optional[str] = None
    source_documents: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    thumbs_up_count: int = 0
    thumbs_down_count: int = 0
    evidence: List[Evidence] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def approval_rating(self) -> Optional[int]:
        return approval_rating(self.thumbs_up_count, self.thumbs_down_count)

    @computed_field
    @property
    def approval_level(self) -> ApprovalLevel:
        return approval_level(self.approval_rating)

    @property
    def has_discrepancy(self) -> bool:
        return bool(self.discrepancy) and self.discrepancy.strip().lower() != "none"


class DashboardView(BaseModel):
    """Reconciled dashboard: companies in display order, columns in canonical order."""

    companies: List[str]
    columns: List[str]
    data: Dict[str, Dict[int, Dict[str, EmissionRecord]]]
