"""Pydantic schemas for request/response validation and the analysis wire format."""

from emissions_dashboard.schemas.analysis import (
    AnalysisEvidence,
    AnalysisRequest,
    AnalysisResult,
    AnalysisSummary,
)
from emissions_dashboard.schemas.emission import DashboardView, EmissionRecord, Evidence
from emissions_dashboard.schemas.requests import (
    AddCompanyRequest,
    FeedbackRequest,
    RerunRequest,
    RerunTarget,
    SingleRerunRequest,
    parse_payload,
)
from emissions_dashboard.schemas.responses import MessageResponse, RerunOutcome

__all__ = [
    "AnalysisRequest", "AnalysisResult", "AnalysisSummary", "AnalysisEvidence",
    "EmissionRecord", "Evidence", "DashboardView",
    "AddCompanyRequest", "RerunRequest", "RerunTarget", "SingleRerunRequest",
    "FeedbackRequest", "parse_payload",
    "MessageResponse", "RerunOutcome",
]
