"""Dependency injection / factory functions for FastAPI.

Every service is constructed here with its full dependency tree.
"""

from functools import lru_cache
from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from emissions_dashboard.clients.analysis_client import AnalysisClient
from emissions_dashboard.config import Settings
from emissions_dashboard.database import get_db, get_read_db
from emissions_dashboard.repositories.emission_repo import EmissionRepository
from emissions_dashboard.repositories.evidence_repo import EvidenceRepository
from emissions_dashboard.repositories.feedback_repo import FeedbackRepository
from emissions_dashboard.services.company_service import CompanyService
from emissions_dashboard.services.dashboard_service import DashboardService
from emissions_dashboard.services.feedback_service import FeedbackService
from emissions_dashboard.services.rerun_service import RerunService


@lru_cache
def get_settings() -> Settings:
    return Settings()


# ── Per-request ─────────────────────────────────────────────────────────

def get_analysis_client(settings: Settings = Depends(get_settings)) -> Iterator[AnalysisClient]:
    """One client per request, closed when the response is sent."""
    client = AnalysisClient(
        url=settings.analysis_url, timeout=settings.analysis_timeout_seconds
    )
    try:
        yield client
    finally:
        client.close()


def get_rerun_service(
    db: Session = Depends(get_db),
    client: AnalysisClient = Depends(get_analysis_client),
    settings: Settings = Depends(get_settings),
) -> RerunService:
    return RerunService(
        db=db,
        analysis_client=client,
        emission_repo=EmissionRepository(db),
        evidence_repo=EvidenceRepository(db),
        secret_key=settings.rerun_secret_key,
    )


def get_company_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CompanyService:
    return CompanyService(
        db=db,
        emission_repo=EmissionRepository(db),
        secret_key=settings.rerun_secret_key,
    )


def get_dashboard_service(db: Session = Depends(get_read_db)) -> DashboardService:
    return DashboardService(emission_repo=EmissionRepository(db))


def get_feedback_service(db: Session = Depends(get_db)) -> FeedbackService:
    return FeedbackService(db=db, feedback_repo=FeedbackRepository(db))
