"""Dashboard facade - single entry point for the non-HTTP interfaces.

Streamlit, the MCP server and scripts use this instead of wiring up
services directly. If the internal wiring changes (new repos, different
clients, etc.) only this file needs updating.

The facade holds the engines, session factories and analysis client, never
a session: every operation opens its own session and closes it before
returning, so one facade can serve many threads (Streamlit reruns, MCP
calls) at once.

Usage::

    facade = DashboardFacade()          # uses Settings() from .env
    view = facade.get_dashboard(order="recent")
    facade.submit_feedback({"dataId": 3, "isThumbUp": True})
    facade.close()
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Literal, Optional

from sqlalchemy.orm import Session, sessionmaker

from emissions_dashboard.clients.analysis_client import AnalysisClient
from emissions_dashboard.config import Settings
from emissions_dashboard.database import Base, build_engine, build_session_factory
from emissions_dashboard.domain.data_points import INIT_LABEL
from emissions_dashboard.repositories.emission_repo import EmissionRepository
from emissions_dashboard.repositories.evidence_repo import EvidenceRepository
from emissions_dashboard.repositories.feedback_repo import FeedbackRepository
from emissions_dashboard.schemas.emission import DashboardView, EmissionRecord
from emissions_dashboard.services.company_service import CompanyService
from emissions_dashboard.services.dashboard_service import DashboardService
from emissions_dashboard.services.feedback_service import FeedbackService
from emissions_dashboard.services.rerun_service import RerunService

import emissions_dashboard.models  # noqa: F401 - register all models with Base.metadata

logger = logging.getLogger(__name__)


class DashboardFacade:
    """High-level API for the emissions dashboard.

    Hides all internal wiring (repos, services, clients). Returns only
    Pydantic schemas and plain dicts, never ORM models. Operations raise
    the same ``DashboardError`` subclasses as the HTTP API.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        analysis_client: Optional[AnalysisClient] = None,
    ):
        self._settings = settings or Settings()
        self._setup_db()
        self._client = analysis_client or AnalysisClient(
            url=self._settings.analysis_url,
            timeout=self._settings.analysis_timeout_seconds,
        )

    # ── internal wiring (private) ─────────────────────────────────────

    def _setup_db(self) -> None:
        s = self._settings
        self._engine = build_engine(s.database_url, echo=False)
        Base.metadata.create_all(bind=self._engine)
        self._session_factory = build_session_factory(self._engine)

        if s.read_database_url == s.database_url:
            self._read_engine = None
            self._read_session_factory = self._session_factory
        else:
            self._read_engine = build_engine(s.read_database_url, echo=False)
            self._read_session_factory = build_session_factory(self._read_engine)

    @contextmanager
    def _session(self, factory: sessionmaker) -> Iterator[Session]:
        db = factory()
        try:
            yield db
        finally:
            db.close()

    def _rerun_service(self, db: Session) -> RerunService:
        return RerunService(
            db=db,
            analysis_client=self._client,
            emission_repo=EmissionRepository(db),
            evidence_repo=EvidenceRepository(db),
            secret_key=self._settings.rerun_secret_key,
        )

    # ══════════════════════════════════════════════════════════════════
    # READ-ONLY QUERIES
    # ══════════════════════════════════════════════════════════════════

    def get_dashboard(self, order: Literal["company", "recent"] = "company") -> DashboardView:
        with self._session(self._read_session_factory) as db:
            return DashboardService(EmissionRepository(db)).get_dashboard(order)

    def get_record(self, record_id: int) -> EmissionRecord:
        with self._session(self._read_session_factory) as db:
            return DashboardService(EmissionRepository(db)).get_record(record_id)

    def list_companies(self) -> List[Dict[str, Any]]:
        """Every company with its years and the data points it has.

        The placeholder row of a newly added company is not a data point.
        """
        view = self.get_dashboard()
        out: List[Dict[str, Any]] = []
        for company in view.companies:
            years = view.data[company]
            out.append({
                "company_name": company,
                "years": sorted(years, reverse=True),
                "data_points": sorted({
                    label
                    for cells in years.values()
                    for label in cells
                    if label != INIT_LABEL
                }),
            })
        return out

    def get_company_data(self, company_name: str) -> Optional[Dict[str, Any]]:
        """All data points of one company keyed by year, or None if unknown."""
        view = self.get_dashboard()
        years = view.data.get(company_name)
        if years is None:
            return None
        return {
            "company_name": company_name,
            "columns": view.columns,
            "years": {
                year: {label: record.model_dump(mode="json") for label, record in cells.items()}
                for year, cells in sorted(years.items(), reverse=True)
            },
        }

    # ══════════════════════════════════════════════════════════════════
    # MUTATIONS
    # ══════════════════════════════════════════════════════════════════

    def add_company(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        with self._session(self._session_factory) as db:
            service = CompanyService(
                db=db,
                emission_repo=EmissionRepository(db),
                secret_key=self._settings.rerun_secret_key,
            )
            return service.add_company(payload).model_dump()

    def rerun_with_links(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        with self._session(self._session_factory) as db:
            return self._rerun_service(db).rerun_with_links(payload).model_dump()

    def rerun_single(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        with self._session(self._session_factory) as db:
            return self._rerun_service(db).rerun_single(payload).model_dump()

    def submit_feedback(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        with self._session(self._session_factory) as db:
            service = FeedbackService(db=db, feedback_repo=FeedbackRepository(db))
            return service.submit_feedback(payload).model_dump()

    # ── lifecycle ─────────────────────────────────────────────────────

    def close(self) -> None:
        """Release pooled connections and close the analysis client."""
        if self._read_engine is not None:
            self._read_engine.dispose()
        self._engine.dispose()
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
