"""Dependency Injection Container.

Centralized definition of all application dependencies using dependency-injector.
Used by the command-line scripts; FastAPI builds per-request services in
``dependencies.py``.

Usage::

    from emissions_dashboard.container import AppContainer

    container = AppContainer()
    container.init_resources()  # Create tables, open the session

    rerun_svc = container.rerun_service()
    rerun_svc.rerun_with_links({...})

    container.shutdown_resources()
"""

from dependency_injector import containers, providers

from emissions_dashboard.clients.analysis_client import AnalysisClient
from emissions_dashboard.config import Settings
from emissions_dashboard.database import Base, build_engine, build_session_factory
from emissions_dashboard.repositories.emission_repo import EmissionRepository
from emissions_dashboard.repositories.evidence_repo import EvidenceRepository
from emissions_dashboard.repositories.feedback_repo import FeedbackRepository
from emissions_dashboard.services.company_service import CompanyService
from emissions_dashboard.services.dashboard_service import DashboardService
from emissions_dashboard.services.feedback_service import FeedbackService
from emissions_dashboard.services.rerun_service import RerunService


def _init_database(engine):
    """Initialize database schema."""
    import emissions_dashboard.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


def _open_session(factory):
    session = factory()
    yield session
    session.close()


def _open_client(url, timeout):
    client = AnalysisClient(url=url, timeout=timeout)
    yield client
    client.close()


class AppContainer(containers.DeclarativeContainer):
    """Application Dependency Injection Container.

    Defines all application dependencies in one place:
    - Configuration (Settings)
    - Database (engine, session)
    - Repositories (data access)
    - Clients (analysis service)
    - Services (orchestration)
    """

    # ══════════════════════════════════════════════════════════════════
    # CONFIGURATION
    # ══════════════════════════════════════════════════════════════════

    settings = providers.Singleton(Settings)

    # ══════════════════════════════════════════════════════════════════
    # DATABASE
    # ══════════════════════════════════════════════════════════════════

    db_engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=False,
    )

    db_initialized = providers.Resource(
        _init_database,
        engine=db_engine,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=db_engine,
    )

    # Single session per container instance, closed on shutdown
    db_session = providers.Resource(
        _open_session,
        factory=session_factory,
    )

    # ══════════════════════════════════════════════════════════════════
    # REPOSITORIES (Data Access Layer)
    # ══════════════════════════════════════════════════════════════════

    emission_repo = providers.Factory(
        EmissionRepository,
        db=db_session,
    )

    evidence_repo = providers.Factory(
        EvidenceRepository,
        db=db_session,
    )

    feedback_repo = providers.Factory(
        FeedbackRepository,
        db=db_session,
    )

    # ══════════════════════════════════════════════════════════════════
    # EXTERNAL CLIENTS (Infrastructure)
    # ══════════════════════════════════════════════════════════════════

    analysis_client = providers.Resource(
        _open_client,
        url=settings.provided.analysis_url,
        timeout=settings.provided.analysis_timeout_seconds,
    )

    # ══════════════════════════════════════════════════════════════════
    # SERVICES (Orchestration Layer)
    # ══════════════════════════════════════════════════════════════════

    dashboard_service = providers.Factory(
        DashboardService,
        emission_repo=emission_repo,
    )

    rerun_service = providers.Factory(
        RerunService,
        db=db_session,
        analysis_client=analysis_client,
        emission_repo=emission_repo,
        evidence_repo=evidence_repo,
        secret_key=settings.provided.rerun_secret_key,
    )

    company_service = providers.Factory(
        CompanyService,
        db=db_session,
        emission_repo=emission_repo,
        secret_key=settings.provided.rerun_secret_key,
    )

    feedback_service = providers.Factory(
        FeedbackService,
        db=db_session,
        feedback_repo=feedback_repo,
    )
