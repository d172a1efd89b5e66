"""Shared test fixtures.

Every test gets a fresh in-memory SQLite database so tests are fully isolated.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from emissions_dashboard.clients.analysis_client import AnalysisClient
from emissions_dashboard.config import Settings
from emissions_dashboard.database import Base
from emissions_dashboard.models.emission import EmissionModel
from emissions_dashboard.models.evidence import EvidenceModel

import emissions_dashboard.models  # noqa: F401

SECRET = "test-secret"


@pytest.fixture()
def db_engine():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(db_engine) -> Session:
    session = sessionmaker(bind=db_engine)()
    yield session
    session.close()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url="sqlite:///:memory:",
        analysis_url="http://analysis.test/analyze",
        rerun_secret_key=SECRET,
    )


@pytest.fixture()
def fake_client() -> MagicMock:
    """Analysis client double; set ``fake_client.analyze.return_value``."""
    client = MagicMock(spec=AnalysisClient)
    client.analyze.return_value = []
    return client


# ── Convenience fixtures ─────────────────────────────────────────────────

@pytest.fixture()
def acme_2023(db: Session) -> dict[str, EmissionModel]:
    """Acme Corp 2023: Revenue and Scope 1 (with evidence and one vote)."""
    revenue = EmissionModel(
        company_name="Acme Corp",
        year=2023,
        data_point_type="Revenue",
        final_answer="$12.4 billion",
        explanation="Total revenue from the consolidated income statement.",
        discrepancy="None",
        source_documents=["https://example.com/acme-2023-annual-report.pdf"],
    )
    scope_1 = EmissionModel(
        company_name="Acme Corp",
        year=2023,
        data_point_type="Scope 1",
        final_answer="1,250,000 tCO2e",
        explanation="Direct emissions reported in the sustainability report.",
        discrepancy="Annual report states 1.3 Mt.",
        source_documents=[
            "https://example.com/acme-2023-annual-report.pdf",
            "https://example.com/acme-2023-sustainability.pdf",
        ],
        thumbs_up_count=3,
        thumbs_down_count=1,
    )
    db.add_all([revenue, scope_1])
    db.flush()
    db.add(
        EvidenceModel(
            data_id=scope_1.id,
            answer="1,250,000 tCO2e",
            explanation="Table 4, GHG inventory",
            quotes="Scope 1 emissions: 1,250,000 tCO2e",
            page_number=42,
            document_name="https://example.com/acme-2023-sustainability.pdf",
        )
    )
    db.commit()
    return {"Revenue": revenue, "Scope 1": scope_1}


@pytest.fixture()
def beta_placeholder(db: Session) -> EmissionModel:
    """Beta Industries 2024, added but never re-run."""
    row = EmissionModel(
        company_name="Beta Industries",
        year=2024,
        data_point_type="Init",
        source_documents=[],
    )
    db.add(row)
    db.commit()
    return row
