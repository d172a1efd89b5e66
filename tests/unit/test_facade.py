"""Tests for DashboardFacade - the decoupling layer between the UI/agent
interfaces and the services.

The facade is tested with a real in-memory DB but a mocked analysis
client so we never hit the real service.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from emissions_dashboard.config import Settings
from emissions_dashboard.errors import Conflict, NotFound, Unauthorized
from emissions_dashboard.facade import DashboardFacade
from emissions_dashboard.schemas.analysis import AnalysisResult
from emissions_dashboard.schemas.emission import DashboardView, EmissionRecord

SECRET = "test-secret"
LINK = "https://example.com/delta-2023.pdf"


def _answer(request):
    return [
        AnalysisResult.model_validate({
            "question": q,
            "summary": {"final_answer": f"answer {i}", "explanation": "e", "discrepancy": "None"},
            "source_documents": [LINK],
            "evidence": [{"quotes": "quote", "page_number": i + 1, "document_name": LINK}],
        })
        for i, q in enumerate(request.questions)
    ]


@pytest.fixture()
def facade(settings, fake_client):
    fake_client.analyze.side_effect = _answer
    f = DashboardFacade(settings=settings, analysis_client=fake_client)
    yield f
    f.close()


@pytest.fixture()
def seeded(facade):
    """Delta Corp 2023 with Revenue and Scope 1."""
    facade.add_company({"companyName": "Delta Corp", "year": 2023, "secretKey": SECRET})
    facade.rerun_with_links({
        "companyName": "Delta Corp",
        "year": 2023,
        "secretKey": SECRET,
        "customLinks": [LINK],
        "targets": ["Scope 1", "Revenue"],
    })
    return facade


class TestFacadeReads:
    def test_dashboard(self, seeded):
        view = seeded.get_dashboard()

        assert isinstance(view, DashboardView)
        assert view.companies == ["Delta Corp"]
        assert view.columns == ["Revenue", "Scope 1"]

    def test_get_record(self, seeded):
        record_id = seeded.get_dashboard().data["Delta Corp"][2023]["Scope 1"].id

        record = seeded.get_record(record_id)

        assert isinstance(record, EmissionRecord)
        assert record.evidence[0].page_number == 1

    def test_get_record_missing(self, facade):
        with pytest.raises(NotFound):
            facade.get_record(1)

    def test_list_companies(self, seeded):
        assert seeded.list_companies() == [{
            "company_name": "Delta Corp",
            "years": [2023],
            "data_points": ["Revenue", "Scope 1"],
        }]

    def test_list_companies_skips_placeholder(self, facade):
        facade.add_company({"companyName": "Echo Ltd", "year": 2024, "secretKey": SECRET})

        assert facade.list_companies() == [
            {"company_name": "Echo Ltd", "years": [2024], "data_points": []}
        ]

    def test_get_company_data(self, seeded):
        data = seeded.get_company_data("Delta Corp")

        assert data["columns"] == ["Revenue", "Scope 1"]
        assert data["years"][2023]["Revenue"]["final_answer"] == "answer 1"
        assert data["years"][2023]["Revenue"]["approval_level"] == "no_votes"

    def test_get_company_data_unknown(self, facade):
        assert facade.get_company_data("Nobody") is None


class TestFacadeMutations:
    def test_feedback_visible_in_dashboard(self, seeded):
        record_id = seeded.get_dashboard().data["Delta Corp"][2023]["Revenue"].id

        result = seeded.submit_feedback({"dataId": record_id, "isThumbUp": True})

        assert result == {"message": "Feedback submitted successfully!"}
        cell = seeded.get_dashboard().data["Delta Corp"][2023]["Revenue"]
        assert cell.thumbs_up_count == 1
        assert cell.approval_rating == 100

    def test_rerun_returns_plain_dict(self, seeded):
        outcome = seeded.rerun_with_links({
            "companyName": "Delta Corp",
            "year": 2023,
            "secretKey": SECRET,
            "customLinks": [LINK],
            "targets": ["Scope 3"],
        })

        assert outcome["refreshed"] == ["Scope 3"]
        assert "Scope 3" in seeded.get_dashboard().columns

    def test_rerun_with_edited_question(self, seeded, fake_client):
        question = "What were Delta Corp's total scope 3 emissions in 2023, in tCO2e?"

        outcome = seeded.rerun_with_links({
            "companyName": "Delta Corp",
            "year": 2023,
            "secretKey": SECRET,
            "customLinks": [LINK],
            "targets": [{"label": "Scope 3", "question": question}],
        })

        assert fake_client.analyze.call_args.args[0].questions == [question]
        assert outcome["refreshed"] == ["Scope 3"]

    def test_rerun_single(self, seeded):
        outcome = seeded.rerun_single({
            "companyName": "Delta Corp",
            "year": 2023,
            "dataPointType": "Scope 1",
            "secretKey": SECRET,
        })
        assert outcome["refreshed"] == ["Scope 1"]

    def test_errors_propagate(self, seeded):
        with pytest.raises(Conflict):
            seeded.add_company({"companyName": "Delta Corp", "year": 2023, "secretKey": SECRET})
        with pytest.raises(Unauthorized):
            seeded.add_company({"companyName": "Echo", "year": 2023, "secretKey": "x"})


class TestFacadeLifecycle:
    def test_context_manager_closes_client(self, settings, fake_client):
        with DashboardFacade(settings=settings, analysis_client=fake_client) as f:
            f.get_dashboard()
        fake_client.close.assert_called_once()

    def test_requires_configuration(self, monkeypatch):
        monkeypatch.delenv("ANALYSIS_URL", raising=False)
        monkeypatch.delenv("RERUN_SECRET_KEY", raising=False)

        with pytest.raises(ValueError):
            DashboardFacade(settings=Settings(_env_file=None))


class TestFacadeConcurrency:
    """One facade is shared by every Streamlit session and MCP call."""

    @pytest.fixture()
    def shared(self, tmp_path, fake_client):
        settings = Settings(
            database_url=f"sqlite:///{tmp_path / 'dashboard.db'}",
            analysis_url="http://analysis.test/analyze",
            rerun_secret_key=SECRET,
        )
        f = DashboardFacade(settings=settings, analysis_client=fake_client)
        yield f
        f.close()

    def test_simultaneous_votes_are_all_counted(self, shared):
        shared.add_company({"companyName": "Foxtrot plc", "year": 2023, "secretKey": SECRET})
        record_id = shared.get_dashboard().data["Foxtrot plc"][2023]["Init"].id
        threads, votes_each = 4, 10

        def vote(i):
            for _ in range(votes_each):
                shared.submit_feedback({"dataId": record_id, "isThumbUp": i % 2 == 0})

        with ThreadPoolExecutor(max_workers=threads) as pool:
            list(pool.map(vote, range(threads)))

        record = shared.get_record(record_id)
        assert record.thumbs_up_count == threads // 2 * votes_each
        assert record.thumbs_down_count == threads // 2 * votes_each

    def test_reads_alongside_writes(self, shared):
        shared.add_company({"companyName": "Golf AG", "year": 2022, "secretKey": SECRET})
        record_id = shared.get_dashboard().data["Golf AG"][2022]["Init"].id

        def work(i):
            if i % 2:
                return shared.submit_feedback({"dataId": record_id, "isThumbUp": True})
            return shared.get_dashboard()

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(work, range(8)))

        assert sum(isinstance(r, dict) for r in results) == 4
        assert shared.get_record(record_id).thumbs_up_count == 4
