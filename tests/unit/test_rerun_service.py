"""Unit tests for RerunService - authorization, delete-then-extract
orchestration and per-record failure isolation.
"""

import logging
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from emissions_dashboard.errors import BadRequest, NotFound, PersistenceError, Unauthorized, UpstreamError
from emissions_dashboard.models.emission import EmissionModel
from emissions_dashboard.models.evidence import EvidenceModel
from emissions_dashboard.models.feedback import FeedbackModel
from emissions_dashboard.repositories.emission_repo import EmissionRepository
from emissions_dashboard.repositories.evidence_repo import EvidenceRepository
from emissions_dashboard.schemas.analysis import AnalysisResult
from emissions_dashboard.services.rerun_service import NO_DATA_MESSAGE, RerunService

SECRET = "test-secret"
LINK = "https://example.com/acme-2024-report.pdf"


def _result(question, answer="42", evidence=None, sources=(LINK,)):
    return AnalysisResult.model_validate({
        "question": question,
        "summary": {"final_answer": answer, "explanation": "from table 3", "discrepancy": "None"},
        "source_documents": list(sources),
        "evidence": evidence or [],
    })


def _payload(**overrides):
    payload = {
        "companyName": "Acme Corp",
        "year": 2023,
        "secretKey": SECRET,
        "customLinks": [LINK],
        "targets": ["Scope 1"],
    }
    payload.update(overrides)
    return payload


def _service(db, client, evidence_repo=None):
    return RerunService(
        db=db,
        analysis_client=client,
        emission_repo=EmissionRepository(db),
        evidence_repo=evidence_repo or EvidenceRepository(db),
        secret_key=SECRET,
    )


def _records(db, company="Acme Corp", year=2023):
    return {
        r.data_point_type: r
        for r in db.query(EmissionModel).filter_by(company_name=company, year=year)
    }


# ── Authorization & validation ───────────────────────────────────────────


class TestRerunGuards:
    @pytest.mark.parametrize("secret", ["wrong", "", None, 123])
    def test_bad_secret_has_no_side_effects(self, db, fake_client, acme_2023, secret):
        with pytest.raises(Unauthorized) as exc:
            _service(db, fake_client).rerun_with_links(_payload(secretKey=secret))

        assert exc.value.message == "Unauthorized: Invalid secret key."
        assert set(_records(db)) == {"Revenue", "Scope 1"}
        fake_client.analyze.assert_not_called()

    def test_missing_secret(self, db, fake_client):
        payload = _payload()
        del payload["secretKey"]

        with pytest.raises(Unauthorized):
            _service(db, fake_client).rerun_with_links(payload)

    def test_secret_checked_before_validation(self, db, fake_client):
        with pytest.raises(Unauthorized):
            _service(db, fake_client).rerun_with_links({"secretKey": "wrong"})

    def test_empty_links_rejected_before_delete(self, db, fake_client, acme_2023):
        with pytest.raises(BadRequest) as exc:
            _service(db, fake_client).rerun_with_links(_payload(customLinks=[]))

        assert exc.value.message == "You must provide at least one custom link."
        assert "Scope 1" in _records(db)
        fake_client.analyze.assert_not_called()

    def test_empty_targets_rejected_before_delete(self, db, fake_client, acme_2023):
        with pytest.raises(BadRequest):
            _service(db, fake_client).rerun_with_links(_payload(targets=[]))

        assert "Scope 1" in _records(db)


# ── Happy path ───────────────────────────────────────────────────────────


class TestRerunWithLinks:
    def test_replaces_selected_data_point(self, db, fake_client, acme_2023):
        old_id = acme_2023["Scope 1"].id
        fake_client.analyze.side_effect = lambda req: [
            _result(
                req.questions[0],
                answer="1,100,000 tCO2e",
                evidence=[{"quotes": "Scope 1: 1.1 Mt", "page_number": 12, "document_name": LINK}],
            )
        ]

        outcome = _service(db, fake_client).rerun_with_links(_payload())

        assert outcome.refreshed == ["Scope 1"]
        assert outcome.skipped == []
        assert outcome.failed == []
        assert "Acme Corp" in outcome.message and "Scope 1" in outcome.message

        records = _records(db)
        assert set(records) == {"Revenue", "Scope 1"}
        new = records["Scope 1"]
        assert new.id != old_id
        assert new.final_answer == "1,100,000 tCO2e"
        assert new.source_documents == [LINK]
        assert new.thumbs_up_count == 0 and new.thumbs_down_count == 0
        assert [e.page_number for e in new.evidence] == [12]
        # Old evidence went with the old record
        assert db.query(EvidenceModel).filter_by(data_id=old_id).count() == 0

    def test_unselected_data_points_untouched(self, db, fake_client, acme_2023):
        revenue_id = acme_2023["Revenue"].id
        fake_client.analyze.side_effect = lambda req: [_result(q) for q in req.questions]

        _service(db, fake_client).rerun_with_links(_payload())

        assert _records(db)["Revenue"].id == revenue_id

    def test_sends_one_request_with_derived_questions(self, db, fake_client):
        fake_client.analyze.return_value = []

        _service(db, fake_client).rerun_with_links(
            _payload(targets=["Revenue", {"label": "Scope 3", "question": "Total scope 3 in FY23?"}])
        )

        fake_client.analyze.assert_called_once()
        request = fake_client.analyze.call_args.args[0]
        assert request.pdf_urls == [LINK]
        assert request.questions[0].startswith("What was Acme Corp's total revenue in 2023?")
        assert request.questions[1] == "Total scope 3 in FY23?"
        assert request.keywords == ["revenue", "sale", "scope"]

    def test_no_results(self, db, fake_client, acme_2023):
        fake_client.analyze.return_value = []

        outcome = _service(db, fake_client).rerun_with_links(_payload())

        assert outcome.message == NO_DATA_MESSAGE
        assert outcome.refreshed == []
        # The delete stays committed
        assert set(_records(db)) == {"Revenue"}

    def test_adds_new_data_points(self, db, fake_client, beta_placeholder):
        fake_client.analyze.side_effect = lambda req: [_result(q) for q in req.questions]

        outcome = _service(db, fake_client).rerun_with_links(
            _payload(companyName="Beta Industries", year=2024, targets=["Revenue", "Scope 2 (Market-based)"])
        )

        assert outcome.refreshed == ["Revenue", "Scope 2 (Market-based)"]
        assert set(_records(db, "Beta Industries", 2024)) == {"Init", "Revenue", "Scope 2 (Market-based)"}

    def test_unknown_results_skipped_with_warning(self, db, fake_client, caplog):
        fake_client.analyze.return_value = [
            _result("How many employees does Acme have?"),
            _result("What was Acme Corp's total scope 1 in 2023?"),
        ]

        with caplog.at_level(logging.WARNING, logger="emissions_dashboard.services.rerun_service"):
            outcome = _service(db, fake_client).rerun_with_links(_payload())

        assert outcome.refreshed == ["Scope 1"]
        assert outcome.skipped == ["How many employees does Acme have?"]
        assert "Unknown" not in _records(db)
        assert any("unrecognised" in r.message for r in caplog.records)

    def test_feedback_of_replaced_record_is_deleted(self, db, fake_client, acme_2023):
        db.add(FeedbackModel(data_id=acme_2023["Scope 1"].id, is_thumb_up=True))
        db.commit()
        fake_client.analyze.return_value = []

        _service(db, fake_client).rerun_with_links(_payload())

        assert db.query(FeedbackModel).count() == 0


# ── Failures ─────────────────────────────────────────────────────────────


class TestRerunFailures:
    def test_upstream_error_after_delete(self, db, fake_client, acme_2023):
        fake_client.analyze.side_effect = UpstreamError("boom", upstream_status=500, upstream_body="down")

        with pytest.raises(UpstreamError) as exc:
            _service(db, fake_client).rerun_with_links(_payload())

        assert exc.value.upstream_status == 500
        # Deleted before dispatch, nothing re-inserted
        assert set(_records(db)) == {"Revenue"}

    def test_delete_failure_aborts(self, db, fake_client):
        repo = MagicMock(spec=EmissionRepository)
        repo.delete_data_points.side_effect = OperationalError("DELETE", {}, Exception("locked"))
        service = RerunService(db, fake_client, repo, EvidenceRepository(db), SECRET)

        with pytest.raises(PersistenceError):
            service.rerun_with_links(_payload())

        fake_client.analyze.assert_not_called()

    def test_evidence_failure_keeps_record(self, db, fake_client, caplog):
        evidence_repo = MagicMock(spec=EvidenceRepository)
        evidence_repo.create_many.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        fake_client.analyze.return_value = [
            _result("What was Acme Corp's total scope 1 in 2023?", evidence=[{"quotes": "q"}]),
        ]

        with caplog.at_level(logging.ERROR):
            outcome = _service(db, fake_client, evidence_repo).rerun_with_links(_payload())

        assert outcome.refreshed == ["Scope 1"]
        record = _records(db)["Scope 1"]
        assert record.final_answer == "42"
        assert record.evidence == []
        assert any("evidence" in r.message for r in caplog.records)

    def test_record_failure_does_not_stop_others(self, db, fake_client):
        # A duplicate Scope 1 in one response violates the unique constraint
        fake_client.analyze.return_value = [
            _result("What was Acme Corp's total scope 1 in 2023?", answer="first"),
            _result("What was Acme Corp's total scope 1 in 2023?", answer="second"),
            _result("What was Acme Corp's total revenue in 2023?", answer="$1bn"),
        ]

        outcome = _service(db, fake_client).rerun_with_links(
            _payload(targets=["Scope 1", "Revenue"])
        )

        assert outcome.refreshed == ["Scope 1", "Revenue"]
        assert outcome.failed == ["Scope 1"]
        records = _records(db)
        assert records["Scope 1"].final_answer == "first"
        assert records["Revenue"].final_answer == "$1bn"


# ── Single data point ────────────────────────────────────────────────────


class TestRerunSingle:
    def _payload(self, **overrides):
        payload = {
            "companyName": "Acme Corp",
            "year": 2023,
            "dataPointType": "Scope 1",
            "secretKey": SECRET,
        }
        payload.update(overrides)
        return payload

    def test_reuses_source_documents(self, db, fake_client, acme_2023):
        sources = list(acme_2023["Scope 1"].source_documents)
        fake_client.analyze.side_effect = lambda req: [_result(req.questions[0], answer="1.2 Mt", sources=sources)]

        outcome = _service(db, fake_client).rerun_single(self._payload())

        request = fake_client.analyze.call_args.args[0]
        assert request.pdf_urls == sources
        assert len(request.questions) == 1
        assert request.questions[0].startswith("What was Acme Corp's total scope 1 in 2023?")
        assert outcome.refreshed == ["Scope 1"]
        assert _records(db)["Scope 1"].final_answer == "1.2 Mt"

    def test_uses_supplied_question(self, db, fake_client, acme_2023):
        fake_client.analyze.side_effect = lambda req: [_result(req.questions[0])]

        _service(db, fake_client).rerun_single(self._payload(question="Scope 1 incl. subsidiaries?"))

        assert fake_client.analyze.call_args.args[0].questions == ["Scope 1 incl. subsidiaries?"]

    def test_stored_under_requested_label(self, db, fake_client, acme_2023):
        # The echoed question is not classified
        fake_client.analyze.return_value = [_result("something else entirely", answer="7")]

        _service(db, fake_client).rerun_single(self._payload())

        assert _records(db)["Scope 1"].final_answer == "7"

    def test_missing_record(self, db, fake_client, acme_2023):
        with pytest.raises(NotFound):
            _service(db, fake_client).rerun_single(self._payload(dataPointType="Scope 3"))
        fake_client.analyze.assert_not_called()

    def test_record_without_sources(self, db, fake_client, beta_placeholder):
        with pytest.raises(BadRequest):
            _service(db, fake_client).rerun_single(
                self._payload(companyName="Beta Industries", year=2024, dataPointType="Init")
            )

    def test_empty_result_fails_loudly(self, db, fake_client, acme_2023):
        fake_client.analyze.return_value = []

        with pytest.raises(UpstreamError):
            _service(db, fake_client).rerun_single(self._payload())

    def test_unauthorized(self, db, fake_client, acme_2023):
        with pytest.raises(Unauthorized):
            _service(db, fake_client).rerun_single(self._payload(secretKey="nope"))
        assert "Scope 1" in _records(db)
