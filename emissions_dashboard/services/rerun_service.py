"""Re-extracts selected data points of one company/year from new documents."""

import hmac
import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emissions_dashboard.clients.analysis_client import AnalysisClient
from emissions_dashboard.domain.data_points import UNKNOWN_LABEL
from emissions_dashboard.engines.answer_classifier import classify
from emissions_dashboard.engines.question_deriver import derive_question, merge_keywords
from emissions_dashboard.errors import (
    BadRequest,
    NotFound,
    PersistenceError,
    Unauthorized,
    UpstreamError,
)
from emissions_dashboard.models.emission import EmissionModel
from emissions_dashboard.models.evidence import EvidenceModel
from emissions_dashboard.repositories.emission_repo import EmissionRepository
from emissions_dashboard.repositories.evidence_repo import EvidenceRepository
from emissions_dashboard.schemas.analysis import AnalysisRequest, AnalysisResult
from emissions_dashboard.schemas.requests import (
    RerunRequest,
    SingleRerunRequest,
    parse_payload,
)
from emissions_dashboard.schemas.responses import RerunOutcome

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "Analysis complete, but no data was returned to save."


def authorize(payload: Any, secret_key: str) -> None:
    """Raise ``Unauthorized`` unless the payload carries the shared secret.

    Runs before payload validation, so a caller without the secret learns
    nothing about the shape of the request.
    """
    provided = None
    if isinstance(payload, Mapping):
        provided = payload.get("secretKey", payload.get("secret_key"))
    if not isinstance(provided, str) or not hmac.compare_digest(
        provided.encode("utf-8"), secret_key.encode("utf-8")
    ):
        raise Unauthorized()


class RerunService:
    def __init__(
        self,
        db: Session,
        analysis_client: AnalysisClient,
        emission_repo: EmissionRepository,
        evidence_repo: EvidenceRepository,
        secret_key: str,
    ):
        self.db = db
        self.client = analysis_client
        self.emissions = emission_repo
        self.evidence = evidence_repo
        self.secret_key = secret_key

    # ── operations ───────────────────────────────────────────────────

    def rerun_with_links(self, payload: Any) -> RerunOutcome:
        """Delete the selected data points and extract them again from
        ``customLinks``.

        Nothing is written before the request is authorized and validated.
        The deletion is committed before the analysis service is called, so
        if the call fails the data points stay empty until the next re-run.
        """
        authorize(payload, self.secret_key)
        request = parse_payload(RerunRequest, payload)

        logger.info(
            "Re-running %s for %s %d against %d link(s)",
            request.labels,
            request.company_name,
            request.year,
            len(request.custom_links),
        )
        self._delete(request.company_name, request.year, request.labels)

        questions = [
            t.question or derive_question(t.label, request.company_name, request.year)
            for t in request.targets
        ]
        results = self.client.analyze(
            AnalysisRequest(
                pdf_urls=request.custom_links,
                questions=questions,
                keywords=merge_keywords(questions),
            )
        )

        if not results:
            logger.warning(
                "Analysis returned no results for %s %d", request.company_name, request.year
            )
            return RerunOutcome(message=NO_DATA_MESSAGE)

        outcome = self._save_results(request.company_name, request.year, results)
        outcome.message = _outcome_message(request.company_name, outcome)
        return outcome

    def rerun_single(self, payload: Any) -> RerunOutcome:
        """Re-extract one data point against the documents it was built from.

        Unlike ``rerun_with_links`` every failure is escalated: an empty
        answer raises ``UpstreamError``, a failed insert ``PersistenceError``.
        """
        authorize(payload, self.secret_key)
        request = parse_payload(SingleRerunRequest, payload)

        existing = self.emissions.get_for_data_point(
            request.company_name, request.year, request.data_point_type
        )
        if existing is None:
            raise NotFound(
                f"No {request.data_point_type} data for {request.company_name} {request.year}."
            )
        sources = list(existing.source_documents or [])
        if not sources:
            raise BadRequest(
                "This data point has no source documents to re-run against.",
                field="data_point_type",
            )

        self._delete_ids([existing.id])

        question = request.question or derive_question(
            request.data_point_type, request.company_name, request.year
        )
        results = self.client.analyze(
            AnalysisRequest(
                pdf_urls=sources,
                questions=[question],
                keywords=merge_keywords([question]),
            )
        )
        if not results:
            raise UpstreamError(
                f"Analysis returned no result for {request.data_point_type} of "
                f"{request.company_name} {request.year}."
            )

        result = results[0]
        try:
            record = self._insert_record(
                request.company_name, request.year, request.data_point_type, result
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(
                "Could not save %s for %s %d",
                request.data_point_type,
                request.company_name,
                request.year,
            )
            raise PersistenceError(f"Could not save {request.data_point_type}: {exc}") from exc

        self._save_evidence(record, result)
        return RerunOutcome(
            message=f"Successfully refreshed {request.data_point_type} for {request.company_name}.",
            refreshed=[request.data_point_type],
        )

    # ── persistence ──────────────────────────────────────────────────

    def _delete(self, company_name: str, year: int, labels: List[str]) -> None:
        try:
            deleted = self.emissions.delete_data_points(company_name, year, labels)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Delete failed for %s %d", company_name, year)
            raise PersistenceError(f"Could not delete existing data: {exc}") from exc
        logger.info("Deleted %d record(s) for %s %d", deleted, company_name, year)

    def _delete_ids(self, ids: List[int]) -> None:
        try:
            self.emissions.delete_by_ids(ids)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Delete failed for record(s) %s", ids)
            raise PersistenceError(f"Could not delete existing data: {exc}") from exc

    def _save_results(
        self, company_name: str, year: int, results: List[AnalysisResult]
    ) -> RerunOutcome:
        """Store each result independently; one bad result never stops the rest."""
        outcome = RerunOutcome(message="")

        for result in results:
            label = classify(result.question)
            if label == UNKNOWN_LABEL:
                logger.warning("Skipping result with unrecognised question: %r", result.question)
                outcome.skipped.append(result.question)
                continue

            try:
                record = self._insert_record(company_name, year, label, result)
                self.db.commit()  # Commit per record so one failure keeps the others
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Could not save %s for %s %d (rolled back)", label, company_name, year)
                outcome.failed.append(label)
                continue

            self._save_evidence(record, result)
            outcome.refreshed.append(label)

        return outcome

    def _insert_record(
        self, company_name: str, year: int, label: str, result: AnalysisResult
    ) -> EmissionModel:
        return self.emissions.create(
            EmissionModel(
                company_name=company_name,
                year=year,
                data_point_type=label,
                final_answer=result.summary.final_answer,
                explanation=result.summary.explanation,
                discrepancy=result.summary.discrepancy,
                source_documents=list(result.source_documents),
            )
        )

    def _save_evidence(self, record: EmissionModel, result: AnalysisResult) -> Optional[int]:
        """Insert the evidence rows of a stored record. Returns rows saved,
        or None when the insert failed and was rolled back (the record stays).
        """
        if not result.evidence:
            return 0
        record_id = record.id
        try:
            self.evidence.create_many(
                [
                    EvidenceModel(
                        data_id=record_id,
                        answer=ev.answer,
                        explanation=ev.explanation,
                        quotes=ev.quotes,
                        page_number=ev.page_number,
                        document_name=ev.document_name,
                    )
                    for ev in result.evidence
                ]
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Could not save evidence for record %d (rolled back)", record_id)
            return None
        return len(result.evidence)


def _outcome_message(company_name: str, outcome: RerunOutcome) -> str:
    if outcome.refreshed:
        message = (
            f"Successfully re-ran analysis for {company_name}. "
            f"Refreshed: {', '.join(outcome.refreshed)}."
        )
    else:
        message = f"Analysis complete for {company_name}, but no data points could be saved."
    if outcome.skipped:
        message += f" Skipped {len(outcome.skipped)} unrecognised result(s)."
    if outcome.failed:
        message += f" Failed to save: {', '.join(outcome.failed)}."
    return message
