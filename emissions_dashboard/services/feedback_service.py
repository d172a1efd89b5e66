"""Records thumbs-up/down votes on dashboard values."""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emissions_dashboard.errors import NotFound, PersistenceError
from emissions_dashboard.repositories.feedback_repo import FeedbackRepository
from emissions_dashboard.schemas.requests import FeedbackRequest, parse_payload
from emissions_dashboard.schemas.responses import MessageResponse

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, db: Session, feedback_repo: FeedbackRepository):
        self.db = db
        self.feedback = feedback_repo

    def submit_feedback(self, payload: Any) -> MessageResponse:
        """Count one vote and keep its optional email and comment.

        The counter increment and the feedback row commit together or not
        at all. Votes need no secret.
        """
        request = parse_payload(FeedbackRequest, payload)

        try:
            vote = self.feedback.record_vote(
                data_id=request.data_id,
                is_thumb_up=request.is_thumb_up,
                email=request.email,
                comment=request.comment,
            )
            if vote is None:
                self.db.rollback()
                raise NotFound(f"No data point with id {request.data_id}.")
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Could not record feedback for record %d", request.data_id)
            raise PersistenceError(f"Could not record feedback: {exc}") from exc

        logger.info(
            "Recorded %s vote for record %d",
            "up" if request.is_thumb_up else "down",
            request.data_id,
        )
        return MessageResponse(message="Feedback submitted successfully!")
