"""Feedback endpoint - thumbs-up/down votes on data points."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from emissions_dashboard.dependencies import get_feedback_service
from emissions_dashboard.errors import DashboardError
from emissions_dashboard.logging_config import get_logger
from emissions_dashboard.schemas.responses import MessageResponse
from emissions_dashboard.services.feedback_service import FeedbackService

logger = get_logger(__name__)
router = APIRouter()


@router.post("/", response_model=MessageResponse)
def submit_feedback(
    payload: Any = Body(None),
    service: FeedbackService = Depends(get_feedback_service),
) -> MessageResponse:
    """Body: ``{dataId, isThumbUp, email?, comment?}``."""
    try:
        result = service.submit_feedback(payload)
        logger.info("feedback_submitted")
        return result

    except DashboardError as e:
        logger.warning("feedback_rejected", code=e.code, error=e.message)
        raise
    except Exception as e:
        logger.error("feedback_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to submit feedback: {str(e)}")
