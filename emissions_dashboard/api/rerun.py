"""Re-run endpoints - re-extract data points through the analysis service.

Both endpoints block until the analysis service answers.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from emissions_dashboard.dependencies import get_rerun_service
from emissions_dashboard.errors import DashboardError
from emissions_dashboard.logging_config import get_logger
from emissions_dashboard.schemas.responses import RerunOutcome
from emissions_dashboard.services.rerun_service import RerunService

logger = get_logger(__name__)
router = APIRouter()


@router.post("/with-links", response_model=RerunOutcome)
def rerun_with_links(
    payload: Any = Body(None),
    service: RerunService = Depends(get_rerun_service),
) -> RerunOutcome:
    """Replace selected data points of a company/year with fresh answers.

    Body: ``{companyName, year, secretKey, customLinks, targets}`` where each
    target is a data point label or ``{label, question}``.
    """
    logger.info("rerun_requested")

    try:
        outcome = service.rerun_with_links(payload)
        logger.info(
            "rerun_completed",
            refreshed=outcome.refreshed,
            skipped=len(outcome.skipped),
            failed=outcome.failed,
        )
        return outcome

    except DashboardError as e:
        logger.warning("rerun_rejected", code=e.code, error=e.message)
        raise
    except Exception as e:
        logger.error("rerun_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Re-run failed: {str(e)}")


@router.post("/single", response_model=RerunOutcome)
def rerun_single(
    payload: Any = Body(None),
    service: RerunService = Depends(get_rerun_service),
) -> RerunOutcome:
    """Re-extract one data point from the documents it was built from.

    Body: ``{companyName, year, dataPointType, secretKey, question?}``.
    """
    logger.info("single_rerun_requested")

    try:
        outcome = service.rerun_single(payload)
        logger.info("single_rerun_completed", refreshed=outcome.refreshed)
        return outcome

    except DashboardError as e:
        logger.warning("single_rerun_rejected", code=e.code, error=e.message)
        raise
    except Exception as e:
        logger.error("single_rerun_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Re-run failed: {str(e)}")
