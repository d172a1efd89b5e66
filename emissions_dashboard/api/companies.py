"""Company endpoints - add a company/year to the dashboard."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from emissions_dashboard.dependencies import get_company_service
from emissions_dashboard.errors import DashboardError
from emissions_dashboard.logging_config import get_logger
from emissions_dashboard.schemas.responses import MessageResponse
from emissions_dashboard.services.company_service import CompanyService

logger = get_logger(__name__)
router = APIRouter()


@router.post("/", response_model=MessageResponse)
def add_company(
    payload: Any = Body(None),
    service: CompanyService = Depends(get_company_service),
) -> MessageResponse:
    """Add an empty company/year row, ready for its first re-run.

    Body: ``{companyName, year, secretKey}``. 409 if it already exists.
    """
    logger.info("add_company_requested")

    try:
        result = service.add_company(payload)
        logger.info("add_company_completed")
        return result

    except DashboardError as e:
        logger.warning("add_company_rejected", code=e.code, error=e.message)
        raise
    except Exception as e:
        logger.error("add_company_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to add company: {str(e)}")
