"""Emission data endpoints - the reconciled dashboard and single records.

Reads go to the read-only store when one is configured.
"""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from emissions_dashboard.dependencies import get_dashboard_service
from emissions_dashboard.errors import DashboardError
from emissions_dashboard.logging_config import get_logger
from emissions_dashboard.schemas.emission import DashboardView, EmissionRecord
from emissions_dashboard.services.dashboard_service import DashboardService

logger = get_logger(__name__)
router = APIRouter()


@router.get("/", response_model=DashboardView)
def get_dashboard(
    order: Literal["company", "recent"] = Query(
        "company", description="'company' (alphabetical) or 'recent' (newest first)"
    ),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardView:
    """Every company's data points grouped by company, year and data point.

    Columns come in canonical order (Revenue, Scope 1, Scope 2
    (Market-based), Scope 3, then any others).
    """
    logger.info("dashboard_requested", order=order)

    try:
        view = service.get_dashboard(order)
        logger.info("dashboard_completed", companies=len(view.companies), columns=len(view.columns))
        return view

    except DashboardError:
        raise
    except Exception as e:
        logger.error("dashboard_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to load dashboard: {str(e)}")


@router.get("/{record_id}", response_model=EmissionRecord)
def get_record(
    record_id: int,
    service: DashboardService = Depends(get_dashboard_service),
) -> EmissionRecord:
    """One data point with its evidence and approval rating."""
    logger.info("record_requested", record_id=record_id)

    try:
        return service.get_record(record_id)

    except DashboardError:
        raise
    except Exception as e:
        logger.error("record_fetch_failed", record_id=record_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to load record: {str(e)}")
