"""FastAPI application entry point with structured logging and health checks."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from emissions_dashboard import __version__
from emissions_dashboard.api import companies, emissions, feedback, rerun
from emissions_dashboard.database import init_db
from emissions_dashboard.dependencies import get_settings
from emissions_dashboard.errors import BadRequest, DashboardError
from emissions_dashboard.health import router as health_router
from emissions_dashboard.logging_config import get_logger, setup_logging
from emissions_dashboard.schemas.responses import MessageResponse, RerunOutcome

# Setup structured logging
setup_logging(
    json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
    log_level=os.getenv("LOG_LEVEL", "INFO"),
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the FastAPI application."""
    logger.info("application_startup", version=__version__)
    # Missing ANALYSIS_URL / RERUN_SECRET_KEY fail here, not on the first request
    get_settings()
    init_db()
    logger.info("database_initialized")
    yield
    logger.info("application_shutdown")


app = FastAPI(
    title="Emissions Dashboard",
    description=(
        "Shows revenue and Scope 1/2/3 emissions disclosed by companies, "
        "re-extracts them from source documents on demand and collects "
        "reviewer feedback on every value."
    ),
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON bodies and bad query parameters are plain 400s."""
    errors = exc.errors()
    field = str(errors[0]["loc"][-1]) if errors and errors[0].get("loc") else None
    error = BadRequest("Request is not valid: check the body and query parameters.", field=field)
    return JSONResponse(status_code=error.http_status, content=error.to_response())


# CORS - restricted to the dashboard's own origins
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:8501").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)

# Health checks (no versioning)
app.include_router(health_router, tags=["health"])

# API Versioning - v1 endpoints
API_V1_PREFIX = "/api/v1"

app.include_router(emissions.router, prefix=f"{API_V1_PREFIX}/emissions", tags=["emissions"])
app.include_router(companies.router, prefix=f"{API_V1_PREFIX}/companies", tags=["companies"])
app.include_router(rerun.router, prefix=f"{API_V1_PREFIX}/rerun", tags=["rerun"])
app.include_router(feedback.router, prefix=f"{API_V1_PREFIX}/feedback", tags=["feedback"])

# Legacy routes of the first dashboard - for backward compatibility
app.add_api_route(
    "/api/add-company", companies.add_company, methods=["POST"],
    response_model=MessageResponse, include_in_schema=False,
)
app.add_api_route(
    "/api/rerun-with-links", rerun.rerun_with_links, methods=["POST"],
    response_model=RerunOutcome, include_in_schema=False,
)
app.add_api_route(
    "/api/submit-feedback", feedback.submit_feedback, methods=["POST"],
    response_model=MessageResponse, include_in_schema=False,
)


@app.get("/")
def root():
    """Root endpoint - API information and available endpoints."""
    logger.info("root_endpoint_accessed")
    return {
        "service": "Emissions Dashboard API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "health_detailed": "/health/detailed",
        "api_version": "v1",
        "endpoints": {
            "emissions": "/api/v1/emissions/",
            "companies": "/api/v1/companies/",
            "rerun": "/api/v1/rerun/with-links",
            "rerun_single": "/api/v1/rerun/single",
            "feedback": "/api/v1/feedback/",
        },
        "legacy_endpoints_note": "/api/add-company, /api/rerun-with-links and /api/submit-feedback still work but are deprecated. Use /api/v1/* instead.",
    }
