"""Service layer - orchestrates engines, repositories and clients."""

from emissions_dashboard.services.company_service import CompanyService
from emissions_dashboard.services.dashboard_service import DashboardService
from emissions_dashboard.services.feedback_service import FeedbackService
from emissions_dashboard.services.rerun_service import RerunService

__all__ = ["CompanyService", "DashboardService", "FeedbackService", "RerunService"]
