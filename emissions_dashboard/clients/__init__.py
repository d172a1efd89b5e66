"""External service clients."""

from emissions_dashboard.clients.analysis_client import AnalysisClient
from emissions_dashboard.clients.base_client import BaseHTTPClient

__all__ = ["AnalysisClient", "BaseHTTPClient"]
