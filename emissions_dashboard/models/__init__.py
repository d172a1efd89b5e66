"""SQLAlchemy ORM models: imported here so Base.metadata sees them."""

from emissions_dashboard.models.emission import EmissionModel
from emissions_dashboard.models.evidence import EvidenceModel
from emissions_dashboard.models.feedback import FeedbackModel

__all__ = [
    "EmissionModel",
    "EvidenceModel",
    "FeedbackModel",
]
