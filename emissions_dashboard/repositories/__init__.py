"""Data access repositories."""

from emissions_dashboard.repositories.base import BaseRepository
from emissions_dashboard.repositories.emission_repo import EmissionRepository
from emissions_dashboard.repositories.evidence_repo import EvidenceRepository
from emissions_dashboard.repositories.feedback_repo import FeedbackRepository

__all__ = [
    "BaseRepository",
    "EmissionRepository",
    "EvidenceRepository",
    "FeedbackRepository",
]
