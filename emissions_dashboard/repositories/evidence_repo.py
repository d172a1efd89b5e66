"""Evidence repository."""

from sqlalchemy.orm import Session

from emissions_dashboard.models.evidence import EvidenceModel
from emissions_dashboard.repositories.base import BaseRepository


class EvidenceRepository(BaseRepository[EvidenceModel]):
    def __init__(self, db: Session):
        super().__init__(db, EvidenceModel)
