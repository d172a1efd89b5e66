"""Feedback repository."""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from emissions_dashboard.models.emission import EmissionModel
from emissions_dashboard.models.feedback import FeedbackModel
from emissions_dashboard.repositories.base import BaseRepository


class FeedbackRepository(BaseRepository[FeedbackModel]):
    def __init__(self, db: Session):
        super().__init__(db, FeedbackModel)

    def record_vote(
        self,
        data_id: int,
        is_thumb_up: bool,
        email: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> Optional[FeedbackModel]:
        """Increment the record's counter and store the vote (caller must commit).

        The increment is evaluated by the database (``count = count + 1``) so
        concurrent votes on the same record are all counted. Returns None when
        no record has *data_id*.
        """
        counter = (
            EmissionModel.thumbs_up_count if is_thumb_up else EmissionModel.thumbs_down_count
        )
        result = self.db.execute(
            update(EmissionModel)
            .where(EmissionModel.id == data_id)
            .values({counter: counter + 1})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None

        vote = self.create(
            FeedbackModel(data_id=data_id, is_thumb_up=is_thumb_up, email=email, comment=comment)
        )
        # Loaded records still hold the old counters
        self.db.expire_all()
        return vote

