"""Feedback ORM model: one thumbs-up/down vote on an emission value."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from emissions_dashboard.database import Base


class FeedbackModel(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    data_id = Column(
        Integer,
        ForeignKey("emissions_data.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    is_thumb_up = Column(Boolean, nullable=False)
    email = Column(String)
    comment = Column(Text)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    emission = relationship("EmissionModel", back_populates="feedback")

    def __repr__(self) -> str:
        vote = "up" if self.is_thumb_up else "down"
        return f"<Feedback data_id={self.data_id} {vote}>"
