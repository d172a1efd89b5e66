"""Evidence ORM model: one citation backing an emission value."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from emissions_dashboard.database import Base


class EvidenceModel(Base):
    __tablename__ = "evidence"

    id = Column(Integer, primary_key=True, autoincrement=True)
    data_id = Column(
        Integer,
        ForeignKey("emissions_data.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    answer = Column(Text)
    explanation = Column(Text)
    quotes = Column(Text)
    page_number = Column(Integer)  # NULL or 0 → page unknown
    document_name = Column(String)

    # Relationships
    emission = relationship("EmissionModel", back_populates="evidence")

    def __repr__(self) -> str:
        return f"<Evidence data_id={self.data_id} page={self.page_number}>"
