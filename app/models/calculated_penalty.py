from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class CalculatedPenalty(Base):
    """Penalty points charged to one submission under its assignment's late policy."""

    __tablename__ = "calculated_penalties"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(
        Integer,
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    deadline_type = Column(String(50), nullable=False, default="submission")
    penalty_points = Column(Integer, nullable=False, default=0)

    submission = relationship("Submission", back_populates="calculated_penalty")
