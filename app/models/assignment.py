from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship

from app.db.base_class import Base

class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    instructor_id = Column(Integer, nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=True)

    # RESTRICT: a policy in use by an assignment cannot be deleted
    late_policy_id = Column(
        Integer,
        ForeignKey("late_policies.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    late_policy = relationship("LatePolicy")

    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")
