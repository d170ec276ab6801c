from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.config import MAX_PENALTY_LIMIT
from app.db.base_class import Base


class LatePolicy(Base):
    __tablename__ = "late_policies"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    policy_name: Mapped[str] = mapped_column(String(255), nullable=False)
    penalty_per_unit: Mapped[int] = mapped_column(Integer, nullable=False)
    penalty_unit: Mapped[str] = mapped_column(String(50), nullable=False)
    max_penalty: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    instructor_id: Mapped[int] = mapped_column(nullable=False, index=True)
    private: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="1"
    )

    __table_args__ = (
        CheckConstraint("penalty_per_unit >= 0", name="ck_late_policies_penalty_per_unit"),
        CheckConstraint(
            f"max_penalty >= penalty_per_unit AND max_penalty <= {MAX_PENALTY_LIMIT}",
            name="ck_late_policies_max_penalty",
        ),
    )

    def __repr__(self) -> str:
        return f"<LatePolicy id={self.id} name={self.policy_name!r} instructor={self.instructor_id}>"
