from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

# roles at or above TA level may manage late policies
TA_PRIVILEGED_ROLES = ("ta", "instructor", "admin", "super_admin")
# roles that own their records themselves instead of working under an instructor
INSTRUCTOR_ROLES = ("instructor", "admin", "super_admin")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str | None] = mapped_column(String(255))
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="student")

    # instructor a TA (or student) works under
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True
    )

    submissions = relationship(
        "Submission", back_populates="student", cascade="all, delete-orphan"
    )

    @property
    def has_ta_privileges(self) -> bool:
        return self.role in TA_PRIVILEGED_ROLES

    @property
    def instructor_id(self) -> int | None:
        if self.role in INSTRUCTOR_ROLES:
            return self.id
        return self.parent_id
