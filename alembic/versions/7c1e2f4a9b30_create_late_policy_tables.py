"""create late policy tables

Revision ID: 7c1e2f4a9b30
Revises:
Create Date: 2026-10-19 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c1e2f4a9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_parent_id", "users", ["parent_id"])

    op.create_table(
        "late_policies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("policy_name", sa.String(255), nullable=False),
        sa.Column("penalty_per_unit", sa.Integer(), nullable=False),
        sa.Column("penalty_unit", sa.String(50), nullable=False),
        sa.Column("max_penalty", sa.Integer(), nullable=False),
        sa.Column("instructor_id", sa.Integer(), nullable=False),
        sa.Column("private", sa.Boolean(), nullable=False, server_default="1"),
        sa.CheckConstraint("penalty_per_unit >= 0", name="ck_late_policies_penalty_per_unit"),
        sa.CheckConstraint(
            "max_penalty >= penalty_per_unit AND max_penalty <= 100",
            name="ck_late_policies_max_penalty",
        ),
    )
    op.create_index("ix_late_policies_id", "late_policies", ["id"])
    op.create_index("ix_late_policies_instructor_id", "late_policies", ["instructor_id"])

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("instructor_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "late_policy_id",
            sa.Integer(),
            sa.ForeignKey("late_policies.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_assignments_id", "assignments", ["id"])
    op.create_index("ix_assignments_instructor_id", "assignments", ["instructor_id"])
    op.create_index("ix_assignments_late_policy_id", "assignments", ["late_policy_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "assignment_id",
            sa.Integer(),
            sa.ForeignKey("assignments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )
    op.create_index("ix_submissions_id", "submissions", ["id"])
    op.create_index("ix_submissions_assignment_id", "submissions", ["assignment_id"])
    op.create_index("ix_submissions_student_id", "submissions", ["student_id"])

    op.create_table(
        "calculated_penalties",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "submission_id",
            sa.Integer(),
            sa.ForeignKey("submissions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("deadline_type", sa.String(50), nullable=False),
        sa.Column("penalty_points", sa.Integer(), nullable=False),
    )
    op.create_index("ix_calculated_penalties_id", "calculated_penalties", ["id"])
    op.create_index(
        "ix_calculated_penalties_submission_id", "calculated_penalties", ["submission_id"], unique=True
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("calculated_penalties")
    op.drop_table("submissions")
    op.drop_table("assignments")
    op.drop_table("late_policies")
    op.drop_table("users")
