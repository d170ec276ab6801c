import logging
import math
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.config import GRACE_PERIOD_MINUTES
from app.models.assignment import Assignment
from app.models.calculated_penalty import CalculatedPenalty
from app.models.late_policy import LatePolicy
from app.models.submission import Submission

logger = logging.getLogger(__name__)

UNIT_SECONDS = {
    "minute": 60,
    "hour": 3600,
    "day": 86400,
}


def _as_utc(value: datetime) -> datetime:
    # SQLite often returns naive datetimes; treat as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def late_by_minutes(due_at: datetime | None, submitted_at: datetime) -> int | None:
    """Whole minutes past the due date, 0 when on time, None when there is no due date."""
    if due_at is None:
        return None

    due = _as_utc(due_at)
    submitted = _as_utc(submitted_at)
    if submitted <= due:
        return 0
    return int((submitted - due).total_seconds() // 60)


def penalty_units(late_seconds: float, penalty_unit: str) -> int:
    """
    Number of penalty units charged for being `late_seconds` late.

    Partial units round up, so one minute past the grace period counts as a full
    unit. Unknown units are charged per day.
    """
    if late_seconds <= 0:
        return 0

    unit_seconds = UNIT_SECONDS.get((penalty_unit or "").strip().lower())
    if unit_seconds is None:
        logger.warning("Unknown penalty unit %r, charging per day", penalty_unit)
        unit_seconds = UNIT_SECONDS["day"]

    return int(math.ceil(late_seconds / unit_seconds))


def calculate_penalty(
    policy: LatePolicy,
    due_at: datetime | None,
    submitted_at: datetime,
) -> tuple[bool, int | None, int]:
    """
    Returns: (is_late, late_by_minutes, penalty_points)

    Policy:
    - GRACE_PERIOD_MINUTES: if late_by_minutes <= grace -> not late, no penalty
    - policy.penalty_per_unit: points off per started penalty_unit late
    - policy.max_penalty: cap on total points off
    """
    late_minutes = late_by_minutes(due_at, submitted_at)
    if late_minutes is None:
        return (False, None, 0)

    if late_minutes <= GRACE_PERIOD_MINUTES:
        return (False, late_minutes, 0)

    late_seconds = (_as_utc(submitted_at) - _as_utc(due_at)).total_seconds()
    units = penalty_units(late_seconds, policy.penalty_unit)

    points = min(units * policy.penalty_per_unit, policy.max_penalty)
    return (True, late_minutes, max(0, points))


def update_calculated_penalty_objects(db: Session, policy: LatePolicy) -> int:
    """
    Recompute penalty points of every calculated penalty charged under `policy`.

    Only flushes; the caller commits or rolls back together with its own changes.
    """
    penalties = (
        db.query(CalculatedPenalty)
        .join(Submission, CalculatedPenalty.submission_id == Submission.id)
        .join(Assignment, Submission.assignment_id == Assignment.id)
        .filter(Assignment.late_policy_id == policy.id)
        .all()
    )

    for pen in penalties:
        submission = pen.submission
        _is_late, _late_minutes, points = calculate_penalty(
            policy,
            submission.assignment.due_at,
            submission.submitted_at,
        )
        pen.penalty_points = points

    db.flush()
    logger.info("Recomputed %d calculated penalties for late policy %s", len(penalties), policy.id)
    return len(penalties)
