from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.config import GRACE_PERIOD_MINUTES
from app.core.current_user import get_current_user
from app.core.deps import get_db
from app.models.assignment import Assignment
from app.models.calculated_penalty import CalculatedPenalty
from app.models.submission import Submission
from app.models.user import User
from app.schemas.submission import SubmissionCreate, SubmissionRead
from app.services.penalties import calculate_penalty, late_by_minutes

router = APIRouter()


def _ensure_assignment_exists(db: Session, assignment_id: int) -> Assignment:
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    assignment = _ensure_assignment_exists(db, assignment_id)

    now = datetime.now(timezone.utc)

    # allow resubmission: update existing submission if it exists
    sub = (
        db.query(Submission)
        .filter(
            and_(
                Submission.assignment_id == assignment_id,
                Submission.student_id == me.id,
            )
        )
        .first()
    )
    if sub:
        sub.content = payload.content
        sub.submitted_at = now
    else:
        sub = Submission(
            assignment_id=assignment_id,
            student_id=me.id,
            content=payload.content,
            submitted_at=now,
        )
        db.add(sub)

    policy = assignment.late_policy
    if policy is not None:
        is_late, late_minutes, points = calculate_penalty(policy, assignment.due_at, now)
        if sub.calculated_penalty is None:
            sub.calculated_penalty = CalculatedPenalty(deadline_type="submission")
        sub.calculated_penalty.penalty_points = points
    else:
        late_minutes = late_by_minutes(assignment.due_at, now)
        is_late = late_minutes is not None and late_minutes > GRACE_PERIOD_MINUTES
        points = None

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sub)

    # attach computed fields
    sub.is_late = is_late
    sub.late_by_minutes = late_minutes
    sub.penalty_points = points
    return sub
