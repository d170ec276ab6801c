from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.permissions import require_instructor
from app.models.assignment import Assignment
from app.models.late_policy import LatePolicy
from app.models.user import User
from app.schemas.assignment import AssignmentCreate, AssignmentRead

router = APIRouter()

def _ensure_late_policy_usable(db: Session, policy_id: int, instructor: User) -> LatePolicy:
    # own policies and public ones can be attached
    policy = (
        db.query(LatePolicy)
        .filter(
            LatePolicy.id == policy_id,
            or_(LatePolicy.instructor_id == instructor.instructor_id, LatePolicy.private.is_(False)),
        )
        .first()
    )
    if not policy:
        raise HTTPException(status_code=404, detail="Late policy not found")
    return policy

@router.get("/assignments", response_model=list[AssignmentRead])
def list_assignments(
    db: Session = Depends(get_db),
    instructor: User = Depends(require_instructor),
):
    return (
        db.query(Assignment)
        .filter(Assignment.instructor_id == instructor.instructor_id)
        .order_by(Assignment.id.asc())
        .all()
    )

@router.post(
    "/assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    instructor: User = Depends(require_instructor),
):
    if payload.late_policy_id is not None:
        _ensure_late_policy_usable(db, payload.late_policy_id, instructor)

    a = Assignment(
        instructor_id=instructor.instructor_id,
        title=payload.title,
        description=payload.description,
        due_at=payload.due_at,
        late_policy_id=payload.late_policy_id,
    )
    db.add(a)
    db.commit()
    db.refresh(a)
    return a
