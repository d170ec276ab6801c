from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SubmissionCreate(BaseModel):
    content: Optional[str] = None


class SubmissionRead(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    content: Optional[str]
    submitted_at: datetime

    # computed fields
    is_late: bool = False
    late_by_minutes: Optional[int] = None
    penalty_points: Optional[int] = None

    class Config:
        from_attributes = True
