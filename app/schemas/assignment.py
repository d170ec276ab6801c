from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class AssignmentCreate(BaseModel):
    title: str
    description: Optional[str] = None
    due_at: Optional[datetime] = None
    late_policy_id: Optional[int] = None


class AssignmentRead(BaseModel):
    id: int
    instructor_id: int
    title: str
    description: Optional[str]
    due_at: Optional[datetime]
    late_policy_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True
