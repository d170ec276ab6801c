import re
from typing import Any

from pydantic import BaseModel, Field, field_validator

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def lenient_int(value: Any) -> int:
    """Read an integer the way a form does: leading digits count, anything else is 0.

    "12" -> 12, " 7 days" -> 7, "-3" -> -3, "abc" -> 0, None -> 0.
    """
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


class LatePolicyParams(BaseModel):
    """Editable fields of a late policy, as submitted by a create or edit form."""

    policy_name: str
    penalty_per_unit: int
    penalty_unit: str
    max_penalty: int

    @field_validator("penalty_per_unit", "max_penalty", mode="before")
    @classmethod
    def _integer_like(cls, value: Any) -> int:
        return lenient_int(value)


class LatePolicyForm(BaseModel):
    late_policy: LatePolicyParams


class LatePolicyRead(BaseModel):
    id: int
    policy_name: str
    penalty_per_unit: int
    penalty_unit: str
    max_penalty: int
    instructor_id: int
    private: bool

    class Config:
        from_attributes = True


# new/edit pages also render unsaved records, so nothing is required here
class LatePolicyFormData(BaseModel):
    id: int | None = None
    policy_name: str | None = None
    penalty_per_unit: int | None = None
    penalty_unit: str | None = None
    max_penalty: int | None = None
    instructor_id: int | None = None
    private: bool | None = None

    class Config:
        from_attributes = True


class FlashMessages(BaseModel):
    notice: str | None = None
    error: str | None = None


class LatePolicyIndexPage(BaseModel):
    late_policies: list[LatePolicyRead]
    flash: FlashMessages = Field(default_factory=FlashMessages)


class LatePolicyFormPage(BaseModel):
    late_policy: LatePolicyFormData
    flash: FlashMessages = Field(default_factory=FlashMessages)
