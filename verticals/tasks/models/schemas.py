"""Pydantic schemas for API request/response validation."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Any) -> Optional["TaskStatus"]:
        """Return the canonical status for a value or alias, None if unknown."""
        if isinstance(value, TaskStatus):
            return value
        if not isinstance(value, str):
            return None
        return _STATUS_ALIASES.get(value.strip().lower())

    @classmethod
    def normalize(cls, value: Any) -> "TaskStatus":
        """Interpret any stored value; unrecognized ones read as todo."""
        return cls.parse(value) or cls.TODO


_STATUS_ALIASES: dict[str, TaskStatus] = {
    "todo": TaskStatus.TODO,
    "in-progress": TaskStatus.IN_PROGRESS,
    "progress": TaskStatus.IN_PROGRESS,
    "completed": TaskStatus.COMPLETED,
    "done": TaskStatus.COMPLETED,
}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class TaskCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    # Accepted in any shape for compatibility; new tasks always start as todo
    status: Any = None
    deadline: Optional[datetime] = None

    @field_validator("deadline", mode="before")
    @classmethod
    def blank_deadline_is_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class TaskUpdate(BaseModel):
    """Explicit update struct: only fields present in the body are written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    deadline: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def accept_status_aliases(cls, value: Any) -> Any:
        if value is None:
            return None
        status = TaskStatus.parse(value)
        if status is None:
            allowed = [s.value for s in TaskStatus]
            raise ValueError(f"Unknown status {value!r}. Allowed: {allowed}")
        return status

    @field_validator("deadline", mode="before")
    @classmethod
    def blank_deadline_is_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def changes(self) -> dict[str, Any]:
        """Column values to write.

        ``deadline: null`` (or an empty string) clears the deadline, an
        omitted deadline is left alone. A null status is treated as omitted.
        """
        data = self.model_dump(exclude_unset=True)
        if data.get("status") is None:
            data.pop("status", None)
        else:
            data["status"] = data["status"].value
        return data


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = None
    status: str = TaskStatus.TODO.value
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    deadline: Optional[datetime] = None

    @property
    def normalized_status(self) -> TaskStatus:
        return TaskStatus.normalize(self.status)


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
