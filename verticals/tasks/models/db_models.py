"""SQLAlchemy models for the tasks vertical.

The to_dict() method provides the wire representation used by
repositories and routers. Keys follow the camelCase JSON contract the
front end already consumes.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base, SerialMixin
from verticals.tasks.models.schemas import TaskStatus


class Task(SerialMixin, Base):
    """A unit of work with a title, status and optional deadline."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=TaskStatus.TODO.value
    )
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": TaskStatus.normalize(self.status).value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
        }
