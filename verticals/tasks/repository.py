"""Task repository — async database access for the tasks table."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_session
from patterns.repository import BaseRepository
from verticals.tasks.models.db_models import Task


class TaskRepository(BaseRepository[Task]):
    """Repository for task CRUD. Listing is in insertion (id) order."""

    model = Task


# ---------------------------------------------------------------------------
# FastAPI dependency factory
# ---------------------------------------------------------------------------

def get_task_repository(
    session: AsyncSession = Depends(get_session),
) -> TaskRepository:
    """FastAPI dependency for TaskRepository."""
    return TaskRepository(session)
