"""Task service — the five task operations on top of the repository.

Translates validated request models into store writes and store rows
into wire dicts. Each write is committed here, before the route returns,
so a failed commit is answered with a 500 rather than after a 200 has
already gone out. Datastore exceptions are logged and re-raised as
StoreError so the API answers them uniformly with a 500.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from core.errors import NotFound, StoreError
from verticals.tasks.models.schemas import TaskCreate, TaskStatus, TaskUpdate
from verticals.tasks.repository import TaskRepository, get_task_repository

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("%s", message)
        raise StoreError(message) from exc


class TaskService:
    """Create, list, get, update and delete tasks."""

    def __init__(self, repo: TaskRepository):
        self.repo = repo

    async def create(self, request: TaskCreate) -> dict:
        """Insert a task. Status is always todo, whatever the body says."""
        data = {
            "title": request.title,
            "description": request.description,
            "status": TaskStatus.TODO.value,
            "deadline": request.deadline,
        }
        with _store_errors("Failed to create task"):
            task = await self.repo.create(data)
            await self.repo.commit()
        logger.info("Created task %s", task["id"])
        return task

    async def list(self) -> list[dict]:
        with _store_errors("Failed to fetch tasks"):
            return await self.repo.list()

    async def get(self, task_id: int) -> dict:
        with _store_errors("Failed to fetch task"):
            task = await self.repo.get(task_id)
        if task is None:
            raise NotFound(TASK_NOT_FOUND)
        return task

    async def update(self, task_id: int, request: TaskUpdate) -> dict:
        """Write the fields present in the request; last write wins."""
        changes = request.changes()
        with _store_errors("Failed to update task"):
            task = await self.repo.update(task_id, changes)
            if task is not None:
                await self.repo.commit()
        if task is None:
            raise NotFound(TASK_NOT_FOUND)
        logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(changes)))
        return task

    async def delete(self, task_id: int) -> bool:
        """Hard delete. A missing id is not an error; returns whether a row went."""
        with _store_errors("Failed to delete task"):
            deleted = await self.repo.delete(task_id)
            if deleted:
                await self.repo.commit()
        if deleted:
            logger.info("Deleted task %s", task_id)
        else:
            logger.warning("Delete requested for missing task %s", task_id)
        return deleted


def get_task_service(
    repo: TaskRepository = Depends(get_task_repository),
) -> TaskService:
    """FastAPI dependency for TaskService."""
    return TaskService(repo)
