"""Derived view state over a fetched task snapshot.

Everything here except TaskBoard is a pure function of the task list:
no network, no caching, recomputed from scratch whenever the snapshot
changes. TaskBoard holds the snapshot itself and refetches on demand.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Literal, Sequence

from core.errors import TaskError
from verticals.tasks.client import TaskClient
from verticals.tasks.config import config
from verticals.tasks.models.schemas import TaskResponse, TaskStatus

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class TaskStats:
    """Counts and percentages by status.

    ``todo + in_progress + completed == total`` always holds; unknown
    statuses count as todo. Percentages are whole numbers and sum to 100
    for a non-empty list.
    """

    total: int = 0
    todo: int = 0
    in_progress: int = 0
    completed: int = 0

    @classmethod
    def from_tasks(cls, tasks: Iterable[TaskResponse]) -> "TaskStats":
        counts = {status: 0 for status in TaskStatus}
        for task in tasks:
            counts[task.normalized_status] += 1
        return cls(
            total=sum(counts.values()),
            todo=counts[TaskStatus.TODO],
            in_progress=counts[TaskStatus.IN_PROGRESS],
            completed=counts[TaskStatus.COMPLETED],
        )

    @property
    def completed_pct(self) -> int:
        if self.total == 0:
            return 0
        return _round_half_up(self.completed / self.total * 100)

    @property
    def in_progress_pct(self) -> int:
        if self.total == 0:
            return 0
        return _round_half_up(self.in_progress / self.total * 100)

    @property
    def todo_pct(self) -> int:
        if self.total == 0:
            return 0
        return max(0, 100 - self.completed_pct - self.in_progress_pct)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def filter_tasks(tasks: Sequence[TaskResponse], query: str | None) -> list[TaskResponse]:
    """Case-insensitive substring match over title and description."""
    q = (query or "").strip().lower()
    if not q:
        return list(tasks)
    return [
        t for t in tasks
        if q in t.title.lower() or q in (t.description or "").lower()
    ]


def tasks_with_status(
    tasks: Sequence[TaskResponse], status: TaskStatus | str
) -> list[TaskResponse]:
    wanted = TaskStatus.normalize(status)
    return [t for t in tasks if t.normalized_status == wanted]


def recent_tasks(tasks: Sequence[TaskResponse], limit: int | None = None) -> list[TaskResponse]:
    """First ``limit`` tasks in list order."""
    if limit is None:
        limit = config.client.recent_limit
    return list(tasks[:limit])


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

@dataclass
class Notification:
    """A transient message for the user."""

    message: str
    level: Literal["success", "error"] = "success"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------

@dataclass
class TaskBoard:
    """The in-memory snapshot behind the dashboard and the manage page.

    Usage::

        board = TaskBoard()
        await board.refresh(client)
        board.query = "milk"
        board.visible, board.stats
    """

    tasks: list[TaskResponse] = field(default_factory=list)
    query: str = ""
    status_filter: TaskStatus | None = None
    loading: bool = False
    error: str | None = None
    notifications: list[Notification] = field(default_factory=list)

    def notify(self, message: str, level: Literal["success", "error"] = "success") -> None:
        self.notifications.append(Notification(message, level))

    async def refresh(self, client: TaskClient) -> bool:
        """Refetch the whole collection. On failure the old snapshot stays."""
        self.loading = True
        self.error = None
        try:
            self.tasks = await client.list_tasks()
            return True
        except TaskError as exc:
            logger.warning("Refresh failed: %s", exc.message)
            self.error = exc.message
            return False
        finally:
            self.loading = False

    async def update_status(
        self, client: TaskClient, task: TaskResponse, status: TaskStatus | str
    ) -> bool:
        try:
            await client.update_status(task, status)
        except TaskError:
            self.notify("Failed to update status", "error")
            return False
        self.notify("Status updated")
        await self.refresh(client)
        return True

    async def delete(self, client: TaskClient, task_id: int) -> bool:
        try:
            await client.delete_task(task_id)
        except TaskError:
            self.notify("Failed to delete task", "error")
            return False
        self.notify("Task deleted")
        await self.refresh(client)
        return True

    @property
    def stats(self) -> TaskStats:
        return TaskStats.from_tasks(self.tasks)

    @property
    def visible(self) -> list[TaskResponse]:
        """Snapshot narrowed by the status filter, then the free-text query."""
        tasks = self.tasks
        if self.status_filter is not None:
            tasks = tasks_with_status(tasks, self.status_filter)
        return filter_tasks(tasks, self.query)

    @property
    def recent(self) -> list[TaskResponse]:
        return recent_tasks(self.tasks)
