"""Test derived view state: stats, filtering, recent tasks and the board."""
import httpx
import pytest

from verticals.tasks.client import TaskClient
from verticals.tasks.models.schemas import TaskResponse, TaskStatus
from verticals.tasks.view_state import (
    TaskBoard,
    TaskStats,
    filter_tasks,
    recent_tasks,
    tasks_with_status,
)


def _tasks(*statuses, **kwargs):
    return [
        TaskResponse(id=i + 1, title=kwargs.get("title", f"task {i}"), status=s)
        for i, s in enumerate(statuses)
    ]


def test_status_normalization():
    assert TaskStatus.normalize("Done") == TaskStatus.COMPLETED
    assert TaskStatus.normalize("PROGRESS") == TaskStatus.IN_PROGRESS
    assert TaskStatus.normalize("in-progress") == TaskStatus.IN_PROGRESS
    assert TaskStatus.normalize("archived") == TaskStatus.TODO
    assert TaskStatus.normalize(None) == TaskStatus.TODO
    assert TaskStatus.parse("archived") is None


def test_stats_counts_sum_to_total():
    tasks = _tasks("todo", "done", "completed", "progress", "weird", "")
    stats = TaskStats.from_tasks(tasks)
    assert stats.total == 6
    assert stats.completed == 2
    assert stats.in_progress == 1
    assert stats.todo == 3
    assert stats.todo + stats.in_progress + stats.completed == stats.total


def test_stats_percentages():
    stats = TaskStats.from_tasks(_tasks("completed", "in-progress", "todo"))
    assert stats.completed_pct == 33
    assert stats.in_progress_pct == 33
    assert stats.todo_pct == 34

    half = TaskStats.from_tasks(_tasks("completed", "todo"))
    assert half.completed_pct == 50
    assert half.todo_pct == 50


def test_stats_empty():
    stats = TaskStats.from_tasks([])
    assert stats.total == 0
    assert (stats.completed_pct, stats.in_progress_pct, stats.todo_pct) == (0, 0, 0)


def test_filter_matches_title_and_description():
    tasks = [
        TaskResponse(id=1, title="Buy MILK"),
        TaskResponse(id=2, title="Call bank", description="about the milk money"),
        TaskResponse(id=3, title="Gym"),
    ]
    assert [t.id for t in filter_tasks(tasks, "milk")] == [1, 2]
    assert [t.id for t in filter_tasks(tasks, "  ")] == [1, 2, 3]
    assert filter_tasks(tasks, "nothing") == []


def test_tasks_with_status_uses_aliases():
    tasks = _tasks("done", "completed", "todo")
    assert [t.id for t in tasks_with_status(tasks, "completed")] == [1, 2]


def test_recent_is_first_five_in_list_order():
    tasks = _tasks(*["todo"] * 8)
    assert [t.id for t in recent_tasks(tasks)] == [1, 2, 3, 4, 5]
    assert [t.id for t in recent_tasks(tasks, limit=2)] == [1, 2]


@pytest.mark.asyncio
async def test_board_refresh_keeps_snapshot_on_failure():
    responses = [
        httpx.Response(200, json=[{"id": 1, "title": "a", "status": "done"}]),
        httpx.Response(500, json={"error": "Failed to fetch tasks"}),
    ]

    def handler(request):
        return responses.pop(0)

    board = TaskBoard()
    async with TaskClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        assert await board.refresh(client) is True
        assert board.stats.completed == 1
        assert board.error is None

        assert await board.refresh(client) is False

    assert board.error == "Failed to fetch tasks"
    assert [t.id for t in board.tasks] == [1]
    assert board.loading is False


@pytest.mark.asyncio
async def test_board_actions_against_app(task_client):
    board = TaskBoard()
    first = await task_client.create_task("Buy milk")
    await task_client.create_task("Walk dog", "after lunch")
    await board.refresh(task_client)

    assert await board.update_status(task_client, first, "completed") is True
    assert board.stats.completed == 1
    assert board.stats.completed_pct == 50

    board.query = "LUNCH"
    assert [t.title for t in board.visible] == ["Walk dog"]

    assert await board.delete(task_client, first.id) is True
    assert [t.title for t in board.tasks] == ["Walk dog"]
    assert [n.message for n in board.notifications] == ["Status updated", "Task deleted"]


@pytest.mark.asyncio
async def test_board_refresh_rejects_malformed_tasks():
    def handler(request):
        return httpx.Response(200, json=[{"title": "no id"}])

    board = TaskBoard(tasks=_tasks("todo"))
    async with TaskClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        assert await board.refresh(client) is False

    assert board.error.startswith("Failed to fetch tasks")
    assert [t.id for t in board.tasks] == [1]


@pytest.mark.asyncio
async def test_board_refresh_rejects_html_body():
    def handler(request):
        return httpx.Response(200, text="<html>proxy</html>", headers={"Content-Type": "text/html"})

    board = TaskBoard()
    async with TaskClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        assert await board.refresh(client) is False
    assert board.error is not None
    assert board.loading is False


def test_board_visible_applies_status_filter_and_query():
    board = TaskBoard(tasks=[
        TaskResponse(id=1, title="Buy milk", status="done"),
        TaskResponse(id=2, title="Buy bread", status="todo"),
        TaskResponse(id=3, title="Gym", status="completed"),
    ])
    board.status_filter = TaskStatus.COMPLETED
    assert [t.id for t in board.visible] == [1, 3]

    board.query = "buy"
    assert [t.id for t in board.visible] == [1]

    board.status_filter = None
    assert [t.id for t in board.visible] == [1, 2]
