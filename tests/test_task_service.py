"""Test TaskService against the repository and a real session."""
import pytest
from sqlalchemy.exc import OperationalError

from core.errors import NotFound, StoreError
from verticals.tasks.models.db_models import Task
from verticals.tasks.models.schemas import TaskCreate, TaskUpdate
from verticals.tasks.repository import TaskRepository
from verticals.tasks.service import TaskService


@pytest.mark.asyncio
async def test_create_forces_todo(database):
    async with database.session() as session:
        service = TaskService(TaskRepository(session))
        task = await service.create(TaskCreate(title="X", status="in-progress"))
    assert task["status"] == "todo"
    assert isinstance(task["id"], int)


@pytest.mark.asyncio
async def test_changes_are_committed_per_session(database):
    async with database.session() as session:
        created = await TaskService(TaskRepository(session)).create(TaskCreate(title="Persist me"))

    async with database.session() as session:
        fetched = await TaskService(TaskRepository(session)).get(created["id"])
    assert fetched["title"] == "Persist me"


@pytest.mark.asyncio
async def test_get_missing_raises_not_found(database):
    async with database.session() as session:
        with pytest.raises(NotFound, match="Task not found"):
            await TaskService(TaskRepository(session)).get(7)


@pytest.mark.asyncio
async def test_update_only_writes_present_fields(database):
    async with database.session() as session:
        service = TaskService(TaskRepository(session))
        task = await service.create(TaskCreate(title="Plan", description="keep me"))
        updated = await service.update(task["id"], TaskUpdate(title="Plan v2"))
    assert updated["title"] == "Plan v2"
    assert updated["description"] == "keep me"
    assert updated["status"] == "todo"


@pytest.mark.asyncio
async def test_delete_reports_whether_row_existed(database):
    async with database.session() as session:
        service = TaskService(TaskRepository(session))
        task = await service.create(TaskCreate(title="Gone soon"))
        assert await service.delete(task["id"]) is True
        assert await service.delete(task["id"]) is False


@pytest.mark.asyncio
async def test_unrecognized_stored_status_reads_as_todo(database):
    async with database.session() as session:
        session.add(Task(title="Legacy", status="Blocked"))

    async with database.session() as session:
        tasks = await TaskService(TaskRepository(session)).list()
    assert [t["status"] for t in tasks] == ["todo"]


@pytest.mark.asyncio
async def test_store_failures_become_store_error():
    class BrokenRepository:
        async def list(self):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

    service = TaskService(BrokenRepository())
    with pytest.raises(StoreError, match="Failed to fetch tasks"):
        await service.list()


def test_update_changes_struct():
    assert TaskUpdate(title="a").changes() == {"title": "a"}
    assert TaskUpdate(title="a", deadline=None).changes() == {"title": "a", "deadline": None}
    assert TaskUpdate(title="a", status="progress").changes() == {
        "title": "a",
        "status": "in-progress",
    }
    assert TaskUpdate(title="a", status=None).changes() == {"title": "a"}


@pytest.mark.asyncio
async def test_writes_are_committed_before_the_service_returns(database):
    async with database.session() as session:
        service = TaskService(TaskRepository(session))
        created = await service.create(TaskCreate(title="Visible at once"))

        async with database.session() as other:
            seen = await TaskService(TaskRepository(other)).get(created["id"])
        assert seen["title"] == "Visible at once"
