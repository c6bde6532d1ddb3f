"""Shared fixtures: a throwaway SQLite store and clients wired to the app."""
import httpx
import pytest
import pytest_asyncio

from api.main import create_app
from core.database import Database
from patterns.domain_config import DatabaseConfig, TasksConfig
from verticals.tasks.client import TaskClient


@pytest.fixture
def config(tmp_path):
    return TasksConfig(database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path}/tasks.db"))


@pytest_asyncio.fixture
async def database(config):
    db = Database.from_config(config.database)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(config, database):
    return create_app(config, database=database)


@pytest_asyncio.fixture
async def http(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def task_client(app):
    client = TaskClient("http://test", transport=httpx.ASGITransport(app=app))
    yield client
    await client.aclose()
