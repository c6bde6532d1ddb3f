"""Async repository pattern for database access.

Provides a generic base repository with CRUD operations. Verticals
subclass this to add domain-specific queries.

Example: TaskRepository extending BaseRepository.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.base import Base

# ---------------------------------------------------------------------------
# Type variable for model classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)

# Columns the store owns; update() never writes them
_IMMUTABLE_COLUMNS = ("id", "created_at")


# ---------------------------------------------------------------------------
# Base repository
# ---------------------------------------------------------------------------

class BaseRepository(Generic[ModelT]):
    """Generic async repository with CRUD.

    Subclass and set `model` to your SQLAlchemy model::

        class TaskRepository(BaseRepository[Task]):
            model = Task

            async def search(self, query: str):
                stmt = select(self.model).where(
                    self.model.title.ilike(f"%{query}%"),
                )
                result = await self.session.execute(stmt)
                return [r.to_dict() for r in result.scalars().all()]
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- List --

    async def list(self) -> list[dict]:
        """List all items in primary-key order."""
        stmt = select(self.model).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return [row.to_dict() for row in result.scalars().all()]

    # -- Get by ID --

    async def _load(self, item_id: int) -> ModelT | None:
        stmt = select(self.model).where(self.model.id == item_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, item_id: int) -> dict | None:
        """Get a single item by ID."""
        item = await self._load(item_id)
        return item.to_dict() if item else None

    # -- Create --

    async def create(self, data: dict[str, Any]) -> dict:
        """Create a new item and return it with store-assigned columns."""
        item = self.model(**data)
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item.to_dict()

    # -- Update --

    async def update(self, item_id: int, data: dict[str, Any]) -> dict | None:
        """Update an existing item. Returns None if not found."""
        item = await self._load(item_id)
        if not item:
            return None

        for key, value in data.items():
            if hasattr(item, key) and key not in _IMMUTABLE_COLUMNS:
                setattr(item, key, value)

        await self.session.flush()
        await self.session.refresh(item)
        return item.to_dict()

    # -- Delete --

    async def delete(self, item_id: int) -> bool:
        """Delete an item. Returns True if deleted, False if not found."""
        item = await self._load(item_id)
        if not item:
            return False

        await self.session.delete(item)
        await self.session.flush()
        return True

    # -- Transaction --

    async def commit(self) -> None:
        """Commit pending writes so they are durable before the caller answers."""
        await self.session.commit()
