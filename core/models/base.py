"""Base model and mixins for all SQLAlchemy models.

Provides:
- Base: Declarative base class for all models
- SerialMixin: Adds an autoincrement integer primary key and created_at

The created_at column is filled by the store at insert and never written
by the application afterwards.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all models."""
    pass


class SerialMixin:
    """Mixin providing a store-assigned integer id and insert timestamp."""

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
