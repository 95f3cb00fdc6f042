"""Declarative base and the shared layout of stored documents."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DocumentRecord(Base):
    """
    A pydantic document stored whole in a JSON column.

    ``id`` and ``name`` are copied out of the document so rows can be looked up
    and ordered without decoding ``data``. The timestamps mirror the document's
    ``createdAt``/``updatedAt``; repositories set them explicitly.
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(String(36), primary_key=True, comment="uuid string")

    name: Mapped[str] = mapped_column(String(200), nullable=False, default="", index=True)

    data: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        server_default="{}",
        comment="camelCase document as produced by model_dump(by_alias=True)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id='{self.id}', name='{self.name}')>"
