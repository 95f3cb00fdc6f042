"""Stored character documents.

Only the raw character is persisted. Computed values are derived on load and
never written back.
"""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentRecord


class CharacterRecord(DocumentRecord):
    """A raw character sheet."""

    __tablename__ = "characters"

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="Incremented on every save",
    )

    def __repr__(self) -> str:
        return f"<CharacterRecord(id='{self.id}', name='{self.name}', version={self.version})>"
