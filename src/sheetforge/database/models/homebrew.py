"""Stored homebrew packs and rules."""

from sqlalchemy import Boolean
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentRecord


class HomebrewPackRecord(DocumentRecord):
    __tablename__ = "homebrew_packs"


class HomebrewRuleRecord(DocumentRecord):
    """A standalone homebrew rule; the enabled flag is kept in a column for filtering."""

    __tablename__ = "homebrew_rules"

    enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="1",
        index=True,
        comment="Disabled rules are never applied",
    )

    def __repr__(self) -> str:
        return f"<HomebrewRuleRecord(id='{self.id}', name='{self.name}', enabled={self.enabled})>"
