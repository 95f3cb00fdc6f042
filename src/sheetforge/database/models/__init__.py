"""SQLAlchemy models for sheetforge."""

from sheetforge.database.models.base import Base, DocumentRecord
from sheetforge.database.models.character import CharacterRecord
from sheetforge.database.models.homebrew import HomebrewPackRecord, HomebrewRuleRecord

__all__ = [
    "Base",
    "DocumentRecord",
    "CharacterRecord",
    "HomebrewPackRecord",
    "HomebrewRuleRecord",
]
