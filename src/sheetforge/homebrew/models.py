"""Homebrew content: user-authored races, classes, feats, items and rules."""

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import Field

from sheetforge.modifiers.models import CamelModel, Modifier


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RuleCategory(StrEnum):
    REST = "rest"
    COMBAT = "combat"
    MAGIC = "magic"
    EXPLORATION = "exploration"
    SOCIAL = "social"
    ENCUMBRANCE = "encumbrance"
    OTHER = "other"


class HomebrewRule(CamelModel):
    """
    An alternative mechanic expressed as modifiers.

    Attributes:
        id: Unique rule identifier
        name: Display name
        description: What the rule changes
        category: Rule category
        replaces: ID of the official rule this one replaces, if any
        modifiers: Modifiers applied while the rule is active
        enabled: Whether the rule can be activated on characters
    """

    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    category: RuleCategory = RuleCategory.OTHER
    replaces: str | None = None
    modifiers: list[Modifier] = Field(default_factory=list)
    enabled: bool = True


class HomebrewRace(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    traits: list[str] = Field(default_factory=list)
    modifiers: list[Modifier] = Field(default_factory=list)


class HomebrewClass(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    hit_die: int = 8
    primary_ability: list[str] = Field(default_factory=list)
    saving_throws: list[str] = Field(default_factory=list)
    modifiers: list[Modifier] = Field(default_factory=list)


class HomebrewFeat(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    prerequisites: str | None = None
    modifiers: list[Modifier] = Field(default_factory=list)


class ItemType(StrEnum):
    WEAPON = "weapon"
    ARMOR = "armor"
    GEAR = "gear"
    MAGIC = "magic"
    CONSUMABLE = "consumable"


class HomebrewItem(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    type: ItemType = ItemType.GEAR
    rarity: str | None = None
    description: str = ""
    weight: float | None = None
    cost: str | None = None
    modifiers: list[Modifier] = Field(default_factory=list)


class HomebrewContent(CamelModel):
    races: list[HomebrewRace] = Field(default_factory=list)
    classes: list[HomebrewClass] = Field(default_factory=list)
    feats: list[HomebrewFeat] = Field(default_factory=list)
    items: list[HomebrewItem] = Field(default_factory=list)
    rules: list[HomebrewRule] = Field(default_factory=list)
    modifiers: list[Modifier] = Field(default_factory=list)


class HomebrewPack(CamelModel):
    """An importable/exportable bundle of homebrew content."""

    id: str = Field(default_factory=_new_id)
    name: str
    author: str = ""
    version: str = "1.0.0"
    description: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    content: HomebrewContent = Field(default_factory=HomebrewContent)
