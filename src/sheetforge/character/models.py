"""Character records.

``Character`` is the raw, persisted record. ``ComputedCharacter`` is the
read-only view produced by :func:`sheetforge.character.calculator.compute_character`
and is never stored; :meth:`ComputedCharacter.to_character` strips it back to
the raw record.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict, Field

from sheetforge.modifiers.models import CamelModel, Modifier

from .abilities import AbilityName, ProficiencyLevel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AbilityScores(CamelModel):
    """One integer per ability. Used for scores and for modifiers."""

    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10

    def get(self, ability: AbilityName | str) -> int:
        """Get the value for an ability by name."""
        return getattr(self, AbilityName(ability).value)

    def as_dict(self) -> dict[str, int]:
        """Ability name to value mapping in canonical order."""
        return {ability.value: self.get(ability) for ability in AbilityName}


class SavingThrowProficiencies(CamelModel):
    """Saving throw proficiency per ability."""

    strength: bool = False
    dexterity: bool = False
    constitution: bool = False
    intelligence: bool = False
    wisdom: bool = False
    charisma: bool = False

    def get(self, ability: AbilityName | str) -> bool:
        """Whether the save for an ability is proficient."""
        return getattr(self, AbilityName(ability).value)


class ClassLevel(CamelModel):
    """Levels taken in one class."""

    class_id: str
    class_name: str
    subclass_id: str | None = None
    subclass_name: str | None = None
    level: int = Field(default=1, ge=0)
    hit_die: int | None = Field(default=None, description="Overrides the built-in hit die table")
    is_homebrew: bool = False


class RaceRef(CamelModel):
    race_id: str = ""
    race_name: str = ""
    subrace_id: str | None = None
    subrace_name: str | None = None
    is_homebrew: bool = False


class BackgroundRef(CamelModel):
    background_id: str = ""
    background_name: str = ""
    is_homebrew: bool = False


class FeatRef(CamelModel):
    feat_id: str
    feat_name: str
    is_homebrew: bool = False


class InventoryItem(CamelModel):
    id: str
    item_id: str
    name: str
    quantity: int = 1
    equipped: bool = False
    attuned: bool = False
    notes: str | None = None
    is_homebrew: bool = False


class SpellEntry(CamelModel):
    spell_id: str
    name: str
    level: int = 0
    prepared: bool = False
    always_prepared: bool = False
    source: str = ""
    is_homebrew: bool = False


class SpellSlot(CamelModel):
    max: int = 0
    used: int = 0


class FeatureUses(CamelModel):
    max: int | str  # may be a formula
    current: int = 0
    recharge_on: str = "longRest"  # shortRest, longRest, dawn, never


class Feature(CamelModel):
    """A trait or class feature."""

    id: str
    name: str
    description: str = ""
    source: str = ""
    source_id: str = ""
    level: int | None = None
    uses: FeatureUses | None = None
    is_homebrew: bool = False


class Attack(CamelModel):
    id: str
    name: str
    type: str = "melee"  # melee, ranged, spell
    ability: str = AbilityName.STRENGTH.value
    proficient: bool = False
    damage_type: str = ""
    damage_dice: str = ""
    bonus_to_hit: int | None = None
    bonus_damage: int | None = None
    range: str | None = None
    properties: list[str] = Field(default_factory=list)
    notes: str | None = None


class Currency(CamelModel):
    copper: int = 0
    silver: int = 0
    electrum: int = 0
    gold: int = 0
    platinum: int = 0


class DeathSaves(CamelModel):
    successes: int = 0
    failures: int = 0


class CurrentState(CamelModel):
    """Mutable play state tracked between sessions."""

    hit_points: int = 0
    temp_hit_points: int = 0
    hit_dice_remaining: dict[str, int] = Field(default_factory=dict)
    death_saves: DeathSaves = Field(default_factory=DeathSaves)
    exhaustion_level: int = 0
    conditions: list[str] = Field(default_factory=list)
    inspiration: bool = False


class CharacterNotes(CamelModel):
    personality: str = ""
    ideals: str = ""
    bonds: str = ""
    flaws: str = ""
    backstory: str = ""
    allies: str = ""
    treasure: str = ""
    other: str = ""


class Character(CamelModel):
    """Raw character record as persisted.

    Base ability scores are stored before any modifier; race, class, item and
    homebrew effects live in ``active_modifiers`` and are applied when the
    character is computed.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    player_name: str | None = None

    race: RaceRef = Field(default_factory=RaceRef)
    classes: list[ClassLevel] = Field(default_factory=list)
    background: BackgroundRef = Field(default_factory=BackgroundRef)
    alignment: str | None = None
    experience: int | None = None
    appearance: dict[str, str] = Field(default_factory=dict)

    base_ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    skill_proficiencies: dict[str, ProficiencyLevel] = Field(default_factory=dict)
    saving_throw_proficiencies: SavingThrowProficiencies = Field(
        default_factory=SavingThrowProficiencies
    )
    other_proficiencies: list[str] = Field(default_factory=list)

    feats: list[FeatRef] = Field(default_factory=list)
    features: list[Feature] = Field(default_factory=list)
    inventory: list[InventoryItem] = Field(default_factory=list)
    currency: Currency = Field(default_factory=Currency)

    spellcasting_ability: str | None = None
    spells: list[SpellEntry] = Field(default_factory=list)
    spell_slots: dict[int, SpellSlot] = Field(default_factory=dict)
    attacks: list[Attack] = Field(default_factory=list)

    current_state: CurrentState = Field(default_factory=CurrentState)
    notes: CharacterNotes = Field(default_factory=CharacterNotes)

    active_modifiers: list[Modifier] = Field(default_factory=list)
    active_homebrew_rules: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    version: int = 1

    @property
    def total_level(self) -> int:
        """Sum of levels over all classes (0 with no class)."""
        return sum(c.level for c in self.classes)

    def skill_proficiency(self, skill: str) -> ProficiencyLevel:
        """Training level in a skill, ``none`` when unset."""
        return self.skill_proficiencies.get(skill, ProficiencyLevel.NONE)

    def to_document(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class DerivedStats(CamelModel):
    """Stats derived from scores, levels and modifiers."""

    proficiency_bonus: int
    initiative: int
    armor_class: int
    speed: int
    hit_points_max: int
    hit_points_current: int
    hit_points_temp: int
    hit_dice: str
    hit_dice_remaining: int
    passive_perception: int
    passive_investigation: int
    passive_insight: int


class ComputedCharacter(Character):
    """A character with every modifier applied. Read-only and never persisted."""

    model_config = ConfigDict(frozen=True)

    computed_ability_scores: AbilityScores
    ability_modifiers: AbilityScores
    derived_stats: DerivedStats
    computed_skill_bonuses: dict[str, int]
    computed_save_bonuses: dict[str, int]

    def to_character(self) -> Character:
        """Strip computed fields, keeping only what may be persisted."""
        raw = self.model_dump(include=set(Character.model_fields))
        return Character.model_validate(raw)
