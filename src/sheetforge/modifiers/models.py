"""Modifier data model.

A modifier is a declarative rule that adjusts one target stat by one operation.
Races, classes, items and homebrew content all express their mechanical effects
as lists of modifiers attached to a character.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ModifierSource(StrEnum):
    """Where a modifier came from. Informational only."""

    RACE = "race"
    SUBRACE = "subrace"
    CLASS = "class"
    SUBCLASS = "subclass"
    BACKGROUND = "background"
    FEAT = "feat"
    ITEM = "item"
    SPELL = "spell"
    CONDITION = "condition"
    HOMEBREW = "homebrew"
    MANUAL = "manual"


class ModifierOperation(StrEnum):
    """How a modifier combines its value with the current value of its target."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    SET = "set"
    MIN = "min"  # enforces a floor
    MAX = "max"  # enforces a ceiling
    FORMULA = "formula"


class ConditionType(StrEnum):
    """Kinds of gating conditions a modifier may declare."""

    HAS_FEATURE = "hasFeature"
    HAS_ITEM = "hasItem"
    LEVEL_MIN = "levelMin"
    LEVEL_MAX = "levelMax"
    ABILITY_MIN = "abilityMin"
    CUSTOM = "custom"


def _coerce(enum: type[StrEnum], value: str) -> StrEnum | str:
    """Return the enum member for a known value; unknown strings are kept as-is."""
    try:
        return enum(value)
    except ValueError:
        return value


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys.

    Character and homebrew JSON documents use camelCase keys; Python code uses
    the snake_case attribute names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class ModifierCondition(CamelModel):
    """A condition gating a modifier.

    Attributes:
        type: Condition kind
        value: Comparison value (feature id, item id, level, ``"strength:13"``)
        custom_check: Formula for ``custom`` conditions, true when non-zero
    """

    type: ConditionType | str = Field(..., description="Condition kind")
    value: str | int = Field(..., description="Comparison value")
    custom_check: str | None = Field(default=None, description="Formula for custom checks")

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: ConditionType | str) -> ConditionType | str:
        return _coerce(ConditionType, value)


class Modifier(CamelModel):
    """A single declarative adjustment to one target.

    Attributes:
        id: Unique modifier identifier
        name: Display name
        description: Optional longer text
        source: Origin category (race, item, homebrew, ...)
        source_id: Identifier of the originating entity, used to remove a set
            of modifiers when their origin changes
        target: Dotted key of the modified stat, e.g. ``"ability.strength"``
        operation: How the value is combined with the current value. Unknown
            operation strings are kept and treated as no-ops during resolution.
        value: A literal number or a formula string
        priority: Application order within a target, ascending
        conditions: Optional gating conditions
        is_homebrew: Provenance flag for display
    """

    id: str = Field(..., description="Unique modifier identifier")
    name: str = Field(..., description="Display name")
    description: str | None = Field(default=None, description="Optional description")
    source: ModifierSource = Field(..., description="Origin category")
    source_id: str = Field(..., description="Originating entity identifier")
    target: str = Field(..., description="Dotted target key, e.g. 'skill.stealth'")
    operation: ModifierOperation | str = Field(..., description="Combining operation")
    value: int | float | str = Field(..., description="Literal number or formula")
    priority: int | None = Field(default=None, description="Ascending application order")
    conditions: list[ModifierCondition] | None = Field(
        default=None, description="Gating conditions"
    )
    is_homebrew: bool = Field(default=False, description="User-authored content")

    @field_validator("operation")
    @classmethod
    def _known_operation(cls, value: ModifierOperation | str) -> ModifierOperation | str:
        # "add" from JSON may validate as the str branch of the union
        return _coerce(ModifierOperation, value)

    @property
    def effective_priority(self) -> int:
        """Priority with the default of 0 applied."""
        return self.priority or 0

    @property
    def is_formula(self) -> bool:
        """Whether the value must be evaluated as a formula."""
        return isinstance(self.value, str)
