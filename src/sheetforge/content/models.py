"""Reference rules content: races, subraces and classes."""

from pydantic import Field

from sheetforge.character.abilities import AbilityName
from sheetforge.modifiers.models import CamelModel, Modifier


class SubraceData(CamelModel):
    """
    A subrace of a race.

    Attributes:
        id: Unique subrace identifier (e.g., "hill-dwarf")
        name: Display name
        traits: Trait names granted by the subrace
        modifiers: Modifiers attached with source "subrace"
    """

    id: str = Field(..., description="Unique subrace identifier")
    name: str = Field(..., description="Display name")
    traits: list[str] = Field(default_factory=list, description="Trait names")
    modifiers: list[Modifier] = Field(default_factory=list, description="Subrace modifiers")


class RaceData(CamelModel):
    """
    A playable race.

    Attributes:
        id: Unique race identifier (e.g., "dwarf")
        name: Display name
        source: Rulebook abbreviation
        speed: Walking speed in feet
        size: Small, Medium or Large
        darkvision: Darkvision range in feet, if any
        traits: Trait names
        modifiers: Modifiers attached with source "race"
        subraces: Available subraces
    """

    id: str = Field(..., description="Unique race identifier")
    name: str = Field(..., description="Display name")
    source: str = Field(default="homebrew", description="Rulebook abbreviation")
    speed: int = Field(default=30, description="Walking speed in feet")
    size: str = Field(default="Medium", description="Small, Medium or Large")
    darkvision: int | None = Field(default=None, description="Darkvision range in feet")
    traits: list[str] = Field(default_factory=list, description="Trait names")
    modifiers: list[Modifier] = Field(default_factory=list, description="Race modifiers")
    subraces: list[SubraceData] = Field(default_factory=list, description="Subraces")

    def get_subrace(self, subrace_id: str) -> SubraceData | None:
        """Find a subrace by id."""
        return next((s for s in self.subraces if s.id == subrace_id), None)


class SkillChoices(CamelModel):
    count: int = 0
    from_: list[str] = Field(default_factory=list, alias="from")


class Spellcasting(CamelModel):
    ability: AbilityName
    type: str = Field(..., description="full, half, third or pact")


class ClassData(CamelModel):
    """
    A character class.

    Attributes:
        id: Unique class identifier (e.g., "fighter")
        name: Display name
        hit_die: Hit die size (6, 8, 10 or 12)
        saving_throws: Abilities whose saves the class is proficient in
        modifiers: Modifiers attached with source "class"
    """

    id: str = Field(..., description="Unique class identifier")
    name: str = Field(..., description="Display name")
    source: str = Field(default="homebrew", description="Rulebook abbreviation")
    hit_die: int = Field(..., description="Hit die size")
    primary_ability: list[AbilityName] = Field(default_factory=list)
    saving_throws: list[AbilityName] = Field(default_factory=list)
    armor_proficiencies: list[str] = Field(default_factory=list)
    weapon_proficiencies: list[str] = Field(default_factory=list)
    tool_proficiencies: list[str] = Field(default_factory=list)
    skill_choices: SkillChoices = Field(default_factory=SkillChoices)
    spellcasting: Spellcasting | None = None
    modifiers: list[Modifier] = Field(default_factory=list, description="Class modifiers")
