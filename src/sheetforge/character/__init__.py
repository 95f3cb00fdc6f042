"""Character vocabulary, records and stat resolution."""

from .abilities import (
    ABILITY_NAMES,
    SKILL_ABILITY_MAP,
    SKILL_NAMES,
    AbilityName,
    ProficiencyLevel,
    SkillName,
    get_modifier,
    get_proficiency_bonus,
)

__all__ = [
    "ABILITY_NAMES",
    "SKILL_ABILITY_MAP",
    "SKILL_NAMES",
    "AbilityName",
    "ProficiencyLevel",
    "SkillName",
    "get_modifier",
    "get_proficiency_bonus",
]
