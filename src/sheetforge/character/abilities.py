"""Ability scores, skills and proficiency math for 5e-style characters.

This module owns the canonical ability and skill vocabulary used by modifier
targets (``ability.<name>``, ``skill.<name>``, ``save.<name>``) and the two
level/score formulas everything else is derived from.
"""

from enum import StrEnum


class AbilityName(StrEnum):
    """The six core abilities."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"


class SkillName(StrEnum):
    """The eighteen skills, spelled as they appear in modifier targets."""

    ATHLETICS = "athletics"
    ACROBATICS = "acrobatics"
    SLEIGHT_OF_HAND = "sleightOfHand"
    STEALTH = "stealth"
    ARCANA = "arcana"
    HISTORY = "history"
    INVESTIGATION = "investigation"
    NATURE = "nature"
    RELIGION = "religion"
    ANIMAL_HANDLING = "animalHandling"
    INSIGHT = "insight"
    MEDICINE = "medicine"
    PERCEPTION = "perception"
    SURVIVAL = "survival"
    DECEPTION = "deception"
    INTIMIDATION = "intimidation"
    PERFORMANCE = "performance"
    PERSUASION = "persuasion"


class ProficiencyLevel(StrEnum):
    """Training level in a skill."""

    NONE = "none"
    PROFICIENT = "proficient"
    EXPERT = "expert"


# Constant names for easy import, in canonical order
ABILITY_NAMES = [ability.value for ability in AbilityName]
SKILL_NAMES = [skill.value for skill in SkillName]

# Short names used as formula variables: "str" for the score, "strMod" for the modifier
ABILITY_ABBREVIATIONS: dict[AbilityName, str] = {
    AbilityName.STRENGTH: "str",
    AbilityName.DEXTERITY: "dex",
    AbilityName.CONSTITUTION: "con",
    AbilityName.INTELLIGENCE: "int",
    AbilityName.WISDOM: "wis",
    AbilityName.CHARISMA: "cha",
}

SKILL_ABILITY_MAP: dict[SkillName, AbilityName] = {
    SkillName.ATHLETICS: AbilityName.STRENGTH,
    SkillName.ACROBATICS: AbilityName.DEXTERITY,
    SkillName.SLEIGHT_OF_HAND: AbilityName.DEXTERITY,
    SkillName.STEALTH: AbilityName.DEXTERITY,
    SkillName.ARCANA: AbilityName.INTELLIGENCE,
    SkillName.HISTORY: AbilityName.INTELLIGENCE,
    SkillName.INVESTIGATION: AbilityName.INTELLIGENCE,
    SkillName.NATURE: AbilityName.INTELLIGENCE,
    SkillName.RELIGION: AbilityName.INTELLIGENCE,
    SkillName.ANIMAL_HANDLING: AbilityName.WISDOM,
    SkillName.INSIGHT: AbilityName.WISDOM,
    SkillName.MEDICINE: AbilityName.WISDOM,
    SkillName.PERCEPTION: AbilityName.WISDOM,
    SkillName.SURVIVAL: AbilityName.WISDOM,
    SkillName.DECEPTION: AbilityName.CHARISMA,
    SkillName.INTIMIDATION: AbilityName.CHARISMA,
    SkillName.PERFORMANCE: AbilityName.CHARISMA,
    SkillName.PERSUASION: AbilityName.CHARISMA,
}


def get_modifier(score: int) -> int:
    """Calculate the ability modifier for a score.

    Args:
        score: The ability score (typically 1-30)

    Returns:
        The modifier: (score - 10) // 2

    Examples:
        >>> get_modifier(10)
        0
        >>> get_modifier(14)
        2
        >>> get_modifier(8)
        -1
    """
    return (score - 10) // 2


def get_proficiency_bonus(level: int) -> int:
    """Calculate the proficiency bonus for a total character level.

    Levels 1-4 give +2, 5-8 +3, 9-12 +4, 13-16 +5 and 17-20 +6. A level 0
    character (no classes yet) gets +1.

    Args:
        level: Total character level, summed over all classes

    Returns:
        (level - 1) // 4 + 2
    """
    return (level - 1) // 4 + 2


def proficiency_multiplier(level: ProficiencyLevel | str | None) -> int:
    """How many times the proficiency bonus applies for a training level."""
    if level == ProficiencyLevel.EXPERT:
        return 2
    if level == ProficiencyLevel.PROFICIENT:
        return 1
    return 0


def next_proficiency_level(level: ProficiencyLevel | str | None) -> ProficiencyLevel:
    """Cycle none -> proficient -> expert -> none."""
    if level == ProficiencyLevel.PROFICIENT:
        return ProficiencyLevel.EXPERT
    if level == ProficiencyLevel.EXPERT:
        return ProficiencyLevel.NONE
    return ProficiencyLevel.PROFICIENT
