"""Character editing operations that keep active modifiers consistent.

Modifiers are attached when their source (race, class, item, homebrew rule) is
added to a character and are removed as a set, by ``source_id``, when that
source is replaced or removed. Every function here returns a new Character;
the input is left untouched. Version and timestamps are handled by storage.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from sheetforge.content.hit_points import calculate_total_hit_points
from sheetforge.content.models import ClassData, RaceData, SubraceData
from sheetforge.modifiers.models import Modifier, ModifierSource
from sheetforge.modifiers.targets import validate_target

from .abilities import AbilityName, get_modifier, next_proficiency_level
from .models import AbilityScores, Character, ClassLevel, RaceRef, SavingThrowProficiencies

logger = structlog.get_logger(__name__)


def create_character(name: str = "", **fields: Any) -> Character:
    """Create an empty character: all scores 10, no proficiencies, no modifiers."""
    return Character(name=name, **fields)


def _with_modifiers(character: Character, modifiers: list[Modifier]) -> Character:
    return character.model_copy(update={"active_modifiers": modifiers}, deep=True)


def attach_modifiers(
    character: Character, source_id: str, modifiers: Iterable[Modifier]
) -> Character:
    """Replace every modifier of ``source_id`` with a new set.

    Args:
        character: Character to update
        source_id: Identifier of the originating entity
        modifiers: New modifiers for that source

    Returns:
        The updated character

    Raises:
        InvalidTargetError: If any modifier uses a non-canonical target
    """
    new_modifiers = list(modifiers)
    for modifier in new_modifiers:
        validate_target(modifier.target)

    kept = [m for m in character.active_modifiers if m.source_id != source_id]
    logger.debug(
        "modifiers_attached",
        character_id=character.id,
        source_id=source_id,
        replaced=len(character.active_modifiers) - len(kept),
        added=len(new_modifiers),
    )
    return _with_modifiers(character, kept + new_modifiers)


def remove_modifiers(character: Character, source_id: str) -> Character:
    """Remove every modifier that originated from ``source_id``."""
    kept = [m for m in character.active_modifiers if m.source_id != source_id]
    return _with_modifiers(character, kept)


def remove_modifiers_by_source(character: Character, *sources: ModifierSource) -> Character:
    """Remove every modifier whose source category is one of ``sources``."""
    kept = [m for m in character.active_modifiers if m.source not in sources]
    return _with_modifiers(character, kept)


def set_race(
    character: Character,
    race: RaceData,
    subrace: SubraceData | None = None,
    is_homebrew: bool = False,
) -> Character:
    """Change a character's race, swapping all race and subrace modifiers.

    Args:
        character: Character to update
        race: New race
        subrace: Optional subrace of that race
        is_homebrew: Whether the race comes from homebrew content

    Returns:
        The updated character
    """
    updated = remove_modifiers_by_source(
        character, ModifierSource.RACE, ModifierSource.SUBRACE
    )
    updated = attach_modifiers(updated, race.id, race.modifiers)
    if subrace is not None:
        updated = attach_modifiers(updated, subrace.id, subrace.modifiers)

    race_ref = RaceRef(
        race_id=race.id,
        race_name=race.name,
        subrace_id=subrace.id if subrace else None,
        subrace_name=subrace.name if subrace else None,
        is_homebrew=is_homebrew,
    )
    return updated.model_copy(update={"race": race_ref}, deep=True)


def _constitution_modifier(character: Character) -> int:
    # Only base scores: current HP is set at level-up time, before modifiers
    return get_modifier(character.base_ability_scores.constitution)


def set_class(character: Character, class_data: ClassData, level: int = 1) -> Character:
    """Make ``class_data`` the character's only class.

    Saving throw proficiencies come from the class, class modifiers replace the
    previous class's, and current hit points are reset to the class total.

    Args:
        character: Character to update
        class_data: The new class
        level: Level in that class

    Returns:
        The updated character
    """
    updated = remove_modifiers_by_source(character, ModifierSource.CLASS)
    updated = attach_modifiers(updated, class_data.id, class_data.modifiers)

    class_level = ClassLevel(
        class_id=class_data.id,
        class_name=class_data.name,
        level=level,
        hit_die=class_data.hit_die,
    )
    saves = SavingThrowProficiencies(
        **{ability.value: ability in class_data.saving_throws for ability in AbilityName}
    )
    hit_points = calculate_total_hit_points(
        [class_level], _constitution_modifier(character), {class_data.id: class_data}
    )
    current_state = updated.current_state.model_copy(update={"hit_points": hit_points})

    return updated.model_copy(
        update={
            "classes": [class_level],
            "saving_throw_proficiencies": saves,
            "current_state": current_state,
        },
        deep=True,
    )


def set_level(
    character: Character, level: int, classes: Mapping[str, ClassData] | None = None
) -> Character:
    """Set the level of the character's first class and recompute current HP.

    A character without any class is returned unchanged.
    """
    if not character.classes:
        return character

    first = character.classes[0].model_copy(update={"level": level})
    class_levels = [first, *character.classes[1:]]
    hit_points = calculate_total_hit_points(
        class_levels, _constitution_modifier(character), classes or {}
    )
    current_state = character.current_state.model_copy(update={"hit_points": hit_points})
    return character.model_copy(
        update={"classes": class_levels, "current_state": current_state}, deep=True
    )


def set_base_ability_score(character: Character, ability: AbilityName, score: int) -> Character:
    """Set one base ability score."""
    scores = character.base_ability_scores.as_dict()
    scores[AbilityName(ability).value] = score
    return character.model_copy(
        update={"base_ability_scores": AbilityScores(**scores)}, deep=True
    )


def cycle_skill_proficiency(character: Character, skill: str) -> Character:
    """Advance a skill through none -> proficient -> expert -> none."""
    proficiencies = dict(character.skill_proficiencies)
    proficiencies[skill] = next_proficiency_level(character.skill_proficiency(skill))
    return character.model_copy(update={"skill_proficiencies": proficiencies}, deep=True)


def toggle_saving_throw(character: Character, ability: AbilityName) -> Character:
    """Flip the proficiency of one saving throw."""
    saves = character.saving_throw_proficiencies
    name = AbilityName(ability).value
    updated = saves.model_copy(update={name: not saves.get(name)})
    return character.model_copy(update={"saving_throw_proficiencies": updated}, deep=True)
