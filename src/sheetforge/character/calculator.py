"""Stat resolution: turns a raw Character into a ComputedCharacter.

The pipeline runs in a fixed order, each stage feeding the formula context of
the next:

1. ability scores (base scores + ``ability.*`` modifiers)
2. ability modifiers
3. skill bonuses (``skill.*``)
4. saving throw bonuses (``save.*``)
5. derived stats (``stat.armorClass``, ``stat.speed``, ``stat.hitPointsMax``)

It is a pure function of its input: nothing is cached, nothing is mutated and
no formula error escapes it.
"""

from collections.abc import Callable, Mapping

import structlog

from sheetforge.modifiers.aggregator import group_modifiers_by_target
from sheetforge.modifiers.application import apply_modifiers
from sheetforge.modifiers.models import Modifier
from sheetforge.modifiers.targets import (
    DerivedStatTarget,
    ability_target,
    save_target,
    skill_target,
)

from .abilities import (
    ABILITY_ABBREVIATIONS,
    SKILL_ABILITY_MAP,
    AbilityName,
    SkillName,
    get_modifier,
    get_proficiency_bonus,
    proficiency_multiplier,
)
from .models import AbilityScores, Character, ComputedCharacter, DerivedStats

logger = structlog.get_logger(__name__)

ModifierFilter = Callable[[Modifier, Character], bool]

BASE_ARMOR_CLASS = 10
BASE_SPEED = 30
BASE_HIT_POINTS = 10
DEFAULT_HIT_DIE = 8

# Hit die per class id, used when a ClassLevel carries no explicit hit die
HIT_DICE: dict[str, int] = {
    "barbarian": 12,
    "fighter": 10,
    "paladin": 10,
    "ranger": 10,
    "bard": 8,
    "cleric": 8,
    "druid": 8,
    "monk": 8,
    "rogue": 8,
    "warlock": 8,
    "sorcerer": 6,
    "wizard": 6,
}


def get_hit_die(class_id: str, override: int | None = None) -> int:
    """Hit die size for a class, defaulting to d8 for unknown classes."""
    if override:
        return override
    return HIT_DICE.get(class_id.lower(), DEFAULT_HIT_DIE)


def calculate_ability_modifiers(scores: AbilityScores) -> AbilityScores:
    """Ability modifier for each score."""
    return AbilityScores(
        **{ability.value: get_modifier(scores.get(ability)) for ability in AbilityName}
    )


def build_formula_context(
    character: Character,
    ability_modifiers: AbilityScores,
    extra: Mapping[str, float] | None = None,
) -> dict[str, float]:
    """Build the variables available to modifier formulas.

    Contains ``level``, ``proficiencyBonus``, one ``<abbr>Mod`` per ability
    modifier (``strMod``, ``dexMod``, ...) and one ``<abbr>`` per base ability
    score (``str``, ``dex``, ...).

    Args:
        character: Character providing class levels and base scores
        ability_modifiers: Ability modifiers as computed so far
        extra: Additional variables; they override the standard ones

    Returns:
        Variable name to value mapping
    """
    level = character.total_level
    context: dict[str, float] = {
        "level": level,
        "proficiencyBonus": get_proficiency_bonus(level),
    }
    for ability, abbreviation in ABILITY_ABBREVIATIONS.items():
        context[f"{abbreviation}Mod"] = ability_modifiers.get(ability)
    for ability, abbreviation in ABILITY_ABBREVIATIONS.items():
        context[abbreviation] = character.base_ability_scores.get(ability)
    if extra:
        context.update(extra)
    return context


def _resolve_ability_scores(
    character: Character, groups: Mapping[str, list[Modifier]]
) -> AbilityScores:
    scores = character.base_ability_scores.as_dict()

    for ability in AbilityName:
        modifiers = groups.get(ability_target(ability), [])
        if not modifiers:
            continue
        # Context reflects the scores before this ability's own chain runs
        context = build_formula_context(
            character, calculate_ability_modifiers(AbilityScores(**scores))
        )
        scores[ability.value] = apply_modifiers(scores[ability.value], modifiers, context)

    return AbilityScores(**scores)


def _resolve_skill_bonuses(
    character: Character,
    ability_modifiers: AbilityScores,
    groups: Mapping[str, list[Modifier]],
    context: Mapping[str, float],
) -> dict[str, int]:
    proficiency_bonus = int(context["proficiencyBonus"])
    bonuses: dict[str, int] = {}
    for skill in SkillName:
        bonus = ability_modifiers.get(SKILL_ABILITY_MAP[skill])
        bonus += proficiency_bonus * proficiency_multiplier(character.skill_proficiency(skill))
        bonuses[skill.value] = apply_modifiers(bonus, groups.get(skill_target(skill), []), context)
    return bonuses


def _resolve_save_bonuses(
    character: Character,
    ability_modifiers: AbilityScores,
    groups: Mapping[str, list[Modifier]],
    context: Mapping[str, float],
) -> dict[str, int]:
    proficiency_bonus = int(context["proficiencyBonus"])
    bonuses: dict[str, int] = {}
    for ability in AbilityName:
        bonus = ability_modifiers.get(ability)
        if character.saving_throw_proficiencies.get(ability):
            bonus += proficiency_bonus
        modifiers = groups.get(save_target(ability), [])
        bonuses[ability.value] = apply_modifiers(bonus, modifiers, context)
    return bonuses


def _hit_dice_summary(character: Character) -> str:
    return " + ".join(
        f"{c.level}d{get_hit_die(c.class_id, c.hit_die)}" for c in character.classes
    )


def _resolve_derived_stats(
    character: Character,
    ability_modifiers: AbilityScores,
    skill_bonuses: Mapping[str, int],
    groups: Mapping[str, list[Modifier]],
    context: Mapping[str, float],
) -> DerivedStats:
    level = character.total_level

    armor_class = BASE_ARMOR_CLASS + ability_modifiers.dexterity
    speed = BASE_SPEED
    hit_points_max = 0
    if character.classes:
        hit_points_max = BASE_HIT_POINTS + ability_modifiers.constitution * level

    armor_class = apply_modifiers(
        armor_class, groups.get(DerivedStatTarget.ARMOR_CLASS, []), context
    )
    speed = apply_modifiers(speed, groups.get(DerivedStatTarget.SPEED, []), context)
    hit_points_max = apply_modifiers(
        hit_points_max, groups.get(DerivedStatTarget.HIT_POINTS_MAX, []), context
    )

    return DerivedStats(
        proficiency_bonus=int(context["proficiencyBonus"]),
        initiative=ability_modifiers.dexterity,
        armor_class=armor_class,
        speed=speed,
        hit_points_max=hit_points_max,
        hit_points_current=character.current_state.hit_points,
        hit_points_temp=character.current_state.temp_hit_points,
        hit_dice=_hit_dice_summary(character),
        hit_dice_remaining=sum(character.current_state.hit_dice_remaining.values()),
        passive_perception=10 + skill_bonuses[SkillName.PERCEPTION.value],
        passive_investigation=10 + skill_bonuses[SkillName.INVESTIGATION.value],
        passive_insight=10 + skill_bonuses[SkillName.INSIGHT.value],
    )


def compute_character(
    character: Character, modifier_filter: ModifierFilter | None = None
) -> ComputedCharacter:
    """Resolve every stat of a character.

    Args:
        character: Raw character; it is not modified
        modifier_filter: Optional predicate deciding whether an active modifier
            takes part (e.g. :func:`sheetforge.modifiers.conditions.conditions_met`).
            By default every active modifier applies, conditions included.

    Returns:
        A new ComputedCharacter embedding the raw fields and all computed ones

    Example:
        >>> sheet = compute_character(character)
        >>> sheet.derived_stats.armor_class
        11
    """
    modifiers = character.active_modifiers
    if modifier_filter is not None:
        modifiers = [m for m in modifiers if modifier_filter(m, character)]
    groups = group_modifiers_by_target(modifiers)

    computed_scores = _resolve_ability_scores(character, groups)
    ability_modifiers = calculate_ability_modifiers(computed_scores)
    context = build_formula_context(character, ability_modifiers)

    skill_bonuses = _resolve_skill_bonuses(character, ability_modifiers, groups, context)
    save_bonuses = _resolve_save_bonuses(character, ability_modifiers, groups, context)
    derived_stats = _resolve_derived_stats(
        character, ability_modifiers, skill_bonuses, groups, context
    )

    logger.debug(
        "character_computed",
        character_id=character.id,
        modifiers=len(modifiers),
        targets=len(groups),
    )

    return ComputedCharacter(
        **character.model_dump(include=set(Character.model_fields)),
        computed_ability_scores=computed_scores,
        ability_modifiers=ability_modifiers,
        derived_stats=derived_stats,
        computed_skill_bonuses=skill_bonuses,
        computed_save_bonuses=save_bonuses,
    )
