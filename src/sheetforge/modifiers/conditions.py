"""Optional gating of modifiers by their declared conditions.

Resolution applies every active modifier by default. Callers that want
conditions honored pass :func:`conditions_met` as the ``modifier_filter`` of
:func:`sheetforge.character.calculator.compute_character`.

Conditions are checked against the raw character (base scores and class
levels), never against partially computed values.
"""

import structlog

from sheetforge.character.abilities import AbilityName
from sheetforge.character.calculator import build_formula_context, calculate_ability_modifiers
from sheetforge.character.models import Character

from .formula import FormulaError, evaluate_formula
from .models import ConditionType, Modifier, ModifierCondition

logger = structlog.get_logger(__name__)


def _as_int(value: str | int) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _ability_minimum_met(character: Character, value: str | int) -> bool:
    ability, sep, minimum = str(value).partition(":")
    threshold = _as_int(minimum)
    if not sep or threshold is None or ability not in set(AbilityName):
        logger.warning("invalid_ability_condition", value=value)
        return False
    return character.base_ability_scores.get(ability) >= threshold


def _custom_check_met(character: Character, condition: ModifierCondition) -> bool:
    formula = condition.custom_check or str(condition.value)
    context = build_formula_context(
        character, calculate_ability_modifiers(character.base_ability_scores)
    )
    try:
        return evaluate_formula(formula, context) != 0
    except FormulaError as e:
        logger.warning("condition_evaluation_failed", formula=formula, error=str(e))
        return False


def condition_met(condition: ModifierCondition, character: Character) -> bool:
    """Check one condition against a character.

    Args:
        condition: Condition to check
        character: Raw character

    Returns:
        Whether the condition holds. Unknown condition types hold.
    """
    kind = condition.type
    level = character.total_level

    if kind == ConditionType.LEVEL_MIN:
        threshold = _as_int(condition.value)
        return threshold is not None and level >= threshold
    if kind == ConditionType.LEVEL_MAX:
        threshold = _as_int(condition.value)
        return threshold is not None and level <= threshold
    if kind == ConditionType.ABILITY_MIN:
        return _ability_minimum_met(character, condition.value)
    if kind == ConditionType.HAS_FEATURE:
        wanted = str(condition.value)
        return any(f.id == wanted or f.name == wanted for f in character.features)
    if kind == ConditionType.HAS_ITEM:
        wanted = str(condition.value)
        return any(i.item_id == wanted and i.equipped for i in character.inventory)
    if kind == ConditionType.CUSTOM:
        return _custom_check_met(character, condition)

    logger.debug("unknown_condition_type", type=str(kind))
    return True


def conditions_met(modifier: Modifier, character: Character) -> bool:
    """Whether every condition of a modifier holds (true when it has none)."""
    if not modifier.conditions:
        return True
    return all(condition_met(c, character) for c in modifier.conditions)
