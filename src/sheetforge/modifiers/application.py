"""Applying a single modifier to a current value."""

import math
from collections.abc import Iterable

import structlog

from .formula import FormulaContext, FormulaError, evaluate_formula
from .models import Modifier, ModifierOperation

logger = structlog.get_logger(__name__)

Number = int | float


def resolve_modifier_value(modifier: Modifier, context: FormulaContext) -> Number:
    """Resolve a modifier's value to a number.

    Literal numbers are returned as-is. Formula strings are evaluated against
    the context; a formula that fails to evaluate is logged and resolves to 0
    so that one broken homebrew formula cannot break a whole sheet.

    Args:
        modifier: The modifier whose value to resolve
        context: Formula variables

    Returns:
        The resolved number
    """
    if not isinstance(modifier.value, str):
        return modifier.value

    try:
        return evaluate_formula(modifier.value, context)
    except FormulaError as e:
        logger.warning(
            "formula_evaluation_failed",
            modifier_id=modifier.id,
            modifier_name=modifier.name,
            target=modifier.target,
            formula=modifier.value,
            error=str(e),
        )
        return 0


def apply_modifier(current: Number, modifier: Modifier, context: FormulaContext) -> Number:
    """Compute the new value of a target after one modifier.

    ========= ===================================
    operation result
    ========= ===================================
    add       current + value
    subtract  current - value
    multiply  floor(current * value)
    set       value
    min       max(current, value) (a floor)
    max       min(current, value) (a ceiling)
    formula   value (current is ignored)
    ========= ===================================

    Unknown operations leave the value unchanged.

    Args:
        current: Current value of the target
        modifier: Modifier to apply
        context: Formula variables for formula values

    Returns:
        The new value
    """
    operation = modifier.operation
    if operation not in set(ModifierOperation):
        logger.debug(
            "unknown_modifier_operation",
            modifier_id=modifier.id,
            operation=str(operation),
        )
        return current

    value = resolve_modifier_value(modifier, context)

    if operation == ModifierOperation.ADD:
        return current + value
    if operation == ModifierOperation.SUBTRACT:
        return current - value
    if operation == ModifierOperation.MULTIPLY:
        return math.floor(current * value)
    if operation == ModifierOperation.MIN:
        return max(current, value)
    if operation == ModifierOperation.MAX:
        return min(current, value)
    # SET and FORMULA both replace the current value
    return value


def apply_modifiers(
    initial: Number, modifiers: Iterable[Modifier], context: FormulaContext
) -> int:
    """Apply an ordered chain of modifiers and floor the final value.

    Args:
        initial: Starting value of the target
        modifiers: Modifiers in application order
        context: Formula variables

    Returns:
        The final value as an integer
    """
    value = initial
    for modifier in modifiers:
        value = apply_modifier(value, modifier, context)
    return math.floor(value)
