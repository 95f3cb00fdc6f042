"""Modifier model, formula evaluation, aggregation and application."""

from .formula import FormulaContext, FormulaError, evaluate_formula
from .models import (
    CamelModel,
    ConditionType,
    Modifier,
    ModifierCondition,
    ModifierOperation,
    ModifierSource,
)
from .aggregator import group_modifiers_by_target
from .application import apply_modifier, apply_modifiers, resolve_modifier_value
from .targets import InvalidTargetError, TargetNamespace, parse_target, validate_target

__all__ = [
    "CamelModel",
    "ConditionType",
    "FormulaContext",
    "FormulaError",
    "InvalidTargetError",
    "Modifier",
    "ModifierCondition",
    "ModifierOperation",
    "ModifierSource",
    "TargetNamespace",
    "apply_modifier",
    "apply_modifiers",
    "evaluate_formula",
    "group_modifiers_by_target",
    "parse_target",
    "resolve_modifier_value",
    "validate_target",
]
