"""Tests for applying modifiers to values."""

from sheetforge.modifiers.application import (
    apply_modifier,
    apply_modifiers,
    resolve_modifier_value,
)
from sheetforge.modifiers.aggregator import group_modifiers_by_target

CONTEXT = {"level": 5, "proficiencyBonus": 3, "dexMod": 2}


class TestOperations:
    """Tests for each modifier operation."""

    def test_add_and_subtract(self, make_modifier):
        """Test additive operations."""
        assert apply_modifier(10, make_modifier("stat.speed", "add", 5), CONTEXT) == 15
        assert apply_modifier(10, make_modifier("stat.speed", "subtract", 5), CONTEXT) == 5

    def test_multiply_floors(self, make_modifier):
        """Test multiplication floors fractional results."""
        assert apply_modifier(7, make_modifier("stat.speed", "multiply", 0.5), CONTEXT) == 3
        assert apply_modifier(30, make_modifier("stat.speed", "multiply", 2), CONTEXT) == 60

    def test_set_replaces(self, make_modifier):
        """Test set ignores the current value."""
        assert apply_modifier(30, make_modifier("stat.speed", "set", 25), CONTEXT) == 25

    def test_min_is_a_floor(self, make_modifier):
        """'min' raises the value to at least its operand."""
        floor_of_13 = make_modifier("stat.armorClass", "min", 13)
        assert apply_modifier(11, floor_of_13, CONTEXT) == 13
        assert apply_modifier(15, floor_of_13, CONTEXT) == 15

    def test_max_is_a_ceiling(self, make_modifier):
        """'max' caps the value at its operand."""
        ceiling_of_20 = make_modifier("ability.strength", "max", 20)
        assert apply_modifier(22, ceiling_of_20, CONTEXT) == 20
        assert apply_modifier(18, ceiling_of_20, CONTEXT) == 18

    def test_formula_replaces(self, make_modifier):
        """Test formula operation replaces the current value with the result."""
        unarmored = make_modifier("stat.armorClass", "formula", "10 + dexMod + 3")
        assert apply_modifier(12, unarmored, CONTEXT) == 15

    def test_unknown_operation_is_noop(self, make_modifier):
        """Test unknown operations leave the value unchanged."""
        assert apply_modifier(12, make_modifier("stat.speed", "double", 2), CONTEXT) == 12


class TestValueResolution:
    """Tests for literal and formula values."""

    def test_literal_value(self, make_modifier):
        """Test literal values pass through unchanged."""
        assert resolve_modifier_value(make_modifier("skill.stealth", value=2), CONTEXT) == 2

    def test_formula_value_on_add(self, make_modifier):
        """Test a formula string used as the value of an add."""
        per_level = make_modifier("stat.hitPointsMax", "add", "level * 2")
        assert apply_modifier(10, per_level, CONTEXT) == 20

    def test_broken_formula_contributes_zero(self, make_modifier):
        """Test a malformed formula resolves to 0 without raising."""
        broken = make_modifier("stat.armorClass", "add", "level +")
        assert resolve_modifier_value(broken, CONTEXT) == 0
        assert apply_modifier(12, broken, CONTEXT) == 12

    def test_broken_formula_on_set_sets_zero(self, make_modifier):
        """Test a failing formula used with set sets the target to 0."""
        broken = make_modifier("stat.speed", "set", "unknownVar")
        assert apply_modifier(30, broken, CONTEXT) == 0


class TestChains:
    """Tests for ordered application of several modifiers."""

    def test_priority_decides_the_last_set(self, make_modifier):
        """Test set 3 (priority 10) after set 7 (priority 0) yields 3."""
        late = make_modifier("skill.stealth", "set", 3, priority=10)
        early = make_modifier("skill.stealth", "set", 7, priority=0)
        chain = group_modifiers_by_target([late, early])["skill.stealth"]
        assert apply_modifiers(0, chain, CONTEXT) == 3

    def test_result_is_an_integer(self, make_modifier):
        """Test chains with fractional literals end floored."""
        chain = [make_modifier("stat.speed", "add", 0.5), make_modifier("stat.speed", "add", 0.4)]
        result = apply_modifiers(30, chain, CONTEXT)
        assert result == 30
        assert isinstance(result, int)

    def test_empty_chain(self):
        """Test no modifiers returns the initial value."""
        assert apply_modifiers(14, [], CONTEXT) == 14

    def test_bad_modifier_does_not_affect_others(self, make_modifier):
        """Test a failing formula in the middle of a chain."""
        chain = [
            make_modifier("stat.armorClass", "add", 1),
            make_modifier("stat.armorClass", "add", "nope("),
            make_modifier("stat.armorClass", "add", 2),
        ]
        assert apply_modifiers(10, chain, CONTEXT) == 13
