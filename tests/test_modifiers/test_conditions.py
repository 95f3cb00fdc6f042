"""Tests for optional modifier condition checks."""

from sheetforge.character.calculator import compute_character
from sheetforge.character.models import Character, ClassLevel, Feature, InventoryItem
from sheetforge.modifiers.conditions import condition_met, conditions_met
from sheetforge.modifiers.models import ModifierCondition


def _condition(type_: str, value, custom_check=None) -> ModifierCondition:
    return ModifierCondition(type=type_, value=value, custom_check=custom_check)


class TestConditionChecks:
    """Tests for each condition type."""

    def test_level_bounds(self, fighter_character):
        """Test levelMin and levelMax against total level."""
        assert condition_met(_condition("levelMin", 5), fighter_character)
        assert not condition_met(_condition("levelMin", 6), fighter_character)
        assert condition_met(_condition("levelMax", "5"), fighter_character)
        assert not condition_met(_condition("levelMax", 4), fighter_character)

    def test_ability_minimum(self, fighter_character):
        """Test abilityMin reads the base score."""
        assert condition_met(_condition("abilityMin", "strength:13"), fighter_character)
        assert not condition_met(_condition("abilityMin", "charisma:13"), fighter_character)

    def test_malformed_ability_minimum_fails(self, fighter_character):
        """Test abilityMin values that cannot be parsed do not hold."""
        assert not condition_met(_condition("abilityMin", "strength"), fighter_character)
        assert not condition_met(_condition("abilityMin", "might:10"), fighter_character)

    def test_has_feature(self):
        """Test hasFeature matches a feature id or name."""
        character = Character(
            features=[Feature(id="feat-1", name="Second Wind", source="class")]
        )
        assert condition_met(_condition("hasFeature", "feat-1"), character)
        assert condition_met(_condition("hasFeature", "Second Wind"), character)
        assert not condition_met(_condition("hasFeature", "Rage"), character)

    def test_has_item_requires_equipped(self):
        """Test hasItem only matches equipped inventory items."""
        character = Character(
            inventory=[
                InventoryItem(id="i1", item_id="shield", name="Shield", equipped=True),
                InventoryItem(id="i2", item_id="rope", name="Rope", equipped=False),
            ]
        )
        assert condition_met(_condition("hasItem", "shield"), character)
        assert not condition_met(_condition("hasItem", "rope"), character)

    def test_custom_formula(self, fighter_character):
        """Test custom checks evaluate a formula, true when non-zero."""
        assert condition_met(
            _condition("custom", "", custom_check="level >= 5 * (strMod >= 3)"),
            fighter_character,
        )
        assert not condition_met(_condition("custom", "dex > 15"), fighter_character)

    def test_custom_formula_error_fails_closed(self, fighter_character):
        """Test a broken custom check does not hold."""
        assert not condition_met(_condition("custom", "", "level >="), fighter_character)

    def test_custom_formula_overflow_and_nesting_fail_closed(self, fighter_character):
        """Test non-finite and deeply nested custom checks do not hold and do not raise."""
        overflow = _condition("custom", "", "floor(10^300 * 10^300)")
        nested = _condition("custom", "", "(" * 2000 + "1" + ")" * 2000)

        assert not condition_met(overflow, fighter_character)
        assert not condition_met(nested, fighter_character)

    def test_unknown_type_holds(self, fighter_character):
        """Test unrecognized condition types do not block a modifier."""
        assert condition_met(_condition("moonPhase", "full"), fighter_character)


class TestConditionsMet:
    """Tests for the modifier-level predicate."""

    def test_no_conditions(self, make_modifier, fighter_character):
        """Test modifiers without conditions always pass."""
        assert conditions_met(make_modifier("stat.speed"), fighter_character)

    def test_all_must_hold(self, make_modifier, fighter_character):
        """Test every condition has to be met."""
        modifier = make_modifier(
            "stat.speed",
            conditions=[
                {"type": "levelMin", "value": 3},
                {"type": "abilityMin", "value": "dexterity:16"},
            ],
        )
        assert not conditions_met(modifier, fighter_character)


class TestComputeWithConditions:
    """Tests for conditions during computation."""

    def _gated_character(self, make_modifier) -> Character:
        gated = make_modifier(
            "stat.armorClass", "add", 2, conditions=[{"type": "levelMin", "value": 10}]
        )
        return Character(
            classes=[ClassLevel(class_id="fighter", class_name="Fighter", level=1)],
            active_modifiers=[gated],
        )

    def test_applied_by_default(self, make_modifier):
        """Test unmet conditions are ignored unless a filter is given."""
        sheet = compute_character(self._gated_character(make_modifier))
        assert sheet.derived_stats.armor_class == 12

    def test_filtered_when_requested(self, make_modifier):
        """Test conditions_met as a filter drops the gated modifier."""
        sheet = compute_character(
            self._gated_character(make_modifier), modifier_filter=conditions_met
        )
        assert sheet.derived_stats.armor_class == 10
