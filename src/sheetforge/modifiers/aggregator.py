"""Grouping of a character's modifiers by target."""

from collections import defaultdict
from collections.abc import Iterable

from .models import Modifier


def group_modifiers_by_target(modifiers: Iterable[Modifier]) -> dict[str, list[Modifier]]:
    """Group modifiers by exact target string, each group in application order.

    Every group is sorted ascending by priority (missing priority counts as 0).
    The sort is stable, so modifiers of equal priority keep the order in which
    they were given. Conditions are not looked at here; callers that honor
    them filter the modifiers beforehand.

    Args:
        modifiers: Active modifiers in encounter order

    Returns:
        Mapping of target key to its ordered modifiers

    Example:
        >>> groups = group_modifiers_by_target(character.active_modifiers)
        >>> groups.get("ability.dexterity", [])
    """
    groups: defaultdict[str, list[Modifier]] = defaultdict(list)
    for modifier in modifiers:
        groups[modifier.target].append(modifier)

    return {
        target: sorted(group, key=lambda m: m.effective_priority)
        for target, group in groups.items()
    }
