"""Hit point rolls per class level."""

from collections.abc import Iterable, Mapping

from sheetforge.character.models import ClassLevel

from .models import ClassData


def calculate_hit_points(
    hit_die: int, level: int, constitution_modifier: int, is_first_level: bool = True
) -> int:
    """Hit points gained for one class level.

    Level 1 of a class, and the character's first level overall, take the
    maximum of the hit die; every other level takes the fixed average, half the
    die plus one (d6 -> 4, d8 -> 5, d10 -> 6, d12 -> 7).

    Args:
        hit_die: Hit die size of the class
        level: Class level being gained
        constitution_modifier: Current constitution modifier
        is_first_level: Whether this is the character's first level overall

    Returns:
        Hit points gained at that level
    """
    if level == 1 or is_first_level:
        return hit_die + constitution_modifier
    return hit_die // 2 + 1 + constitution_modifier


def calculate_total_hit_points(
    class_levels: Iterable[ClassLevel],
    constitution_modifier: int,
    classes: Mapping[str, ClassData],
) -> int:
    """Total hit points over every level of every class.

    The first level of each class takes the maximum of its hit die. Classes
    missing from ``classes`` contribute nothing, unless the ClassLevel carries
    its own hit die.

    Args:
        class_levels: Class levels in the order they were taken
        constitution_modifier: Constitution modifier applied at every level
        classes: Known classes by id

    Returns:
        Total hit points
    """
    total = 0
    is_first = True

    for class_level in class_levels:
        class_data = classes.get(class_level.class_id)
        hit_die = class_level.hit_die or (class_data.hit_die if class_data else None)
        if hit_die is None:
            continue
        for level in range(1, class_level.level + 1):
            total += calculate_hit_points(hit_die, level, constitution_modifier, is_first)
            is_first = False

    return total
