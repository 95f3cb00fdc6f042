"""Modifier target vocabulary.

Targets are open, dotted string keys of the form ``<namespace>.<name>``.
Resolution groups modifiers by exact string equality, so ``ability.str`` and
``ability.strength`` are two different buckets. Content authoring paths
(builder, homebrew import) call :func:`validate_target` so that only the
canonical spelling of known stats reaches a character.

Canonical vocabulary:

============== ======================================================= ==========
Namespace      Names                                                   Resolved
============== ======================================================= ==========
ability        strength, dexterity, constitution, intelligence,        yes
               wisdom, charisma
skill          the eighteen skills, camelCase (``sleightOfHand``)      yes
save           the six abilities                                       yes
stat           armorClass, speed, hitPointsMax                         yes
stat           any other name                                          stored only
resource       free-form (``resource.ki``)                             stored only
combat         free-form (``combat.attackBonus``)                      stored only
proficiency    free-form, may contain dots (``proficiency.armor.heavy``) stored only
============== ======================================================= ==========

Targets outside these namespaces are accepted as custom keys.
"""

from enum import StrEnum
from typing import NamedTuple

from sheetforge.character.abilities import ABILITY_NAMES, SKILL_NAMES


class TargetNamespace(StrEnum):
    """Known target namespaces."""

    ABILITY = "ability"
    SKILL = "skill"
    SAVE = "save"
    STAT = "stat"
    RESOURCE = "resource"
    COMBAT = "combat"
    PROFICIENCY = "proficiency"


class DerivedStatTarget(StrEnum):
    """Derived stats that accept modifiers during resolution."""

    ARMOR_CLASS = "stat.armorClass"
    SPEED = "stat.speed"
    HIT_POINTS_MAX = "stat.hitPointsMax"


class InvalidTargetError(ValueError):
    """Raised when a modifier target is not a canonical key."""

    pass


class ParsedTarget(NamedTuple):
    """A target split into namespace and name (name may contain dots)."""

    namespace: str
    name: str


# Closed namespaces: every valid name is listed.
CLOSED_NAMESPACES: dict[str, frozenset[str]] = {
    TargetNamespace.ABILITY: frozenset(ABILITY_NAMES),
    TargetNamespace.SKILL: frozenset(SKILL_NAMES),
    TargetNamespace.SAVE: frozenset(ABILITY_NAMES),
}


def ability_target(ability: str) -> str:
    """Target key for an ability score, e.g. ``ability.strength``."""
    return f"{TargetNamespace.ABILITY}.{ability}"


def skill_target(skill: str) -> str:
    """Target key for a skill bonus, e.g. ``skill.stealth``."""
    return f"{TargetNamespace.SKILL}.{skill}"


def save_target(ability: str) -> str:
    """Target key for a saving throw bonus, e.g. ``save.wisdom``."""
    return f"{TargetNamespace.SAVE}.{ability}"


def parse_target(target: str) -> ParsedTarget:
    """Split a target into namespace and name.

    Args:
        target: Target key such as ``"proficiency.armor.heavy"``

    Returns:
        ParsedTarget; a target with no dot has an empty namespace

    Examples:
        >>> parse_target("proficiency.armor.heavy")
        ParsedTarget(namespace='proficiency', name='armor.heavy')
    """
    namespace, sep, name = target.partition(".")
    if not sep:
        return ParsedTarget(namespace="", name=target)
    return ParsedTarget(namespace=namespace, name=name)


def validate_target(target: str) -> str:
    """Check that a target uses the canonical vocabulary.

    Custom targets (outside the known namespaces) are allowed; inside a known
    namespace the name must be non-empty, and for ``ability``, ``skill`` and
    ``save`` it must be one of the canonical names.

    Args:
        target: Target key to validate

    Returns:
        The target unchanged, for chaining

    Raises:
        InvalidTargetError: If the target is empty or misspells a known stat
    """
    if not target or not target.strip() or target != target.strip():
        raise InvalidTargetError(f"Invalid modifier target {target!r}")

    namespace, name = parse_target(target)
    if namespace not in set(TargetNamespace):
        return target

    if not name:
        raise InvalidTargetError(f"Target {target!r} is missing a name after '{namespace}.'")

    allowed = CLOSED_NAMESPACES.get(namespace)
    if allowed is not None and name not in allowed:
        raise InvalidTargetError(
            f"Unknown {namespace} target {target!r}; expected one of: "
            + ", ".join(sorted(f"{namespace}.{n}" for n in allowed))
        )
    return target


def is_resolved_target(target: str) -> bool:
    """Whether the resolution pipeline reads modifiers for this target."""
    namespace, name = parse_target(target)
    if namespace in CLOSED_NAMESPACES:
        return name in CLOSED_NAMESPACES[namespace]
    return target in set(DerivedStatTarget)
