"""Homebrew pack utilities: modifier extraction and JSON exchange."""

import json
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

import structlog
from pydantic import ValidationError

from sheetforge.modifiers.models import Modifier
from sheetforge.modifiers.targets import InvalidTargetError, validate_target

from .models import HomebrewPack, HomebrewRule

logger = structlog.get_logger(__name__)


class HomebrewImportError(Exception):
    """Raised when a homebrew pack document cannot be imported."""

    pass


def extract_modifiers_from_pack(pack: HomebrewPack) -> list[Modifier]:
    """Collect every modifier in a pack.

    Order: loose modifiers, then races, classes, feats, items and rules.
    """
    content = pack.content
    modifiers: list[Modifier] = list(content.modifiers)
    for group in (content.races, content.classes, content.feats, content.items, content.rules):
        for entry in group:
            modifiers.extend(entry.modifiers)
    return modifiers


def enabled_rule_modifiers(
    rules: Iterable[HomebrewRule], active_rule_ids: Iterable[str]
) -> list[Modifier]:
    """Modifiers of rules that are both enabled and active on a character.

    Args:
        rules: Known homebrew rules
        active_rule_ids: The character's ``active_homebrew_rules``

    Returns:
        Modifiers in rule order
    """
    active = set(active_rule_ids)
    modifiers: list[Modifier] = []
    for rule in rules:
        if rule.enabled and rule.id in active:
            modifiers.extend(rule.modifiers)
    return modifiers


def validate_pack(pack: HomebrewPack) -> None:
    """Check that every modifier in a pack uses a canonical target.

    Raises:
        InvalidTargetError: On the first non-canonical target
    """
    for modifier in extract_modifiers_from_pack(pack):
        validate_target(modifier.target)


def export_pack_to_json(pack: HomebrewPack) -> str:
    """Serialize a pack as an indented camelCase JSON document."""
    return json.dumps(pack.model_dump(mode="json", by_alias=True), indent=2)


def import_pack_from_json(document: str) -> HomebrewPack:
    """Parse a pack document, giving it a fresh id and timestamps.

    Args:
        document: JSON text as produced by :func:`export_pack_to_json`

    Returns:
        The imported pack (not yet stored)

    Raises:
        HomebrewImportError: If the JSON is malformed, does not describe a pack
            or contains a non-canonical modifier target
    """
    try:
        data = json.loads(document)
        pack = HomebrewPack.model_validate(data)
        validate_pack(pack)
    except json.JSONDecodeError as e:
        raise HomebrewImportError(f"Invalid JSON: {e}")
    except ValidationError as e:
        raise HomebrewImportError(f"Invalid homebrew pack: {e}")
    except InvalidTargetError as e:
        raise HomebrewImportError(str(e))

    now = datetime.now(timezone.utc)
    imported = pack.model_copy(
        update={"id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
    )
    logger.info(
        "homebrew_pack_imported",
        pack_id=imported.id,
        name=imported.name,
        modifiers=len(extract_modifiers_from_pack(imported)),
    )
    return imported
