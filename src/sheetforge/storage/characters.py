"""Character repository.

Characters are stored raw: a :class:`ComputedCharacter` handed to any save
operation is stripped back to its persisted fields first. All functions take
an open :class:`AsyncSession` and commit their own changes.
"""

import json
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sheetforge.character.calculator import compute_character
from sheetforge.character.models import Character, ComputedCharacter
from sheetforge.config import Settings, get_settings
from sheetforge.database.models import CharacterRecord
from sheetforge.modifiers.conditions import conditions_met

logger = structlog.get_logger(__name__)


class CharacterImportError(Exception):
    """Raised when a character JSON document cannot be imported."""

    pass


def _raw(character: Character) -> Character:
    if isinstance(character, ComputedCharacter):
        return character.to_character()
    return character


def _from_record(record: CharacterRecord) -> Character:
    return Character.model_validate(record.data)


def _write(record: CharacterRecord, character: Character) -> None:
    record.name = character.name
    record.version = character.version
    record.data = character.to_document()
    record.created_at = character.created_at
    record.updated_at = character.updated_at


async def _get_record(session: AsyncSession, character_id: str) -> CharacterRecord | None:
    return await session.get(CharacterRecord, character_id)


async def create_character(session: AsyncSession, character: Character) -> Character:
    """
    Store a new character.

    Args:
        session: Database session
        character: Character to store (computed fields are dropped)

    Returns:
        The stored raw character
    """
    character = _raw(character)
    record = CharacterRecord(id=character.id)
    _write(record, character)
    session.add(record)
    await session.commit()

    logger.info("character_created", character_id=character.id, name=character.name)
    return character


async def get_character(session: AsyncSession, character_id: str) -> Character | None:
    """Load a character by id, or None if it does not exist."""
    record = await _get_record(session, character_id)
    if record is None:
        return None
    return _from_record(record)


async def list_characters(session: AsyncSession) -> list[Character]:
    """All characters, most recently updated first."""
    result = await session.execute(
        select(CharacterRecord).order_by(
            CharacterRecord.updated_at.desc(), CharacterRecord.id
        )
    )
    return [_from_record(record) for record in result.scalars().all()]


def _by_alias(updates: Mapping[str, Any]) -> dict[str, Any]:
    # Validation reads aliases before field names
    fields = Character.model_fields
    return {
        (fields[key].alias or key) if key in fields else key: value
        for key, value in updates.items()
    }


async def update_character(
    session: AsyncSession, character_id: str, updates: Mapping[str, Any]
) -> Character | None:
    """
    Merge field updates into a stored character.

    The id is never changed. The version is incremented and ``updated_at``
    refreshed.

    Args:
        session: Database session
        character_id: Character to update
        updates: Field values keyed by field name or camelCase alias

    Returns:
        The updated character, or None if it does not exist
    """
    record = await _get_record(session, character_id)
    if record is None:
        return None

    current = _from_record(record)
    merged = {**current.to_document(), **_by_alias(updates)}
    merged.pop("id", None)
    updated = Character.model_validate(
        {
            **merged,
            "id": current.id,
            "createdAt": current.created_at,
            "version": current.version + 1,
            "updatedAt": datetime.now(timezone.utc),
        }
    )
    _write(record, updated)
    await session.commit()

    logger.debug("character_updated", character_id=character_id, version=updated.version)
    return updated


async def save_character(session: AsyncSession, character: Character) -> Character:
    """
    Insert or replace a whole character.

    Existing characters get their version bumped and ``updated_at`` refreshed.
    """
    character = _raw(character)
    record = await _get_record(session, character.id)
    if record is None:
        return await create_character(session, character)

    stored = _from_record(record)
    updated = character.model_copy(
        update={
            "created_at": stored.created_at,
            "version": stored.version + 1,
            "updated_at": datetime.now(timezone.utc),
        }
    )
    _write(record, updated)
    await session.commit()

    logger.debug("character_saved", character_id=updated.id, version=updated.version)
    return updated


async def delete_character(session: AsyncSession, character_id: str) -> bool:
    """Delete a character. Returns False if it did not exist."""
    record = await _get_record(session, character_id)
    if record is None:
        return False

    await session.delete(record)
    await session.commit()

    logger.info("character_deleted", character_id=character_id)
    return True


def _fresh_copy(character: Character, **updates: Any) -> Character:
    now = datetime.now(timezone.utc)
    return character.model_copy(
        update={
            "id": str(uuid.uuid4()),
            "version": 1,
            "created_at": now,
            "updated_at": now,
            **updates,
        },
        deep=True,
    )


async def duplicate_character(session: AsyncSession, character_id: str) -> Character | None:
    """Copy a character under a new id, named ``"<name> (copy)"``."""
    original = await get_character(session, character_id)
    if original is None:
        return None

    copy = _fresh_copy(original, name=f"{original.name} (copy)")
    return await create_character(session, copy)


def _matches(character: Character, query: str) -> bool:
    haystack = [character.name, character.race.race_name]
    haystack.extend(c.class_name for c in character.classes)
    return any(query in text.lower() for text in haystack if text)


async def search_characters(session: AsyncSession, query: str) -> list[Character]:
    """Case-insensitive search over name, race name and class names."""
    needle = query.strip().lower()
    characters = await list_characters(session)
    if not needle:
        return characters
    return [c for c in characters if _matches(c, needle)]


def export_character_to_json(character: Character) -> str:
    """Serialize the raw part of a character as indented camelCase JSON."""
    return json.dumps(_raw(character).to_document(), indent=2)


def import_character_from_json(document: str) -> Character:
    """
    Parse a character document under a fresh id with version 1.

    Raises:
        CharacterImportError: If the JSON is malformed or not a character
    """
    try:
        character = Character.model_validate(json.loads(document))
    except json.JSONDecodeError as e:
        raise CharacterImportError(f"Invalid JSON: {e}")
    except ValidationError as e:
        raise CharacterImportError(f"Invalid character data: {e}")

    return _fresh_copy(character)


async def import_character(session: AsyncSession, document: str) -> Character:
    """Import a character document and store it."""
    character = import_character_from_json(document)
    stored = await create_character(session, character)
    logger.info("character_imported", character_id=stored.id, name=stored.name)
    return stored


async def compute_stored_character(
    session: AsyncSession, character_id: str, settings: Settings | None = None
) -> ComputedCharacter | None:
    """
    Load and compute a character.

    Modifier conditions are honored only when
    ``settings.enforce_modifier_conditions`` is set.

    Returns:
        The computed character, or None if it does not exist
    """
    character = await get_character(session, character_id)
    if character is None:
        return None

    settings = settings or get_settings()
    modifier_filter = conditions_met if settings.enforce_modifier_conditions else None
    return compute_character(character, modifier_filter=modifier_filter)
