"""Homebrew repository: packs and standalone rules."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sheetforge.database.models import HomebrewPackRecord, HomebrewRuleRecord
from sheetforge.homebrew.models import HomebrewPack, HomebrewRule
from sheetforge.homebrew.packs import import_pack_from_json, validate_pack
from sheetforge.modifiers.targets import validate_target

logger = structlog.get_logger(__name__)


def _write_pack(record: HomebrewPackRecord, pack: HomebrewPack) -> None:
    record.name = pack.name
    record.data = pack.model_dump(mode="json", by_alias=True)
    record.created_at = pack.created_at
    record.updated_at = pack.updated_at


async def create_pack(session: AsyncSession, pack: HomebrewPack) -> HomebrewPack:
    """
    Store a new homebrew pack.

    Raises:
        InvalidTargetError: If any modifier in the pack has a non-canonical target
    """
    validate_pack(pack)
    record = HomebrewPackRecord(id=pack.id)
    _write_pack(record, pack)
    session.add(record)
    await session.commit()

    logger.info("homebrew_pack_created", pack_id=pack.id, name=pack.name)
    return pack


async def get_pack(session: AsyncSession, pack_id: str) -> HomebrewPack | None:
    record = await session.get(HomebrewPackRecord, pack_id)
    if record is None:
        return None
    return HomebrewPack.model_validate(record.data)


async def list_packs(session: AsyncSession) -> list[HomebrewPack]:
    """All packs ordered by name."""
    result = await session.execute(select(HomebrewPackRecord).order_by(HomebrewPackRecord.name))
    return [HomebrewPack.model_validate(r.data) for r in result.scalars().all()]


async def update_pack(
    session: AsyncSession, pack_id: str, updates: Mapping[str, Any]
) -> HomebrewPack | None:
    """Merge field updates into a stored pack, refreshing ``updated_at``."""
    record = await session.get(HomebrewPackRecord, pack_id)
    if record is None:
        return None

    current = HomebrewPack.model_validate(record.data)
    fields = HomebrewPack.model_fields
    merged = {
        **record.data,
        **{(fields[k].alias or k) if k in fields else k: v for k, v in updates.items()},
        "id": current.id,
        "createdAt": current.created_at,
        "updatedAt": datetime.now(timezone.utc),
    }
    pack = HomebrewPack.model_validate(merged)
    validate_pack(pack)
    _write_pack(record, pack)
    await session.commit()

    logger.debug("homebrew_pack_updated", pack_id=pack_id)
    return pack


async def delete_pack(session: AsyncSession, pack_id: str) -> bool:
    record = await session.get(HomebrewPackRecord, pack_id)
    if record is None:
        return False

    await session.delete(record)
    await session.commit()
    logger.info("homebrew_pack_deleted", pack_id=pack_id)
    return True


async def import_pack(session: AsyncSession, document: str) -> HomebrewPack:
    """Import a pack JSON document and store it under a fresh id.

    Raises:
        HomebrewImportError: If the document is not a valid pack
    """
    return await create_pack(session, import_pack_from_json(document))


def _write_rule(record: HomebrewRuleRecord, rule: HomebrewRule) -> None:
    record.name = rule.name
    record.enabled = rule.enabled
    record.data = rule.model_dump(mode="json", by_alias=True)


async def create_rule(session: AsyncSession, rule: HomebrewRule) -> HomebrewRule:
    """Store a standalone rule after checking its modifier targets."""
    for modifier in rule.modifiers:
        validate_target(modifier.target)

    record = HomebrewRuleRecord(id=rule.id)
    _write_rule(record, rule)
    session.add(record)
    await session.commit()

    logger.info("homebrew_rule_created", rule_id=rule.id, name=rule.name)
    return rule


async def get_rule(session: AsyncSession, rule_id: str) -> HomebrewRule | None:
    record = await session.get(HomebrewRuleRecord, rule_id)
    if record is None:
        return None
    return HomebrewRule.model_validate(record.data)


async def list_rules(session: AsyncSession, enabled_only: bool = False) -> list[HomebrewRule]:
    """All rules ordered by name, optionally only the enabled ones."""
    query = select(HomebrewRuleRecord).order_by(HomebrewRuleRecord.name)
    if enabled_only:
        query = query.where(HomebrewRuleRecord.enabled.is_(True))
    result = await session.execute(query)
    return [HomebrewRule.model_validate(r.data) for r in result.scalars().all()]


async def list_enabled_rules(session: AsyncSession) -> list[HomebrewRule]:
    return await list_rules(session, enabled_only=True)


async def toggle_rule(session: AsyncSession, rule_id: str) -> HomebrewRule | None:
    """Flip a rule's ``enabled`` flag. Returns None if it does not exist."""
    record = await session.get(HomebrewRuleRecord, rule_id)
    if record is None:
        return None

    rule = HomebrewRule.model_validate(record.data)
    rule = rule.model_copy(update={"enabled": not rule.enabled})
    _write_rule(record, rule)
    await session.commit()

    logger.info("homebrew_rule_toggled", rule_id=rule_id, enabled=rule.enabled)
    return rule


async def delete_rule(session: AsyncSession, rule_id: str) -> bool:
    record = await session.get(HomebrewRuleRecord, rule_id)
    if record is None:
        return False

    await session.delete(record)
    await session.commit()
    logger.info("homebrew_rule_deleted", rule_id=rule_id)
    return True
