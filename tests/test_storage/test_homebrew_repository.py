"""Tests for the homebrew repository."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from sheetforge.homebrew import (
    HomebrewContent,
    HomebrewImportError,
    HomebrewPack,
    HomebrewRule,
    export_pack_to_json,
)
from sheetforge.modifiers.targets import InvalidTargetError
from sheetforge.storage import homebrew as repo


class TestPacks:
    """Tests for stored homebrew packs."""

    async def test_create_and_get(self, db_session: AsyncSession, make_modifier):
        """Test a pack loads back with its content."""
        pack = HomebrewPack(
            name="Frostlands",
            content=HomebrewContent(modifiers=[make_modifier("stat.speed", "add", 5)]),
        )
        await repo.create_pack(db_session, pack)
        loaded = await repo.get_pack(db_session, pack.id)

        assert loaded == pack

    async def test_create_rejects_bad_target(self, db_session: AsyncSession, make_modifier):
        """Test packs with misspelled targets are not stored."""
        pack = HomebrewPack(
            name="Typos", content=HomebrewContent(modifiers=[make_modifier("save.wis")])
        )
        with pytest.raises(InvalidTargetError):
            await repo.create_pack(db_session, pack)

    async def test_list_by_name(self, db_session: AsyncSession):
        """Test packs are listed alphabetically."""
        for name in ("Zeppelins", "Arcana Unearthed", "Monsters"):
            await repo.create_pack(db_session, HomebrewPack(name=name))

        names = [p.name for p in await repo.list_packs(db_session)]
        assert names == ["Arcana Unearthed", "Monsters", "Zeppelins"]

    async def test_update(self, db_session: AsyncSession):
        """Test updating pack fields refreshes updated_at."""
        pack = await repo.create_pack(db_session, HomebrewPack(name="Draft"))
        updated = await repo.update_pack(db_session, pack.id, {"name": "Final", "version": "1.1.0"})

        assert updated.id == pack.id
        assert updated.name == "Final"
        assert updated.version == "1.1.0"
        assert updated.updated_at >= pack.updated_at
        assert (await repo.get_pack(db_session, pack.id)).name == "Final"

    async def test_update_missing(self, db_session: AsyncSession):
        """Test updating an unknown pack returns None."""
        assert await repo.update_pack(db_session, "missing", {"name": "x"}) is None

    async def test_delete(self, db_session: AsyncSession):
        """Test deleting a pack."""
        pack = await repo.create_pack(db_session, HomebrewPack(name="Gone"))

        assert await repo.delete_pack(db_session, pack.id) is True
        assert await repo.get_pack(db_session, pack.id) is None
        assert await repo.delete_pack(db_session, pack.id) is False

    async def test_import(self, db_session: AsyncSession):
        """Test importing a pack document stores a copy under a new id."""
        original = HomebrewPack(name="Shared", author="Friend")
        imported = await repo.import_pack(db_session, export_pack_to_json(original))

        assert imported.id != original.id
        assert (await repo.get_pack(db_session, imported.id)).author == "Friend"

    async def test_import_invalid(self, db_session: AsyncSession):
        """Test invalid pack documents are rejected."""
        with pytest.raises(HomebrewImportError):
            await repo.import_pack(db_session, "{}")


class TestRules:
    """Tests for stored homebrew rules."""

    async def test_create_and_list(self, db_session: AsyncSession, make_modifier):
        """Test rules are listed by name."""
        await repo.create_rule(db_session, HomebrewRule(name="Slow Healing"))
        await repo.create_rule(
            db_session,
            HomebrewRule(
                name="Flanking", modifiers=[make_modifier("combat.attackBonus", "add", 2)]
            ),
        )

        names = [r.name for r in await repo.list_rules(db_session)]
        assert names == ["Flanking", "Slow Healing"]

    async def test_toggle_and_list_enabled(self, db_session: AsyncSession):
        """Test toggling a rule moves it out of the enabled list and back."""
        rule = await repo.create_rule(db_session, HomebrewRule(name="Gritty Realism"))

        toggled = await repo.toggle_rule(db_session, rule.id)
        assert toggled.enabled is False
        assert await repo.list_enabled_rules(db_session) == []

        await repo.toggle_rule(db_session, rule.id)
        assert [r.id for r in await repo.list_enabled_rules(db_session)] == [rule.id]

    async def test_toggle_missing(self, db_session: AsyncSession):
        """Test toggling an unknown rule returns None."""
        assert await repo.toggle_rule(db_session, "missing") is None

    async def test_create_rejects_bad_target(self, db_session: AsyncSession, make_modifier):
        """Test rules with misspelled targets are rejected."""
        rule = HomebrewRule(name="Typo", modifiers=[make_modifier("ability.con")])
        with pytest.raises(InvalidTargetError):
            await repo.create_rule(db_session, rule)

    async def test_delete(self, db_session: AsyncSession):
        """Test deleting a rule."""
        rule = await repo.create_rule(db_session, HomebrewRule(name="Temporary"))

        assert await repo.delete_rule(db_session, rule.id) is True
        assert await repo.get_rule(db_session, rule.id) is None
        assert await repo.delete_rule(db_session, rule.id) is False
