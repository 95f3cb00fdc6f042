"""Tests for engine setup."""

from pathlib import Path

import pytest

from sheetforge.database import engine as engine_module
from sheetforge.database.models import CharacterRecord


class TestSqliteFile:
    """Tests for locating the SQLite file behind a URL."""

    def test_relative_file(self):
        """Test a relative SQLite path is returned as given."""
        path = engine_module.sqlite_file("sqlite+aiosqlite:///./data/sheetforge.db")
        assert path == Path("./data/sheetforge.db")

    @pytest.mark.parametrize(
        "url",
        [
            "sqlite+aiosqlite:///:memory:",
            "sqlite+aiosqlite://",
            "postgresql+asyncpg://user:pw@localhost/sheets",
        ],
    )
    def test_no_file(self, url):
        """Test in-memory and non-SQLite URLs have no file."""
        assert engine_module.sqlite_file(url) is None


class TestEngineLifecycle:
    """Tests for init_db, get_session and close_db against the test database."""

    async def test_init_creates_tables_and_sessions_commit(self):
        """Test tables exist after init_db and get_session commits on exit."""
        await engine_module.init_db()
        try:
            async with engine_module.get_session() as session:
                session.add(CharacterRecord(id="engine-test", name="Probe", data={}))

            async with engine_module.get_session() as session:
                record = await session.get(CharacterRecord, "engine-test")
                assert record is not None
                await session.delete(record)
        finally:
            await engine_module.close_db()

    async def test_session_rolls_back_on_error(self):
        """Test an exception inside get_session discards pending rows."""
        await engine_module.init_db()
        try:
            with pytest.raises(RuntimeError):
                async with engine_module.get_session() as session:
                    session.add(CharacterRecord(id="rolled-back", name="Ghost", data={}))
                    await session.flush()
                    raise RuntimeError("boom")

            async with engine_module.get_session() as session:
                assert await session.get(CharacterRecord, "rolled-back") is None
        finally:
            await engine_module.close_db()

    async def test_close_resets_engine(self):
        """Test close_db forgets the engine so the next call builds a new one."""
        first = engine_module.get_engine()
        await engine_module.close_db()
        second = engine_module.get_engine()
        try:
            assert first is not second
        finally:
            await engine_module.close_db()
