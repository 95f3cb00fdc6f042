"""Shared fixtures for all tests."""

import itertools

import pytest
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sheetforge.character.models import Character, ClassLevel
from sheetforge.database.models import Base
from sheetforge.modifiers.models import Modifier


@pytest.fixture(scope="session", autouse=True)
def use_test_database(tmp_path_factory):
    """Point every get_session() call at a throwaway database file.

    Runs before anything reads the cached settings, so no test can touch the
    default ./data/sheetforge.db.
    """
    mp = pytest.MonkeyPatch()
    db_path = tmp_path_factory.mktemp("sheetforge_test") / "test_sheetforge.db"
    mp.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")

    import sheetforge.database.engine as engine_module
    from sheetforge.config import get_settings

    engine_module._engine = None
    engine_module._async_session_factory = None
    get_settings.cache_clear()

    yield

    mp.undo()
    engine_module._engine = None
    engine_module._async_session_factory = None
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls made by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def reset_content_cache():
    """Forget cached races/classes so content_dir overrides take effect."""
    from sheetforge.content.loader import get_classes, get_races

    get_races.cache_clear()
    get_classes.cache_clear()
    yield
    get_races.cache_clear()
    get_classes.cache_clear()


@pytest.fixture
async def db_session():
    """Create a test database session with in-memory SQLite."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def make_modifier():
    """Factory for modifiers with sensible defaults and unique ids."""
    counter = itertools.count(1)

    def _make(target: str, operation: str = "add", value=1, **fields) -> Modifier:
        n = next(counter)
        defaults = {
            "id": f"mod-{n}",
            "name": f"Modifier {n}",
            "source": "manual",
            "source_id": "test",
        }
        defaults.update(fields)
        return Modifier(target=target, operation=operation, value=value, **defaults)

    return _make


@pytest.fixture
def fighter_character() -> Character:
    """A level 5 fighter with a spread of base scores and no modifiers."""
    return Character(
        name="Brunhild",
        classes=[ClassLevel(class_id="fighter", class_name="Fighter", level=5)],
        base_ability_scores={
            "strength": 16,
            "dexterity": 14,
            "constitution": 14,
            "intelligence": 10,
            "wisdom": 12,
            "charisma": 8,
        },
    )
