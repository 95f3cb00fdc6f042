"""Command-line entry point for sheetforge."""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from sheetforge.character.abilities import ABILITY_ABBREVIATIONS, ABILITY_NAMES, SKILL_NAMES
from sheetforge.character.calculator import compute_character
from sheetforge.character.models import Character, ComputedCharacter
from sheetforge.config import get_settings
from sheetforge.database.engine import close_db, get_session, init_db
from sheetforge.log import configure_logging
from sheetforge.modifiers.conditions import conditions_met
from sheetforge.storage import characters as character_repo
from sheetforge.storage.characters import CharacterImportError

logger = structlog.get_logger(__name__)


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def format_sheet(sheet: ComputedCharacter) -> str:
    """Render a computed character as a plain-text summary."""
    classes = " / ".join(f"{c.class_name} {c.level}" for c in sheet.classes) or "No class"
    race = sheet.race.subrace_name or sheet.race.race_name or "No race"
    lines = [f"{sheet.name or 'Unnamed'} - {race} {classes}", ""]

    for ability in ABILITY_NAMES:
        score = sheet.computed_ability_scores.get(ability)
        modifier = sheet.ability_modifiers.get(ability)
        lines.append(f"{ABILITY_ABBREVIATIONS[ability].upper():<4}{score:>3} ({_signed(modifier)})")

    saves = ", ".join(
        f"{ABILITY_ABBREVIATIONS[a].upper()} {_signed(sheet.computed_save_bonuses[a])}"
        for a in ABILITY_NAMES
    )
    lines.extend(["", f"Saves: {saves}", "Skills:"])
    for skill in SKILL_NAMES:
        lines.append(f"  {skill:<16}{_signed(sheet.computed_skill_bonuses[skill]):>4}")

    stats = sheet.derived_stats
    lines.extend(
        [
            "",
            f"AC {stats.armor_class}  Initiative {_signed(stats.initiative)}  "
            f"Speed {stats.speed}  Proficiency {_signed(stats.proficiency_bonus)}",
            f"HP {stats.hit_points_current}/{stats.hit_points_max}"
            + (f" (+{stats.hit_points_temp} temp)" if stats.hit_points_temp else "")
            + f"  Hit Dice {stats.hit_dice or '-'}",
            f"Passive Perception {stats.passive_perception}  "
            f"Investigation {stats.passive_investigation}  Insight {stats.passive_insight}",
        ]
    )
    return "\n".join(lines)


def load_character_file(path: Path) -> Character:
    """Read a character JSON file as-is (id and version preserved)."""
    try:
        return Character.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise CharacterImportError(f"{path}: {e}")


def cmd_compute(args: argparse.Namespace) -> int:
    character = load_character_file(args.file)
    modifier_filter = conditions_met if get_settings().enforce_modifier_conditions else None
    sheet = compute_character(character, modifier_filter=modifier_filter)
    if args.json:
        print(sheet.model_dump_json(by_alias=True, indent=2))
    else:
        print(format_sheet(sheet))
    return 0


async def _import(path: Path) -> int:
    document = path.read_text(encoding="utf-8")
    async with get_session() as session:
        character = await character_repo.import_character(session, document)
    print(character.id)
    return 0


async def _export(character_id: str) -> int:
    async with get_session() as session:
        character = await character_repo.get_character(session, character_id)
    if character is None:
        print(f"Character not found: {character_id}", file=sys.stderr)
        return 1
    print(character_repo.export_character_to_json(character))
    return 0


async def _list(query: str | None) -> int:
    async with get_session() as session:
        if query:
            found = await character_repo.search_characters(session, query)
        else:
            found = await character_repo.list_characters(session)
    for character in found:
        classes = ", ".join(f"{c.class_name} {c.level}" for c in character.classes)
        print(f"{character.id}  {character.name:<24} {character.race.race_name:<12} {classes}")
    return 0


async def _with_database(operation) -> int:
    await init_db()
    try:
        return await operation
    finally:
        await close_db()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sheetforge", description="Character sheet engine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compute = subparsers.add_parser("compute", help="Compute a character JSON file")
    compute.add_argument("file", type=Path)
    compute.add_argument("--json", action="store_true", help="Print the computed sheet as JSON")

    import_ = subparsers.add_parser("import", help="Import a character JSON file")
    import_.add_argument("file", type=Path)

    export = subparsers.add_parser("export", help="Print a stored character as JSON")
    export.add_argument("id")

    list_ = subparsers.add_parser("list", help="List stored characters")
    list_.add_argument("--search", "-s", default=None, help="Filter by name, race or class")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Parse arguments and run one command.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        if args.command == "compute":
            return cmd_compute(args)
        if args.command == "import":
            return asyncio.run(_with_database(_import(args.file)))
        if args.command == "export":
            return asyncio.run(_with_database(_export(args.id)))
        return asyncio.run(_with_database(_list(args.search)))
    except (CharacterImportError, OSError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
