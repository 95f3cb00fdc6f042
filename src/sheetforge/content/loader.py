"""
Reference content loader for Sheetforge.

Handles loading and validating race and class data from YAML files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog
import yaml

from sheetforge.config import get_settings
from sheetforge.modifiers.targets import InvalidTargetError, validate_target

from .models import ClassData, RaceData

logger = structlog.get_logger(__name__)

BUNDLED_CONTENT_DIR = Path(__file__).parent / "data"
RACES_FILE = "races.yaml"
CLASSES_FILE = "classes.yaml"


class ContentLoadError(Exception):
    """Raised when there's an error loading content data."""

    pass


class ContentValidationError(Exception):
    """Raised when content validation fails."""

    pass


def load_yaml_file(file_path: Path, key: str) -> list[dict[str, Any]]:
    """
    Load a YAML file containing a list of definitions under a top-level key.

    Args:
        file_path: Path to the YAML file
        key: Top-level key holding the list (e.g., "races")

    Returns:
        List of definition dictionaries

    Raises:
        ContentLoadError: If the file cannot be loaded or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ContentLoadError(f"YAML parsing error in {file_path}: {e}")
    except FileNotFoundError:
        raise ContentLoadError(f"File not found: {file_path}")
    except OSError as e:
        raise ContentLoadError(f"Error loading {file_path}: {e}")

    if not data:
        raise ContentLoadError(f"Empty YAML file: {file_path}")

    if key not in data:
        raise ContentLoadError(f"Missing '{key}' key in {file_path}")

    entries = data[key]
    if not isinstance(entries, list):
        raise ContentLoadError(f"'{key}' must be a list in {file_path}")

    return entries


def _validate_targets(owner_id: str, modifiers: list[dict[str, Any]], file_path: Path) -> None:
    for modifier in modifiers:
        try:
            validate_target(str(modifier.get("target", "")))
        except InvalidTargetError as e:
            raise ContentValidationError(f"'{owner_id}' in {file_path}: {e}")


def validate_entry(entry: dict[str, Any], required: list[str], file_path: Path) -> None:
    """
    Validate that a definition has all required fields and canonical modifier targets.

    Args:
        entry: Definition dictionary
        required: Required field names
        file_path: Path to the source file (for error messages)

    Raises:
        ContentValidationError: If a field is missing or a target is not canonical
    """
    entry_id = entry.get("id", "unknown")
    for field in required:
        if field not in entry:
            raise ContentValidationError(
                f"'{entry_id}' in {file_path} missing required field: {field}"
            )

    _validate_targets(entry_id, entry.get("modifiers") or [], file_path)
    for subrace in entry.get("subraces") or []:
        _validate_targets(subrace.get("id", entry_id), subrace.get("modifiers") or [], file_path)


def _resolve_dir(content_dir: Path | None) -> Path:
    if content_dir is not None:
        return content_dir
    return get_settings().content_dir or BUNDLED_CONTENT_DIR


def load_races(content_dir: Path | None = None) -> dict[str, RaceData]:
    """
    Load all races.

    Args:
        content_dir: Directory containing races.yaml. Defaults to
            ``Settings.content_dir`` or the bundled data.

    Returns:
        Dictionary mapping race id to RaceData

    Raises:
        ContentLoadError: If loading fails
        ContentValidationError: If validation fails
    """
    file_path = _resolve_dir(content_dir) / RACES_FILE
    races: dict[str, RaceData] = {}

    for entry in load_yaml_file(file_path, "races"):
        validate_entry(entry, ["id", "name"], file_path)
        try:
            race = RaceData.model_validate(entry)
        except ValueError as e:
            raise ContentValidationError(f"Failed to create race '{entry.get('id')}': {e}")
        if race.id in races:
            raise ContentValidationError(f"Duplicate race ID '{race.id}' found in {file_path}")
        races[race.id] = race

    logger.info("races_loaded", total_races=len(races), path=str(file_path))
    return races


def load_classes(content_dir: Path | None = None) -> dict[str, ClassData]:
    """
    Load all classes.

    Args:
        content_dir: Directory containing classes.yaml. Defaults to
            ``Settings.content_dir`` or the bundled data.

    Returns:
        Dictionary mapping class id to ClassData

    Raises:
        ContentLoadError: If loading fails
        ContentValidationError: If validation fails
    """
    file_path = _resolve_dir(content_dir) / CLASSES_FILE
    classes: dict[str, ClassData] = {}

    for entry in load_yaml_file(file_path, "classes"):
        validate_entry(entry, ["id", "name", "hit_die"], file_path)
        try:
            class_data = ClassData.model_validate(entry)
        except ValueError as e:
            raise ContentValidationError(f"Failed to create class '{entry.get('id')}': {e}")
        if class_data.id in classes:
            raise ContentValidationError(
                f"Duplicate class ID '{class_data.id}' found in {file_path}"
            )
        classes[class_data.id] = class_data

    logger.info("classes_loaded", total_classes=len(classes), path=str(file_path))
    return classes


@lru_cache
def get_races() -> dict[str, RaceData]:
    """Cached races from the configured content directory."""
    return load_races()


@lru_cache
def get_classes() -> dict[str, ClassData]:
    """Cached classes from the configured content directory."""
    return load_classes()


def get_race(race_id: str) -> RaceData | None:
    """Get a race by its ID."""
    return get_races().get(race_id)


def get_class(class_id: str) -> ClassData | None:
    """Get a class by its ID."""
    return get_classes().get(class_id)
