#!/usr/bin/env python3
"""
Check a reference content directory for sheetforge.

Loads races.yaml and classes.yaml, prints a summary, then builds and computes
a level 1 character for every race/subrace and class combination so that any
modifier that breaks resolution shows up before the content ships.

Usage:
    python scripts/check_content.py [CONTENT_DIR]
"""

import sys
from pathlib import Path

from sheetforge.character.builder import create_character, set_class, set_race
from sheetforge.character.calculator import compute_character
from sheetforge.content.loader import (
    ContentLoadError,
    ContentValidationError,
    load_classes,
    load_races,
)


def main() -> int:
    content_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None

    try:
        races = load_races(content_dir)
        classes = load_classes(content_dir)
    except (ContentLoadError, ContentValidationError) as e:
        print(f"Content error: {e}")
        return 1

    print("=" * 70)
    print("sheetforge - content check")
    print("=" * 70)
    print(f"\nRaces:   {len(races)}")
    for race in races.values():
        subraces = ", ".join(s.name for s in race.subraces) or "-"
        print(f"  - {race.name:<12} {len(race.modifiers)} modifiers, subraces: {subraces}")
    print(f"Classes: {len(classes)}")
    for class_data in classes.values():
        modifiers = len(class_data.modifiers)
        print(f"  - {class_data.name:<12} d{class_data.hit_die}, {modifiers} modifiers")

    checked = 0
    for race in races.values():
        for subrace in [None, *race.subraces]:
            for class_data in classes.values():
                character = set_race(create_character("Check"), race, subrace)
                character = set_class(character, class_data)
                sheet = compute_character(character)
                checked += 1
                if sheet.derived_stats.armor_class <= 0 or sheet.derived_stats.speed <= 0:
                    label = subrace.name if subrace else race.name
                    print(f"\nSuspicious sheet for {label} {class_data.name}:")
                    print(f"  {sheet.derived_stats}")

    print(f"\nComputed {checked} race/class combinations")
    return 0


if __name__ == "__main__":
    sys.exit(main())
