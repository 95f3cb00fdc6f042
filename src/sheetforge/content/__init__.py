"""Reference rules content loaded from YAML."""

from .hit_points import calculate_hit_points, calculate_total_hit_points
from .loader import (
    ContentLoadError,
    ContentValidationError,
    get_class,
    get_classes,
    get_race,
    get_races,
    load_classes,
    load_races,
)
from .models import ClassData, RaceData, SubraceData

__all__ = [
    "ClassData",
    "ContentLoadError",
    "ContentValidationError",
    "RaceData",
    "SubraceData",
    "calculate_hit_points",
    "calculate_total_hit_points",
    "get_class",
    "get_classes",
    "get_race",
    "get_races",
    "load_classes",
    "load_races",
]
