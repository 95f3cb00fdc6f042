"""User-authored homebrew content."""

from .models import (
    HomebrewClass,
    HomebrewContent,
    HomebrewFeat,
    HomebrewItem,
    HomebrewPack,
    HomebrewRace,
    HomebrewRule,
    ItemType,
    RuleCategory,
)
from .packs import (
    HomebrewImportError,
    enabled_rule_modifiers,
    export_pack_to_json,
    extract_modifiers_from_pack,
    import_pack_from_json,
    validate_pack,
)

__all__ = [
    "HomebrewClass",
    "HomebrewContent",
    "HomebrewFeat",
    "HomebrewImportError",
    "HomebrewItem",
    "HomebrewPack",
    "HomebrewRace",
    "HomebrewRule",
    "ItemType",
    "RuleCategory",
    "enabled_rule_modifiers",
    "export_pack_to_json",
    "extract_modifiers_from_pack",
    "import_pack_from_json",
    "validate_pack",
]
