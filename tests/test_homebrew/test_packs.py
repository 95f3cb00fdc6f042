"""Tests for homebrew packs and rules."""

import json

import pytest

from sheetforge.homebrew import (
    HomebrewClass,
    HomebrewContent,
    HomebrewFeat,
    HomebrewImportError,
    HomebrewItem,
    HomebrewPack,
    HomebrewRace,
    HomebrewRule,
    enabled_rule_modifiers,
    export_pack_to_json,
    extract_modifiers_from_pack,
    import_pack_from_json,
)


@pytest.fixture
def sample_pack(make_modifier) -> HomebrewPack:
    """A pack with one modifier in every section."""
    return HomebrewPack(
        name="Frostlands",
        author="GM Kit",
        content=HomebrewContent(
            modifiers=[make_modifier("resource.luck", id="loose")],
            races=[
                HomebrewRace(
                    name="Snow Elf",
                    modifiers=[make_modifier("ability.wisdom", id="race", source="homebrew")],
                )
            ],
            classes=[
                HomebrewClass(
                    name="Runecarver",
                    hit_die=10,
                    modifiers=[make_modifier("save.intelligence", id="class")],
                )
            ],
            feats=[
                HomebrewFeat(
                    name="Cold Blooded", modifiers=[make_modifier("stat.speed", id="feat")]
                )
            ],
            items=[
                HomebrewItem(
                    name="Fur Cloak",
                    modifiers=[make_modifier("stat.armorClass", id="item")],
                )
            ],
            rules=[
                HomebrewRule(
                    name="Hardy Folk",
                    modifiers=[make_modifier("stat.hitPointsMax", "add", "level", id="rule")],
                )
            ],
        ),
    )


class TestExtractModifiers:
    """Tests for collecting a pack's modifiers."""

    def test_order(self, sample_pack):
        """Test loose modifiers come first, then races, classes, feats, items, rules."""
        ids = [m.id for m in extract_modifiers_from_pack(sample_pack)]
        assert ids == ["loose", "race", "class", "feat", "item", "rule"]

    def test_empty_pack(self):
        """Test a pack without content has no modifiers."""
        assert extract_modifiers_from_pack(HomebrewPack(name="Empty")) == []


class TestRuleModifiers:
    """Tests for enabled and active rules."""

    def test_only_enabled_and_active(self, make_modifier):
        """Test a rule must be enabled and listed on the character."""
        on = HomebrewRule(id="on", name="On", modifiers=[make_modifier("stat.speed", id="a")])
        off = HomebrewRule(
            id="off", name="Off", enabled=False, modifiers=[make_modifier("stat.speed", id="b")]
        )
        idle = HomebrewRule(id="idle", name="Idle", modifiers=[make_modifier("stat.speed", id="c")])

        modifiers = enabled_rule_modifiers([on, off, idle], ["on", "off"])
        assert [m.id for m in modifiers] == ["a"]


class TestPackJson:
    """Tests for pack export and import."""

    def test_export_uses_camel_case(self, sample_pack):
        """Test exported documents use camelCase keys."""
        document = json.loads(export_pack_to_json(sample_pack))

        assert "createdAt" in document
        assert document["content"]["classes"][0]["hitDie"] == 10
        assert document["content"]["modifiers"][0]["sourceId"] == "test"

    def test_import_assigns_fresh_identity(self, sample_pack):
        """Test an imported pack keeps content under a new id."""
        imported = import_pack_from_json(export_pack_to_json(sample_pack))

        assert imported.id != sample_pack.id
        assert imported.name == "Frostlands"
        assert imported.created_at >= sample_pack.created_at
        assert extract_modifiers_from_pack(imported) == extract_modifiers_from_pack(sample_pack)

    def test_import_rejects_bad_json(self):
        """Test malformed JSON raises HomebrewImportError."""
        with pytest.raises(HomebrewImportError, match="Invalid JSON"):
            import_pack_from_json("{not json")

    def test_import_rejects_non_pack(self):
        """Test documents missing required fields are rejected."""
        with pytest.raises(HomebrewImportError, match="Invalid homebrew pack"):
            import_pack_from_json(json.dumps({"author": "nobody"}))

    def test_import_rejects_bad_target(self, sample_pack, make_modifier):
        """Test misspelled modifier targets are rejected on import."""
        sample_pack.content.modifiers.append(make_modifier("skill.Stealth"))
        with pytest.raises(HomebrewImportError, match="skill.Stealth"):
            import_pack_from_json(export_pack_to_json(sample_pack))
