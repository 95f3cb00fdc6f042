"""Tests for the sheetforge command line."""

import json

import pytest

from sheetforge.character.models import ClassLevel
from sheetforge.main import build_parser, main


@pytest.fixture
def character_file(tmp_path, fighter_character, make_modifier):
    """A character JSON file for a level 5 fighter wearing a ring of protection."""
    character = fighter_character.model_copy(
        update={
            "active_modifiers": [make_modifier("stat.armorClass", "add", 1, source="item")],
            "classes": [ClassLevel(class_id="fighter", class_name="Fighter", level=5)],
        }
    )
    path = tmp_path / "brunhild.json"
    path.write_text(character.model_dump_json(by_alias=True), encoding="utf-8")
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_requires_command(self):
        """Test running without a command is an error."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_compute_flags(self, tmp_path):
        """Test compute accepts a file and --json."""
        args = build_parser().parse_args(["compute", str(tmp_path / "x.json"), "--json"])
        assert args.command == "compute"
        assert args.json is True


class TestCompute:
    """Tests for the compute command."""

    def test_text_summary(self, character_file, capsys):
        """Test the plain-text sheet."""
        assert main(["compute", str(character_file)]) == 0

        out = capsys.readouterr().out
        assert "Brunhild" in out
        assert "Fighter 5" in out
        assert "AC 13" in out
        assert "HP 0/20" in out
        assert "Hit Dice 5d10" in out

    def test_json_output(self, character_file, capsys):
        """Test --json prints the computed character document."""
        assert main(["compute", str(character_file), "--json"]) == 0

        document = json.loads(capsys.readouterr().out)
        assert document["derivedStats"]["armorClass"] == 13
        assert document["computedAbilityScores"]["strength"] == 16

    def test_bad_file(self, tmp_path, capsys):
        """Test an invalid file exits with status 1."""
        path = tmp_path / "broken.json"
        path.write_text("{oops", encoding="utf-8")

        assert main(["compute", str(path)]) == 1
        assert "error" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        """Test a missing file exits with status 1."""
        assert main(["compute", str(tmp_path / "nope.json")]) == 1


class TestRepositoryCommands:
    """Tests for import, list and export against the configured database."""

    def test_import_list_export(self, character_file, capsys):
        """Test a character survives import and export."""
        assert main(["import", str(character_file)]) == 0
        character_id = capsys.readouterr().out.strip()

        assert main(["list", "--search", "brunhild"]) == 0
        assert character_id in capsys.readouterr().out

        assert main(["export", character_id]) == 0
        document = json.loads(capsys.readouterr().out)
        assert document["id"] == character_id
        assert document["name"] == "Brunhild"

    def test_export_missing(self, capsys):
        """Test exporting an unknown id fails."""
        assert main(["export", "missing"]) == 1
        assert "not found" in capsys.readouterr().err
