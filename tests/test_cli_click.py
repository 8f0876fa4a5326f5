"""
Tests for the Click CLI.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from workspace_arranger.cli_click import cli
from workspace_arranger.errors import InvalidInputError

pytestmark = pytest.mark.unit


@pytest.fixture
def runner(prefs_file):
    """Create a Click test runner backed by a temporary preference file."""
    return CliRunner()


def test_cli_help(runner):
    """Test that help message works."""
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "workspace-arranger" in result.output
    assert "Commands:" in result.output
    for command in ("arrange", "classify", "select", "presets", "prefs"):
        assert command in result.output


def test_arrange_table_output(runner):
    result = runner.invoke(cli, ["arrange", "Cursor", "Terminal", "Arc", "-c", "coding"])
    assert result.exit_code == 0, result.output
    assert "Cursor" in result.output
    assert "primary" in result.output
    assert "side_column" in result.output


def test_arrange_json_with_pixels(runner):
    result = runner.invoke(
        cli,
        [
            "arrange", "Cursor", "Terminal", "Arc", "Xcode",
            "--context", "I want to code",
            "--screen", "1440x900",
            "--max-apps", "3",
            "--pixels",
            "--output", "json",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    apps = [a["app"] for a in data["arrangements"]]
    assert apps == ["Cursor", "Terminal", "Arc"]
    area = sum(
        a["bounds"]["width"] * a["bounds"]["height"] for a in data["arrangements"]
    )
    assert area == 1440 * 900
    assert data["arrangements"][0]["role"] == "primary"


def test_arrange_focus_option(runner):
    result = runner.invoke(
        cli, ["arrange", "Cursor", "Arc", "-c", "coding", "-f", "Arc", "-o", "json"]
    )
    assert result.exit_code == 0, result.output
    roles = {a["app"]: a["role"] for a in json.loads(result.output)["arrangements"]}
    assert roles["Arc"] == "primary"


def test_arrange_invalid_screen(runner):
    result = runner.invoke(cli, ["arrange", "Cursor", "--screen", "huge"])
    assert result.exit_code == 2
    assert "WIDTHxHEIGHT" in result.output


def test_arrange_engine_error_is_reported(runner):
    with patch(
        "workspace_arranger.cli_click.arrange",
        side_effect=InvalidInputError("boom"),
    ):
        result = runner.invoke(cli, ["arrange", "Cursor"])
    assert result.exit_code == 1
    assert "boom" in result.output


def test_arrange_fallback_flag(runner):
    with patch(
        "workspace_arranger.layout.tessellate",
        side_effect=InvalidInputError("boom"),
    ):
        result = runner.invoke(cli, ["arrange", "Cursor", "Arc", "--fallback", "-o", "json"])
    assert result.exit_code == 0, result.output
    rects = [a["rect"] for a in json.loads(result.output)["arrangements"]]
    assert [r["width"] for r in rects] == [0.5, 0.5]


def test_arrange_respects_stored_exclusions(runner):
    result = runner.invoke(cli, ["prefs", "add", "when coding, never open xcode"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(cli, ["arrange", "Xcode", "Terminal", "-c", "coding", "-o", "json"])
    assert result.exit_code == 0, result.output
    apps = [a["app"] for a in json.loads(result.output)["arrangements"]]
    assert apps == ["Terminal"]


def test_classify_json(runner):
    result = runner.invoke(cli, ["classify", "Terminal", "Foobar", "-o", "json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data[0] == {
        "app": "Terminal",
        "archetype": "text_stream",
        "confident": True,
        "role": "side_column",
    }
    assert data[1]["confident"] is False


def test_select_json(runner):
    result = runner.invoke(
        cli, ["select", "Cursor", "Terminal", "Xcode", "Arc", "-c", "coding", "-m", "3", "-o", "json"]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["selected"] == ["Cursor", "Terminal", "Arc"]
    assert data["scores"][0]["app"] == "Cursor"


def test_presets_filtered(runner):
    result = runner.invoke(cli, ["presets", "-n", "2"])
    assert result.exit_code == 0
    assert "left_right_split" in result.output
    assert "four_quadrants" not in result.output


def test_presets_marks_recommendation(runner):
    result = runner.invoke(cli, ["presets", "-n", "2", "-c", "coding"])
    assert result.exit_code == 0
    assert "* main_sidebar" in result.output
    assert "* left_right_split" not in result.output


def test_prefs_round_trip(runner, prefs_file):
    result = runner.invoke(cli, ["prefs", "add", "always put terminal on the right"])
    assert result.exit_code == 0, result.output
    assert "always_position" in result.output
    assert prefs_file.exists()

    result = runner.invoke(cli, ["prefs", "list", "-o", "json"])
    rules = json.loads(result.output)
    assert rules[0]["app_name"] == "Terminal"

    result = runner.invoke(cli, ["prefs", "remove", "terminal"])
    assert "Removed 1 rule(s)" in result.output

    result = runner.invoke(cli, ["prefs", "list"])
    assert "No rules stored." in result.output


def test_prefs_add_notes_which_rules_affect_arrangements(runner):
    result = runner.invoke(cli, ["prefs", "add", "always put terminal on the left"])
    assert result.exit_code == 0, result.output
    assert "only never-use rules change arrangements" in result.output

    result = runner.invoke(cli, ["prefs", "add", "never open xcode"])
    assert result.exit_code == 0, result.output
    assert "only never-use rules" not in result.output


def test_prefs_show(runner):
    runner.invoke(cli, ["prefs", "add", "always put terminal on the right"])
    runner.invoke(cli, ["prefs", "add", "never open xcode"])

    result = runner.invoke(cli, ["prefs", "show", "terminal"])
    assert result.exit_code == 0, result.output
    assert "Position:  right" in result.output
    assert "Never use: no" in result.output

    result = runner.invoke(cli, ["prefs", "show", "Xcode", "-c", "coding"])
    assert "Never use: yes" in result.output
    assert "Position:  -" in result.output


def test_prefs_add_unparseable(runner):
    result = runner.invoke(cli, ["prefs", "add", "make it pretty"])
    assert result.exit_code == 1
    assert "Could not understand" in result.output


def test_prefs_clear(runner):
    runner.invoke(cli, ["prefs", "add", "never open xcode"])
    result = runner.invoke(cli, ["prefs", "clear", "--yes"])
    assert result.exit_code == 0
    result = runner.invoke(cli, ["prefs", "list"])
    assert "No rules stored." in result.output
