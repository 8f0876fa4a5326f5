"""
Tests for the end-to-end arrangement pipeline.

Tests verify that arrange():
- Selects, assigns and tessellates in one call
- Always covers the screen exactly
- Honours user exclusions from the preference store
- Falls back to an equal-split grid when asked to
"""

import logging

import pytest
from unittest.mock import patch

from workspace_arranger.constants import Role
from workspace_arranger.errors import InvalidInputError, UnsupportedCardinalityError
from workspace_arranger.geometry import is_exact_partition
from workspace_arranger.instructions import parse_instruction
from workspace_arranger.layout import arrange, arrange_or_fallback
from workspace_arranger.models import ScreenSize

pytestmark = pytest.mark.unit


def _by_app(result):
    return {a.app: a for a in result}


def test_coding_scenario_end_to_end(screen):
    """Cursor, Terminal and Arc are chosen over Xcode and fill the screen."""
    result = arrange(["Terminal", "Xcode", "Cursor", "Arc"], screen, context="I want to code", max_apps=3)

    assert [a.app for a in result] == ["Terminal", "Cursor", "Arc"]
    assert is_exact_partition([a.rect for a in result])

    apps = _by_app(result)
    assert apps["Cursor"].role is Role.PRIMARY
    assert apps["Terminal"].role is Role.SIDE_COLUMN
    assert apps["Arc"].role is Role.CASCADE_PEEK
    assert apps["Cursor"].rect.width == pytest.approx(0.7)
    assert apps["Cursor"].rect.area == max(a.rect.area for a in result)


def test_focus_is_honoured(screen):
    result = _by_app(arrange(["Cursor", "Arc"], screen, context="coding", focused="Arc"))
    assert result["Arc"].role is Role.PRIMARY
    assert result["Cursor"].role is not Role.PRIMARY


@pytest.mark.parametrize(
    "apps, context, primary",
    [
        (["Notes", "Arc"], "research", "Arc"),
        (["Spotify", "Slack", "Notion"], "writing", "Slack"),
    ],
)
def test_top_ranked_app_is_primary(screen, apps, context, primary):
    """Without a focus rule the best-ranked app is primary, not the caller's first."""
    result = arrange(apps, screen, context)
    assert [a.app for a in result] == apps
    roles = _by_app(result)
    assert roles[primary].role is Role.PRIMARY
    assert sum(a.role is Role.PRIMARY for a in result) == 1


@pytest.mark.parametrize("max_apps", [1, 2, 3, 4, 5, 6])
def test_always_full_coverage(max_apps):
    apps = ["Cursor", "Terminal", "Arc", "Slack", "Spotify", "Figma", "Notes"]
    for screen in (ScreenSize(1440, 900), ScreenSize(1080, 1920), ScreenSize(3440, 1440)):
        result = arrange(apps, screen, context="coding", max_apps=max_apps)
        assert 1 <= len(result) <= max_apps
        assert is_exact_partition([a.rect for a in result])
        assert sum(a.role is Role.PRIMARY for a in result) == 1


def test_arrange_is_deterministic(screen):
    apps = ["Slack", "Cursor", "Arc", "Terminal"]
    assert arrange(apps, screen, "coding") == arrange(apps, screen, "coding")


def test_store_exclusions_applied(screen, store):
    store.add_instruction(parse_instruction("when coding, never use arc"))
    result = arrange(["Cursor", "Terminal", "Arc", "Safari"], screen, "coding", store=store)
    apps = [a.app for a in result]
    assert "Arc" not in apps
    assert "Safari" in apps

    # Other contexts are unaffected.
    result = arrange(["Cursor", "Arc"], screen, "research", store=store)
    assert "Arc" in [a.app for a in result]


def test_explicit_exclusions_override_store(screen, store):
    store.add_instruction(parse_instruction("never use arc"))
    result = arrange(["Cursor", "Arc", "Terminal"], screen, "coding", excluded=["Terminal"], store=store)
    assert [a.app for a in result] == ["Cursor", "Arc"]


def test_arrange_rejects_bad_input(screen):
    with pytest.raises(InvalidInputError):
        arrange([], screen)
    with pytest.raises(InvalidInputError):
        arrange(["Cursor"], ScreenSize(-1, 900))
    with pytest.raises(InvalidInputError):
        arrange(["Cursor"], screen, max_apps=0)
    with pytest.raises(InvalidInputError):
        arrange(["Cursor"], screen, excluded=["cursor"])


def test_arrange_logs_summary(screen, caplog):
    with caplog.at_level(logging.INFO, logger="workspace_arranger.layout"):
        arrange(["Cursor", "Terminal"], screen, "coding")
    assert "Arranged 2 of 2 app(s)" in caplog.text


# --------------------------------------------------------------------------- #
# Fallback                                                                    #
# --------------------------------------------------------------------------- #


def test_fallback_on_invalid_screen(caplog):
    with caplog.at_level(logging.WARNING, logger="workspace_arranger.layout"):
        result = arrange_or_fallback(["Cursor", "Terminal", "Arc"], ScreenSize(0, 0), "coding")
    assert [a.app for a in result] == ["Cursor", "Terminal", "Arc"]
    assert is_exact_partition([a.rect for a in result])
    assert result[0].role is Role.PRIMARY
    assert sum(a.role is Role.PRIMARY for a in result) == 1
    assert "equal-split" in caplog.text


def test_fallback_on_engine_error(screen):
    with patch(
        "workspace_arranger.layout.tessellate",
        side_effect=UnsupportedCardinalityError(9, (1, 4)),
    ):
        result = arrange_or_fallback(["A", "B", "C", "D", "E", "F"], screen, max_apps=5)
    assert len(result) == 5
    assert is_exact_partition([a.rect for a in result])


def test_fallback_dedupes_and_handles_empty(screen):
    assert arrange_or_fallback([], screen) == []
    result = arrange_or_fallback(["Arc", "arc"], screen, excluded=["arc"])
    assert [a.app for a in result] == ["Arc"]


def test_fallback_passes_through_success(screen):
    apps = ["Cursor", "Terminal"]
    assert arrange_or_fallback(apps, screen, "coding") == arrange(apps, screen, "coding")
