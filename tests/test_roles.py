"""
Tests for focus resolution and initial role placement.
"""

import pytest

from workspace_arranger.constants import Role, Visibility
from workspace_arranger.errors import InvalidInputError
from workspace_arranger.models import ScreenSize
from workspace_arranger.roles import assign, resolve_focus

pytestmark = pytest.mark.unit


def _by_app(result):
    return {a.app: a for a in result}


# --------------------------------------------------------------------------- #
# Focus                                                                       #
# --------------------------------------------------------------------------- #


def test_explicit_focus_wins():
    assert resolve_focus(["Cursor", "Terminal"], focused="terminal", context="coding") == "Terminal"


def test_focus_outside_selection_ignored():
    assert resolve_focus(["Cursor", "Terminal"], focused="Safari", context="coding") == "Cursor"


def test_coding_focus_prefers_code_workspace():
    assert resolve_focus(["Terminal", "Arc", "Cursor"], context="coding") == "Cursor"
    assert resolve_focus(["Terminal", "Arc"], context="coding") == "Arc"


def test_design_focus_uses_primary_tool():
    assert resolve_focus(["Arc", "Figma"], context="design") == "Figma"
    assert resolve_focus(["Arc", "Slack"], context="design") == "Arc"


def test_default_focus_is_first_app():
    assert resolve_focus(["Slack", "Cursor"], context="writing") == "Slack"


def test_resolve_focus_empty():
    with pytest.raises(InvalidInputError):
        resolve_focus([])


# --------------------------------------------------------------------------- #
# Assignment                                                                  #
# --------------------------------------------------------------------------- #


def test_coding_scenario(screen):
    """Cursor leads, Terminal goes to the side band, Arc peeks from behind."""
    result = assign(["Cursor", "Terminal", "Arc"], screen, context="coding")
    assert [a.app for a in result] == ["Cursor", "Terminal", "Arc"]
    apps = _by_app(result)

    cursor = apps["Cursor"]
    assert cursor.role is Role.PRIMARY
    assert cursor.visibility is Visibility.FULL
    assert (cursor.rect.x, cursor.rect.y) == (0.0, 0.0)
    assert cursor.rect.width == pytest.approx(0.65)
    assert cursor.rect.height == pytest.approx(0.90)

    terminal = apps["Terminal"]
    assert terminal.role is Role.SIDE_COLUMN
    assert terminal.rect.x == pytest.approx(0.65)
    assert terminal.rect.width == pytest.approx(0.30)
    assert terminal.rect.height == pytest.approx(1.0)

    arc = apps["Arc"]
    assert arc.role is Role.CASCADE_PEEK
    assert arc.visibility is Visibility.PARTIAL
    assert (arc.rect.x, arc.rect.y) == pytest.approx((0.10, 0.08))


def test_exactly_one_primary_with_top_layer(screen):
    result = assign(["Spotify", "Slack", "Figma", "Cursor"], screen, context="coding")
    primaries = [a for a in result if a.role is Role.PRIMARY]
    assert len(primaries) == 1
    top = max(a.layer for a in result)
    assert primaries[0].layer == top
    assert all(a.layer < top for a in result if a.role is not Role.PRIMARY)


def test_focused_text_stream_becomes_primary(screen):
    result = _by_app(assign(["Cursor", "Terminal"], screen, focused="Terminal", context="coding"))
    assert result["Terminal"].role is Role.PRIMARY
    assert result["Terminal"].rect.width == pytest.approx(1000 / 1440)
    assert result["Cursor"].role is Role.CASCADE_PEEK


def test_side_columns_stack(screen):
    result = _by_app(assign(["Cursor", "Terminal", "Slack"], screen, context="coding"))
    terminal, slack = result["Terminal"].rect, result["Slack"].rect
    assert terminal.x == slack.x
    assert terminal.height == pytest.approx(0.5)
    assert slack.y == pytest.approx(terminal.bottom)


def test_peeks_cascade_diagonally(screen):
    result = _by_app(assign(["Cursor", "Arc", "Safari"], screen, context="coding"))
    first, second = result["Arc"].rect, result["Safari"].rect
    assert second.x == pytest.approx(first.x + 0.08)
    assert second.y == pytest.approx(first.y + 0.06)


def test_corners_fill_in_order(screen):
    result = _by_app(assign(["Cursor", "Spotify", "Activity Monitor"], screen))
    spotify, monitor = result["Spotify"], result["Activity Monitor"]
    assert spotify.role is monitor.role is Role.CORNER
    assert spotify.visibility is Visibility.MINIMAL
    # bottom-right, then bottom-left
    assert spotify.rect.right == pytest.approx(1.0)
    assert spotify.rect.bottom == pytest.approx(1.0)
    assert monitor.rect.x == pytest.approx(0.05)


def test_rects_stay_on_screen():
    small = ScreenSize(800, 600)
    apps = ["Cursor", "Terminal", "Slack", "Arc", "Safari", "Spotify", "Music"]
    for arr in assign(apps, small, context="coding"):
        r = arr.rect
        assert 0.0 <= r.x and 0.0 <= r.y
        assert r.right <= 1.0 + 1e-9 and r.bottom <= 1.0 + 1e-9
        assert r.width > 0 and r.height > 0


def test_assign_rejects_bad_input(screen):
    with pytest.raises(InvalidInputError):
        assign([], screen)
    with pytest.raises(InvalidInputError):
        assign(["Arc"], ScreenSize(0, 900))
    with pytest.raises(InvalidInputError):
        assign(["Arc", "arc"], screen)
