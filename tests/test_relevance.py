"""
Tests for context-aware scoring and app selection.
"""

import pytest

from workspace_arranger.constants import Archetype, Role
from workspace_arranger.errors import InvalidInputError
from workspace_arranger.relevance import (
    context_kind,
    context_priority,
    find_best_primary_app,
    order_apps_for_cascade,
    relevance_score,
    score_candidates,
    select_relevant,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "context, kind",
    [
        ("I want to code", "coding"),
        ("Coding session", "coding"),
        ("research for my thesis", "research"),
        ("just browse", "research"),
        ("design review", "design"),
        ("", "default"),
        (None, "default"),
        ("writing email", "default"),
    ],
)
def test_context_kind(context, kind):
    assert context_kind(context) == kind


def test_relevance_scores_coding():
    ctx = "coding"
    assert relevance_score("Cursor", ctx) == 10
    assert relevance_score("Terminal", ctx) == 9
    assert relevance_score("Arc", ctx) == 8
    assert relevance_score("Xcode", ctx) == 7
    assert relevance_score("Spotify", ctx) == 2
    assert relevance_score("Mail", ctx) == 1


def test_relevance_default_context_is_flat():
    assert relevance_score("Cursor", "") == relevance_score("Mail", "") == 5


def test_priority_breaks_ties():
    assert context_priority("Cursor", "coding") == 100
    assert context_priority("Warp", "coding") == 50  # text stream archetype
    assert context_priority("Spotify", "coding") == 10
    assert context_priority("Spotify", "") == 30


def test_score_candidates_sorted_and_stable():
    """Equal scores keep their input order."""
    scored = score_candidates(["Chrome", "Safari", "Firefox"], "")
    assert [s.app for s in scored] == ["Chrome", "Safari", "Firefox"]
    assert all(s.archetype is Archetype.CONTENT_CANVAS for s in scored)


def test_legacy_app_excluded_when_modern_present():
    """Xcode never makes it when Cursor is available, even with a free slot."""
    selected = select_relevant(["Cursor", "Terminal", "Xcode", "Arc"], "coding", 3)
    assert selected == ["Cursor", "Terminal", "Arc"]

    selected = select_relevant(["Cursor", "Terminal", "Xcode", "Arc"], "coding", 4)
    assert "Xcode" not in selected


def test_legacy_app_kept_when_alone():
    assert "Xcode" in select_relevant(["Xcode", "Terminal"], "coding", 4)


def test_research_selection():
    selected = select_relevant(["Arc", "Notion", "Terminal", "Spotify"], "research", 3)
    assert selected == ["Arc", "Notion", "Terminal"]


def test_archetype_diversity_then_fill():
    """Low scorers are first picked for new archetypes, then by rank."""
    selected = select_relevant(["Chrome", "Safari", "Firefox", "Terminal"], "", 3)
    assert selected == ["Terminal", "Chrome", "Safari"]


@pytest.mark.parametrize("max_apps", [1, 2, 3, 4, 6])
def test_selection_bounds(max_apps):
    apps = ["Cursor", "Terminal", "Arc", "Slack", "Spotify", "Figma"]
    selected = select_relevant(apps, "coding", max_apps)
    assert 1 <= len(selected) <= max_apps
    assert set(selected) <= set(apps)
    assert len(set(selected)) == len(selected)


def test_user_exclusions_removed():
    selected = select_relevant(["Cursor", "Terminal", "Arc"], "coding", 4, excluded=["arc"])
    assert selected == ["Cursor", "Terminal"]


def test_duplicate_candidates_collapsed():
    selected = select_relevant(["Terminal", "terminal", "Cursor"], "coding", 4)
    assert selected == ["Cursor", "Terminal"]


def test_select_rejects_bad_input():
    with pytest.raises(InvalidInputError):
        select_relevant([], "coding")
    with pytest.raises(InvalidInputError):
        select_relevant(["Cursor"], "coding", 0)


def test_find_best_primary_app():
    assert find_best_primary_app(["Terminal", "Xcode", "Cursor"], "coding") == "Cursor"
    assert find_best_primary_app(["Arc", "Sketch", "Figma"], "design") == "Figma"
    # Default context favours code workspaces; ties go to the first app.
    assert find_best_primary_app(["Arc", "Cursor", "Xcode"], "") == "Cursor"
    assert find_best_primary_app(["Arc", "Safari"], "") == "Arc"


def test_order_apps_for_cascade_by_layer():
    ordered = order_apps_for_cascade(["Spotify", "Terminal", "Arc", "Cursor"], "coding")
    assert ordered[0] == ("Cursor", Role.PRIMARY)
    layers = [role.layer for _, role in ordered]
    assert layers == sorted(layers, reverse=True)
