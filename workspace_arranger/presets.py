"""
workspace_arranger.presets
--------------------------

Fixed, named layouts for one to four windows plus a generic equal-split grid.

Presets are what the CLI lists and what the engine falls back to when an
arrangement cannot be computed.  Every preset tiles the full screen except the
two centred single-window layouts.
"""

from __future__ import annotations

import math
from enum import Enum

from .errors import InvalidInputError, UnsupportedCardinalityError
from .models import Rect

PRESET_COUNTS: tuple[int, int] = (1, 4)


class WindowLayout(str, Enum):
    """Named layouts; the value is the identifier shown to users."""

    FULLSCREEN = "fullscreen"
    CENTERED_LARGE = "centered_large"
    CENTERED_MEDIUM = "centered_medium"
    LEFT_RIGHT_SPLIT = "left_right_split"
    TOP_BOTTOM_SPLIT = "top_bottom_split"
    MAIN_SIDEBAR = "main_sidebar"
    SIDEBAR_MAIN = "sidebar_main"
    THREE_COLUMN = "three_column"
    MAIN_TWO_SIDE = "main_two_side"
    TWO_TOP_ONE_BOTTOM = "two_top_one_bottom"
    FOUR_QUADRANTS = "four_quadrants"
    MAIN_THREE_SIDE = "main_three_side"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def context_categories(self) -> tuple[str, ...]:
        return _CATEGORIES.get(self, ("general",))

    @property
    def rects(self) -> tuple[Rect, ...]:
        return _RECTS[self]

    @property
    def max_apps(self) -> int:
        return len(_RECTS[self])


_DESCRIPTIONS: dict[WindowLayout, str] = {
    WindowLayout.FULLSCREEN: "Single window takes full screen",
    WindowLayout.CENTERED_LARGE: "Single window centered, 80% of screen",
    WindowLayout.CENTERED_MEDIUM: "Single window centered, 60% of screen",
    WindowLayout.LEFT_RIGHT_SPLIT: "Two windows side by side, 50% each",
    WindowLayout.TOP_BOTTOM_SPLIT: "Two windows stacked vertically, 50% each",
    WindowLayout.MAIN_SIDEBAR: "Main window 70% left, sidebar 30% right",
    WindowLayout.SIDEBAR_MAIN: "Sidebar 30% left, main window 70% right",
    WindowLayout.THREE_COLUMN: "Three windows in columns: 33%, 34%, 33%",
    WindowLayout.MAIN_TWO_SIDE: "Main window 50% left, two windows 25% each on right",
    WindowLayout.TWO_TOP_ONE_BOTTOM: "Two windows on top 50% each, one window bottom 100%",
    WindowLayout.FOUR_QUADRANTS: "Four windows in 2x2 grid, 25% each",
    WindowLayout.MAIN_THREE_SIDE: "Main window 60% left, three windows stacked right 40%",
}

# Layouts not listed here are "general".
_CATEGORIES: dict[WindowLayout, tuple[str, ...]] = {
    WindowLayout.FULLSCREEN: ("focus", "presentation", "single_task"),
    WindowLayout.CENTERED_LARGE: ("focus", "presentation", "single_task"),
    WindowLayout.MAIN_SIDEBAR: ("coding", "research", "writing"),
    WindowLayout.SIDEBAR_MAIN: ("coding", "research", "writing"),
    WindowLayout.LEFT_RIGHT_SPLIT: ("comparison", "coding", "research"),
    WindowLayout.THREE_COLUMN: ("coding", "research", "design"),
    WindowLayout.MAIN_TWO_SIDE: ("coding", "development", "monitoring"),
    WindowLayout.FOUR_QUADRANTS: ("monitoring", "dashboard", "comparison"),
}

_RECTS: dict[WindowLayout, tuple[Rect, ...]] = {
    WindowLayout.FULLSCREEN: (Rect(0.0, 0.0, 1.0, 1.0),),
    WindowLayout.CENTERED_LARGE: (Rect(0.1, 0.1, 0.8, 0.8),),
    WindowLayout.CENTERED_MEDIUM: (Rect(0.2, 0.2, 0.6, 0.6),),
    WindowLayout.LEFT_RIGHT_SPLIT: (
        Rect(0.0, 0.0, 0.5, 1.0),
        Rect(0.5, 0.0, 0.5, 1.0),
    ),
    WindowLayout.TOP_BOTTOM_SPLIT: (
        Rect(0.0, 0.0, 1.0, 0.5),
        Rect(0.0, 0.5, 1.0, 0.5),
    ),
    WindowLayout.MAIN_SIDEBAR: (
        Rect(0.0, 0.0, 0.7, 1.0),
        Rect(0.7, 0.0, 0.3, 1.0),
    ),
    WindowLayout.SIDEBAR_MAIN: (
        Rect(0.0, 0.0, 0.3, 1.0),
        Rect(0.3, 0.0, 0.7, 1.0),
    ),
    WindowLayout.THREE_COLUMN: (
        Rect(0.0, 0.0, 0.33, 1.0),
        Rect(0.33, 0.0, 0.34, 1.0),
        Rect(0.67, 0.0, 0.33, 1.0),
    ),
    WindowLayout.MAIN_TWO_SIDE: (
        Rect(0.0, 0.0, 0.5, 1.0),
        Rect(0.5, 0.0, 0.5, 0.5),
        Rect(0.5, 0.5, 0.5, 0.5),
    ),
    WindowLayout.TWO_TOP_ONE_BOTTOM: (
        Rect(0.0, 0.0, 0.5, 0.5),
        Rect(0.5, 0.0, 0.5, 0.5),
        Rect(0.0, 0.5, 1.0, 0.5),
    ),
    WindowLayout.FOUR_QUADRANTS: (
        Rect(0.0, 0.0, 0.5, 0.5),
        Rect(0.5, 0.0, 0.5, 0.5),
        Rect(0.0, 0.5, 0.5, 0.5),
        Rect(0.5, 0.5, 0.5, 0.5),
    ),
    WindowLayout.MAIN_THREE_SIDE: (
        Rect(0.0, 0.0, 0.6, 1.0),
        Rect(0.6, 0.0, 0.4, 0.33),
        Rect(0.6, 0.33, 0.4, 0.34),
        Rect(0.6, 0.67, 0.4, 0.33),
    ),
}


def presets_for_count(count: int) -> list[WindowLayout]:
    """Presets with exactly *count* slots, in declaration order."""
    return [layout for layout in WindowLayout if layout.max_apps == count]


def layouts_for_context(context: str | None) -> list[WindowLayout]:
    """Presets with a category mentioned in *context*."""
    ctx = (context or "").lower()
    return [
        layout
        for layout in WindowLayout
        if any(category in ctx for category in layout.context_categories)
    ]


def choose_preset(context: str | None, count: int) -> WindowLayout:
    """Recommend a preset for *count* windows given free-text *context*."""
    lo, hi = PRESET_COUNTS
    if not lo <= count <= hi:
        raise UnsupportedCardinalityError(count, PRESET_COUNTS)

    ctx = (context or "").lower()
    if count == 1:
        if "focus" in ctx or "present" in ctx:
            return WindowLayout.FULLSCREEN
        return WindowLayout.CENTERED_LARGE
    if count == 2:
        if "cod" in ctx or "research" in ctx:
            return WindowLayout.MAIN_SIDEBAR
        return WindowLayout.LEFT_RIGHT_SPLIT
    if count == 3:
        if "cod" in ctx:
            return WindowLayout.MAIN_TWO_SIDE
        return WindowLayout.THREE_COLUMN
    return WindowLayout.FOUR_QUADRANTS


def equal_split(count: int) -> list[Rect]:
    """
    Gapless grid of *count* tiles, filled row by row.

    The grid has ``ceil(sqrt(count))`` columns; a short last row is stretched
    across the full width.
    """
    if count <= 0:
        raise InvalidInputError(f"Cannot split the screen into {count} tiles")

    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    rects: list[Rect] = []
    for row in range(rows):
        in_row = min(cols, count - row * cols)
        top = row / rows
        bottom = (row + 1) / rows
        for col in range(in_row):
            left = col / in_row
            right = (col + 1) / in_row
            rects.append(Rect(left, top, right - left, bottom - top))
    return rects
