"""
workspace_arranger.tessellate
-----------------------------

Repartition initial (possibly overlapping) rectangles into a gapless,
non-overlapping tiling of the whole screen.

Each app keeps its *relative* preference: the app whose initial rectangle is
largest becomes the dominant tile, and split proportions follow the preferred
widths/heights of the apps sharing an edge.

Cases
~~~~~
1 window   full screen.
2 windows  one split, along the axis the dominant app prefers.
3 windows  dominant column on the left, two stacked tiles on the right.
4 windows  2×2 grid with averaged row and column splits.
5+ windows recursive bisection by descending preferred area, always cutting
           the longer side of the region.

Split edges are computed once and shared by both neighbours, so the output
covers exactly ``(0, 0, 1, 1)`` and tiles only touch along their edges.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .constants import (
    MAX_EXACT_TILES,
    THREE_TILE_FACTOR,
    THREE_TILE_MAX,
    THREE_TILE_MIN,
)
from .errors import InvalidInputError
from .geometry import clamp, coverage_report
from .models import Arrangement, Rect, ScreenSize

_LOG = logging.getLogger(__name__)


def normalize_to_sum(values: Sequence[float], target: float = 1.0) -> list[float]:
    """Scale *values* so they add up to *target*.

    An all-zero vector becomes an even split.
    """
    if not values:
        return []
    if any(v < 0 for v in values):
        raise InvalidInputError(f"Cannot normalise negative weights: {list(values)}")
    total = sum(values)
    if total == 0:
        return [target / len(values)] * len(values)
    return [v / total * target for v in values]


# --------------------------------------------------------------------------- #
# Fixed tilings                                                               #
# --------------------------------------------------------------------------- #


def _is_wide(pref: Rect, screen: ScreenSize | None) -> bool:
    """True when *pref* is wider than tall (in pixels when *screen* is known)."""
    if screen is None:
        return pref.width >= pref.height
    return pref.width * screen.width >= pref.height * screen.height


def _tile_two(prefs: Sequence[Rect], screen: ScreenSize | None) -> list[Rect]:
    first, second = prefs
    if _is_wide(first, screen):
        left, _ = normalize_to_sum([first.width, second.width])
        return [Rect(0.0, 0.0, left, 1.0), Rect(left, 0.0, 1.0 - left, 1.0)]
    top, _ = normalize_to_sum([first.height, second.height])
    return [Rect(0.0, 0.0, 1.0, top), Rect(0.0, top, 1.0, 1.0 - top)]


def _tile_three(prefs: Sequence[Rect]) -> list[Rect]:
    dominant, second, third = prefs
    column = clamp(dominant.width * THREE_TILE_FACTOR, THREE_TILE_MIN, THREE_TILE_MAX)
    top, _ = normalize_to_sum([second.height, third.height])
    rest = 1.0 - column
    return [
        Rect(0.0, 0.0, column, 1.0),
        Rect(column, 0.0, rest, top),
        Rect(column, top, rest, 1.0 - top),
    ]


def _tile_four(prefs: Sequence[Rect]) -> list[Rect]:
    # prefs[0] top-left, [1] top-right, [2] bottom-left, [3] bottom-right
    top_left, top_right, bottom_left, bottom_right = prefs
    top_row, _ = normalize_to_sum([top_left.width, top_right.width])
    bottom_row, _ = normalize_to_sum([bottom_left.width, bottom_right.width])
    left_col, _ = normalize_to_sum([top_left.height, bottom_left.height])
    right_col, _ = normalize_to_sum([top_right.height, bottom_right.height])

    left = (top_row + bottom_row) / 2.0
    top = (left_col + right_col) / 2.0
    right = 1.0 - left
    bottom = 1.0 - top
    return [
        Rect(0.0, 0.0, left, top),
        Rect(left, 0.0, right, top),
        Rect(0.0, top, left, bottom),
        Rect(left, top, right, bottom),
    ]


# --------------------------------------------------------------------------- #
# Recursive bisection (5+ windows)                                            #
# --------------------------------------------------------------------------- #


def _balanced_split(weights: Sequence[float]) -> int:
    """Index *k* that best balances ``sum(weights[:k])`` against the rest."""
    total = sum(weights)
    best_k, best_gap = 1, float("inf")
    running = 0.0
    for k in range(1, len(weights)):
        running += weights[k - 1]
        gap = abs(running - total / 2.0)
        if gap < best_gap:
            best_k, best_gap = k, gap
    return best_k


def _bisect(
    weights: Sequence[float], region: Rect, screen: ScreenSize | None
) -> list[Rect]:
    if len(weights) == 1:
        return [region]

    k = _balanced_split(weights)
    head, _ = normalize_to_sum([sum(weights[:k]), sum(weights[k:])])

    if screen is None:
        wide = region.width >= region.height
    else:
        wide = region.width * screen.width >= region.height * screen.height

    if wide:
        cut = region.x + region.width * head
        first = Rect(region.x, region.y, cut - region.x, region.height)
        second = Rect(cut, region.y, region.right - cut, region.height)
    else:
        cut = region.y + region.height * head
        first = Rect(region.x, region.y, region.width, cut - region.y)
        second = Rect(region.x, cut, region.width, region.bottom - cut)

    return _bisect(weights[:k], first, screen) + _bisect(weights[k:], second, screen)


def _tile_many(prefs: Sequence[Rect], screen: ScreenSize | None) -> list[Rect]:
    areas = [p.area for p in prefs]
    weights = areas if sum(areas) > 0 else [1.0] * len(prefs)
    return _bisect(weights, Rect.full(), screen)


# --------------------------------------------------------------------------- #
# Public entry point                                                          #
# --------------------------------------------------------------------------- #


def tessellate(
    arrangements: Sequence[Arrangement], screen: ScreenSize | None = None
) -> list[Arrangement]:
    """
    Turn *arrangements* into an exact tiling of the screen.

    Parameters
    ----------
    arrangements : Sequence[Arrangement]
        Initial placements; their rectangles are read as size preferences.
    screen : ScreenSize | None
        When given, aspect decisions use pixel proportions instead of raw
        fractions.

    Returns
    -------
    list[Arrangement]
        Same apps, roles and visibilities in the same order, with rectangles
        that cover ``(0, 0, 1, 1)`` exactly and never overlap.
    """
    if not arrangements:
        raise InvalidInputError("Cannot tessellate an empty arrangement list")
    if screen is not None:
        screen.validate()

    count = len(arrangements)
    if count == 1:
        return [arrangements[0].with_rect(Rect.full())]

    # Largest preferred area first; stable for equal areas.
    order = sorted(range(count), key=lambda i: arrangements[i].rect.area, reverse=True)
    prefs = [arrangements[i].rect for i in order]

    if count == 2:
        tiles = _tile_two(prefs, screen)
    elif count == 3:
        tiles = _tile_three(prefs)
    elif count == MAX_EXACT_TILES:
        tiles = _tile_four(prefs)
    else:
        _LOG.debug("Tessellating %d windows by recursive bisection", count)
        tiles = _tile_many(prefs, screen)

    placed: dict[int, Rect] = dict(zip(order, tiles))
    result = [arr.with_rect(placed[i]) for i, arr in enumerate(arrangements)]

    report = coverage_report([a.rect for a in result])
    if not report.exact:
        _LOG.warning(
            "Tessellation of %d windows is not exact: area=%.6f overlaps=%s",
            count,
            report.total_area,
            report.overlapping_pairs,
        )
    _LOG.debug(
        "Tessellated: %s",
        ", ".join(
            f"{a.app}=({a.rect.x:.3f},{a.rect.y:.3f},{a.rect.width:.3f}x{a.rect.height:.3f})"
            for a in result
        ),
    )
    return result
