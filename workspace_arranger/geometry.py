"""
workspace_arranger.geometry
---------------------------

Coverage checks for tilings expressed in screen fractions.

The tessellator promises an exact partition of the unit screen; these helpers
verify that promise analytically (no pixel sampling) so they are cheap enough
to run after every arrangement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterable, Sequence

from .constants import COVERAGE_TOLERANCE
from .models import Rect


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_rect(rect: Rect) -> Rect:
    """Shrink/shift *rect* so it lies inside the unit screen."""
    width = clamp(rect.width, 0.0, 1.0)
    height = clamp(rect.height, 0.0, 1.0)
    x = clamp(rect.x, 0.0, 1.0 - width)
    y = clamp(rect.y, 0.0, 1.0 - height)
    return Rect(x, y, width, height)


def total_area(rects: Iterable[Rect]) -> float:
    return sum(r.area for r in rects)


def overlap_area(rects: Sequence[Rect]) -> float:
    """Sum of pairwise interior intersections."""
    return sum(a.intersection_area(b) for a, b in combinations(rects, 2))


def has_overlap(rects: Sequence[Rect], tol: float = COVERAGE_TOLERANCE) -> bool:
    return any(a.intersection_area(b) > tol for a, b in combinations(rects, 2))


def out_of_bounds(rects: Sequence[Rect], tol: float = COVERAGE_TOLERANCE) -> list[int]:
    """Indices of rectangles that leave the unit screen."""
    return [
        i
        for i, r in enumerate(rects)
        if r.x < -tol or r.y < -tol or r.right > 1 + tol or r.bottom > 1 + tol
        or r.width < -tol or r.height < -tol
    ]


def is_exact_partition(rects: Sequence[Rect], tol: float = COVERAGE_TOLERANCE) -> bool:
    """True when *rects* tile the unit screen with no gap and no overlap.

    Inside the screen, areas summing to 1 with zero pairwise overlap can only
    mean the union is the whole screen.
    """
    if not rects or out_of_bounds(rects, tol):
        return False
    if has_overlap(rects, tol):
        return False
    return abs(total_area(rects) - 1.0) <= tol


@dataclass(slots=True)
class CoverageReport:
    """Summary of how a set of rectangles covers the screen."""

    total_area: float
    overlapping_pairs: list[tuple[int, int]] = field(default_factory=list)
    out_of_bounds: list[int] = field(default_factory=list)

    @property
    def exact(self) -> bool:
        return (
            not self.overlapping_pairs
            and not self.out_of_bounds
            and abs(self.total_area - 1.0) <= COVERAGE_TOLERANCE
        )

    @property
    def coverage_percent(self) -> float:
        return min(100.0, self.total_area * 100.0)


def coverage_report(rects: Sequence[Rect], tol: float = COVERAGE_TOLERANCE) -> CoverageReport:
    pairs = [
        (i, j)
        for (i, a), (j, b) in combinations(enumerate(rects), 2)
        if a.intersection_area(b) > tol
    ]
    return CoverageReport(
        total_area=total_area(rects),
        overlapping_pairs=pairs,
        out_of_bounds=out_of_bounds(rects, tol),
    )
