"""
workspace_arranger.archetypes
-----------------------------

Map application names to behavioural archetypes and derive archetype-specific
role and sizing heuristics.

Classification never fails.  Names are resolved, in order, by

1. exact lookup in ``ARCHETYPE_DATABASE``;
2. bidirectional substring match against the database keys.  Every matching
   key is considered and the most specific one wins: the longest overlap,
   then the lexicographically smallest key;
3. keyword patterns (``ARCHETYPE_PATTERNS``);
4. ``FALLBACK_ARCHETYPE``.
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache

from .constants import (
    ARCHETYPE_DATABASE,
    ARCHETYPE_KEYS,
    ARCHETYPE_PATTERNS,
    FALLBACK_ARCHETYPE,
    MAX_PEEK_HEIGHT,
    MAX_PEEK_WIDTH,
    MIN_CORNER_PX,
    MIN_PEEK_AREA,
    MIN_TEXT_COLUMN_PX,
    TEXT_PRIMARY_PX,
    Archetype,
    Role,
)
from .models import ScreenSize, normalize_app_name

_LOG = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Classification                                                              #
# --------------------------------------------------------------------------- #


def _fuzzy_key(name: str) -> str | None:
    """Return the most specific database key that fuzzy-matches *name*."""
    if not name:
        return None
    best: tuple[int, str] | None = None
    for key in ARCHETYPE_KEYS:
        if key in name or name in key:
            overlap = min(len(key), len(name))
            # ARCHETYPE_KEYS is sorted, so the first key of a given overlap
            # is the lexicographically smallest one.
            if best is None or overlap > best[0]:
                best = (overlap, key)
    return best[1] if best else None


def _classify_by_pattern(name: str) -> Archetype | None:
    for keywords, archetype in ARCHETYPE_PATTERNS:
        if any(word in name for word in keywords):
            return archetype
    return None


@lru_cache(maxsize=512)
def _classify_normalized(name: str) -> tuple[Archetype, bool]:
    """Classify a normalised name; the flag tells whether the database knew it."""
    archetype = ARCHETYPE_DATABASE.get(name)
    if archetype is not None:
        return archetype, True

    key = _fuzzy_key(name)
    if key is not None:
        _LOG.debug("Fuzzy-matched '%s' to '%s'", name, key)
        return ARCHETYPE_DATABASE[key], True

    archetype = _classify_by_pattern(name)
    if archetype is not None:
        _LOG.debug("Pattern-classified '%s' as %s", name, archetype.value)
        return archetype, False

    _LOG.debug("No archetype for '%s', defaulting to %s", name, FALLBACK_ARCHETYPE.value)
    return FALLBACK_ARCHETYPE, False


def classify(name: str) -> Archetype:
    """Return the archetype of app *name* (case and whitespace insensitive)."""
    return _classify_normalized(normalize_app_name(name))[0]


def is_confident(name: str) -> bool:
    """True when *name* was resolved by the archetype database.

    Pattern-matched and defaulted names are low-confidence guesses; callers
    that need certainty should not rely on them.
    """
    return _classify_normalized(normalize_app_name(name))[1]


# --------------------------------------------------------------------------- #
# Archetype heuristics                                                        #
# --------------------------------------------------------------------------- #


def optimal_cascade_role(archetype: Archetype, window_count: int = 3) -> Role:
    """Role an app of *archetype* naturally takes in a cascade."""
    if archetype is Archetype.CODE_WORKSPACE:
        return Role.PRIMARY
    if archetype is Archetype.TEXT_STREAM:
        return Role.SIDE_COLUMN
    if archetype is Archetype.GLANCEABLE_MONITOR:
        return Role.CORNER
    return Role.CASCADE_PEEK


def _by_count(window_count: int, few: float, three: float, many: float) -> float:
    if window_count <= 2:
        return few
    if window_count == 3:
        return three
    return many


def optimal_sizing(
    archetype: Archetype,
    role: Role,
    screen: ScreenSize,
    window_count: int = 3,
) -> tuple[float, float]:
    """
    Preferred ``(width, height)`` screen fractions for *archetype* in *role*.

    More windows mean smaller shares, bounded by usability floors:

    * text-stream side columns are never narrower than
      ``MIN_TEXT_COLUMN_PX`` pixels;
    * content-canvas peeks never cover less than ``MIN_PEEK_AREA`` of the
      screen (scaled up isotropically, capped at
      ``MAX_PEEK_WIDTH`` × ``MAX_PEEK_HEIGHT``).
    """
    if archetype is Archetype.TEXT_STREAM and role is Role.SIDE_COLUMN:
        base = _by_count(window_count, 0.35, 0.30, 0.25)
        return max(base, MIN_TEXT_COLUMN_PX / screen.width), 1.0

    if archetype is Archetype.CODE_WORKSPACE and role is Role.PRIMARY:
        width = _by_count(window_count, 0.80, 0.70, 0.65)
        height = 0.90 if window_count <= 2 else 0.85
        return width, height

    if archetype is Archetype.CONTENT_CANVAS and role is Role.CASCADE_PEEK:
        width = _by_count(window_count, 0.55, 0.55, 0.50)
        height = _by_count(window_count, 0.50, 0.50, 0.45)
        area = width * height
        if area < MIN_PEEK_AREA:
            scale = math.sqrt(MIN_PEEK_AREA / area)
            return min(width * scale, MAX_PEEK_WIDTH), min(height * scale, MAX_PEEK_HEIGHT)
        return width, height

    if archetype is Archetype.CONTENT_CANVAS and role is Role.PRIMARY:
        return (0.75 if window_count <= 2 else 0.65), 0.85

    if archetype is Archetype.GLANCEABLE_MONITOR and role is Role.CORNER:
        edge = max(0.15, MIN_CORNER_PX / min(screen.width, screen.height))
        return edge, edge

    if archetype is Archetype.TEXT_STREAM and role is Role.PRIMARY:
        return min(0.75, max(0.60, TEXT_PRIMARY_PX / screen.width)), 0.90

    if role is Role.PRIMARY:
        width = 0.60
    elif role is Role.CASCADE_PEEK:
        width = 0.45
    else:
        width = 0.30
    scale = max(0.8, 1.2 - window_count * 0.1)
    return width * scale, 0.70 * scale
