"""
workspace_arranger.roles
------------------------

Assign a layout role and an initial rectangle to every selected app.

The rectangles produced here describe *preferences*: they may overlap (a
cascade peek deliberately slides under the primary) and need not cover the
screen.  ``workspace_arranger.tessellate`` turns them into a gapless tiling.

Role per app
~~~~~~~~~~~~
* the focused app is PRIMARY, anchored at the screen origin;
* text streams become SIDE_COLUMNs in the right-hand band;
* content canvases, unfocused code workspaces and unknown apps become
  CASCADE_PEEKs offset diagonally from the primary;
* glanceable monitors take the next free CORNER.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .archetypes import classify, optimal_sizing
from .constants import (
    CODE_PRIMARY_SIZE_MANY,
    CODE_PRIMARY_SIZES,
    CODING_FOCUS_PRIORITY,
    CORNER_ANCHORS,
    PEEK_BASE_OFFSETS,
    PEEK_DEFAULT_OFFSET,
    PEEK_MAX_X,
    PEEK_MAX_Y,
    PEEK_STEP,
    ROLE_VISIBILITY,
    SIDE_COLUMN_MAX_WIDTH,
    SIDE_COLUMN_MAX_X,
    SIDE_COLUMN_MIN_WIDTH,
    SIDE_COLUMN_MIN_X,
    Archetype,
    Role,
)
from .errors import InvalidInputError
from .geometry import clamp, clamp_rect
from .models import Arrangement, Rect, ScreenSize, normalize_app_name
from .relevance import context_kind, find_best_primary_app, primary_app_score

_LOG = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Focus resolution                                                            #
# --------------------------------------------------------------------------- #


def resolve_focus(
    selected: Sequence[str], focused: str | None = None, context: str | None = None
) -> str:
    """
    Decide which of *selected* becomes the primary window.

    An explicit *focused* app wins when it is part of the selection.  In a
    coding context the app with the highest coding archetype priority is
    chosen (code workspace first), ties going to the better primary-app
    score and then to the earlier app.  In a design context the best primary
    design tool is used when one is present.  Otherwise the first app wins.
    """
    if not selected:
        raise InvalidInputError("Cannot resolve focus of an empty selection")

    if focused:
        wanted = normalize_app_name(focused)
        for app in selected:
            if normalize_app_name(app) == wanted:
                return app
        _LOG.debug("Focused app '%s' not among selected apps; ignoring", focused)

    kind = context_kind(context)
    if kind == "coding":
        best = selected[0]
        best_key = (-1, float("-inf"))
        for app in selected:
            key = (CODING_FOCUS_PRIORITY[classify(app)], primary_app_score(app, context))
            if key > best_key:
                best, best_key = app, key
        return best

    if kind == "design":
        candidate = find_best_primary_app(selected, context)
        if candidate is not None and primary_app_score(candidate, context) > 0:
            return candidate

    return selected[0]


# --------------------------------------------------------------------------- #
# Role placement                                                              #
# --------------------------------------------------------------------------- #


def _role_for(archetype: Archetype) -> Role:
    if archetype is Archetype.TEXT_STREAM:
        return Role.SIDE_COLUMN
    if archetype is Archetype.GLANCEABLE_MONITOR:
        return Role.CORNER
    return Role.CASCADE_PEEK


def _primary_rect(archetype: Archetype, screen: ScreenSize, count: int) -> Rect:
    if archetype is Archetype.CODE_WORKSPACE:
        width, height = CODE_PRIMARY_SIZE_MANY
        for max_count, size in CODE_PRIMARY_SIZES:
            if count <= max_count:
                width, height = size
                break
    else:
        width, height = optimal_sizing(archetype, Role.PRIMARY, screen, count)
    return Rect(0.0, 0.0, width, height)


def _side_column_rects(screen: ScreenSize, count: int, columns: int) -> list[Rect]:
    """Rects for *columns* side columns stacked in the right-hand band."""
    width, height = optimal_sizing(Archetype.TEXT_STREAM, Role.SIDE_COLUMN, screen, count)
    width = clamp(width, SIDE_COLUMN_MIN_WIDTH, SIDE_COLUMN_MAX_WIDTH)
    x = clamp(1.0 - width, SIDE_COLUMN_MIN_X, SIDE_COLUMN_MAX_X)
    share = height / columns
    return [Rect(x, i * share, width, share) for i in range(columns)]


def _peek_rect(archetype: Archetype, screen: ScreenSize, count: int, index: int) -> Rect:
    """Rect for the *index*-th (1-based) cascade peek."""
    width, height = optimal_sizing(archetype, Role.CASCADE_PEEK, screen, count)
    base_x, base_y = PEEK_BASE_OFFSETS.get(archetype, PEEK_DEFAULT_OFFSET)
    step_x, step_y = PEEK_STEP
    x = min(base_x + index * step_x, PEEK_MAX_X)
    y = min(base_y + index * step_y, PEEK_MAX_Y)
    return Rect(x, y, width, height)


def _corner_rect(screen: ScreenSize, count: int, index: int) -> Rect:
    width, height = optimal_sizing(
        Archetype.GLANCEABLE_MONITOR, Role.CORNER, screen, count
    )
    x, y = CORNER_ANCHORS[index % len(CORNER_ANCHORS)]
    return Rect(x, y, width, height)


def assign(
    selected: Sequence[str],
    screen: ScreenSize,
    focused: str | None = None,
    context: str | None = None,
) -> list[Arrangement]:
    """
    Give each app in *selected* a role and an initial rectangle.

    Returns one ``Arrangement`` per app, in the order of *selected*.
    Rectangles are clamped into the screen but may overlap.
    """
    if not selected:
        raise InvalidInputError("Cannot assign roles to an empty selection")
    screen.validate()
    if len({normalize_app_name(app) for app in selected}) != len(selected):
        raise InvalidInputError(f"Duplicate app names in selection: {list(selected)}")

    count = len(selected)
    primary = resolve_focus(selected, focused, context)
    archetypes = {app: classify(app) for app in selected}

    roles = {
        app: Role.PRIMARY if app == primary else _role_for(archetypes[app])
        for app in selected
    }
    side_apps = [app for app in selected if roles[app] is Role.SIDE_COLUMN]
    side_rects = dict(zip(side_apps, _side_column_rects(screen, count, len(side_apps) or 1)))

    rects: dict[str, Rect] = {}
    peek_index = 0
    corner_index = 0
    for app in selected:
        role = roles[app]
        archetype = archetypes[app]
        if role is Role.PRIMARY:
            rect = _primary_rect(archetype, screen, count)
        elif role is Role.SIDE_COLUMN:
            rect = side_rects[app]
        elif role is Role.CASCADE_PEEK:
            peek_index += 1
            rect = _peek_rect(archetype, screen, count, peek_index)
        else:
            rect = _corner_rect(screen, count, corner_index)
            corner_index += 1
        rects[app] = clamp_rect(rect)

    result = [
        Arrangement(
            app=app,
            rect=rects[app],
            role=roles[app],
            visibility=ROLE_VISIBILITY[roles[app]],
        )
        for app in selected
    ]
    _LOG.debug(
        "Assigned roles: %s",
        ", ".join(f"{a.app}={a.role.value}" for a in result),
    )
    return result
