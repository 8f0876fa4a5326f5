"""workspace_arranger.layout
~~~~~~~~~~~~~~~~~~~~~~~~~~

End-to-end arrangement: select → assign → tessellate.

``arrange`` is the single entry point callers need; ``arrange_or_fallback``
wraps it so that a user always gets *some* layout, degrading to an
equal-split grid when the engine rejects the input.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .archetypes import classify, optimal_cascade_role
from .constants import DEFAULT_MAX_APPS, ROLE_VISIBILITY, Role
from .errors import ArrangementError, InvalidInputError
from .models import Arrangement, LayoutResult, ScreenSize, normalize_app_name
from .preferences import PreferenceStore
from .presets import equal_split
from .relevance import select_relevant
from .roles import assign
from .tessellate import tessellate

_LOG = logging.getLogger(__name__)


def _in_caller_order(candidates: Sequence[str], selected: Iterable[str]) -> list[str]:
    chosen = {normalize_app_name(app) for app in selected}
    ordered: list[str] = []
    seen: set[str] = set()
    for app in candidates:
        key = normalize_app_name(app)
        if key in chosen and key not in seen:
            ordered.append(app)
            seen.add(key)
    return ordered


def arrange(
    candidates: Sequence[str],
    screen: ScreenSize,
    context: str = "",
    focused: str | None = None,
    max_apps: int | None = None,
    excluded: Iterable[str] | None = None,
    store: PreferenceStore | None = None,
) -> LayoutResult:
    """
    Arrange a subset of *candidates* so they cover the whole screen.

    Parameters
    ----------
    candidates : Sequence[str]
        Apps the user has open (or wants opened).
    screen : ScreenSize
        Target screen in pixels.
    context : str
        Free-text description of the task at hand.
    focused : str | None
        App that should become primary, if it survives selection.
    max_apps : int | None
        Selection bound; defaults to ``WORKSPACE_ARRANGER_MAX_APPS``.
    excluded : Iterable[str] | None
        Apps to leave out.  When omitted and *store* is given, the store's
        "never use" rules for *context* are used.
    store : PreferenceStore | None
        Read-only source of user exclusions.

    Returns
    -------
    LayoutResult
        One ``Arrangement`` per selected app, in the order of *candidates*.
    """
    if not candidates:
        raise InvalidInputError("No candidate apps to arrange")
    screen.validate()
    limit = DEFAULT_MAX_APPS if max_apps is None else max_apps

    if excluded is None:
        excluded = store.excluded_for(context, candidates) if store is not None else ()
    excluded = list(excluded)
    if excluded:
        _LOG.debug("Excluding %s for context '%s'", excluded, context)

    selected = select_relevant(candidates, context, limit, excluded)
    if not selected:
        raise InvalidInputError("Every candidate app was excluded")

    # Roles are resolved on the ranked selection so its head is the default
    # primary; callers get their own order back.
    initial = assign(selected, screen, focused=focused, context=context)
    placed = {normalize_app_name(a.app): a for a in tessellate(initial, screen)}
    result = [placed[normalize_app_name(app)] for app in _in_caller_order(candidates, selected)]

    _LOG.info(
        "Arranged %d of %d app(s) for context '%s': %s",
        len(result),
        len(candidates),
        context,
        ", ".join(f"{a.app} ({a.role.value})" for a in result),
    )
    return result


def _fallback_grid(candidates: Sequence[str], max_apps: int | None) -> LayoutResult:
    limit = DEFAULT_MAX_APPS if max_apps is None or max_apps <= 0 else max_apps
    apps = _in_caller_order(candidates, candidates)[:limit]
    if not apps:
        return []

    result = []
    for index, (app, rect) in enumerate(zip(apps, equal_split(len(apps)))):
        role = Role.PRIMARY if index == 0 else optimal_cascade_role(classify(app), len(apps))
        if index and role is Role.PRIMARY:
            role = Role.CASCADE_PEEK
        result.append(
            Arrangement(app=app, rect=rect, role=role, visibility=ROLE_VISIBILITY[role])
        )
    return result


def arrange_or_fallback(
    candidates: Sequence[str],
    screen: ScreenSize,
    context: str = "",
    focused: str | None = None,
    max_apps: int | None = None,
    excluded: Iterable[str] | None = None,
    store: PreferenceStore | None = None,
) -> LayoutResult:
    """Like ``arrange`` but never raises ``ArrangementError``."""
    try:
        return arrange(
            candidates,
            screen,
            context=context,
            focused=focused,
            max_apps=max_apps,
            excluded=excluded,
            store=store,
        )
    except ArrangementError as exc:
        _LOG.warning("Arrangement failed (%s); using equal-split grid", exc)
        return _fallback_grid(candidates, max_apps)
