"""
workspace_arranger.relevance
----------------------------

Context-aware ranking and selection of candidate apps.

Only a handful of context substrings carry meaning ("cod…" → coding,
"research"/"browse" → research, "design" → design); any other text is the
default context.  Scores are substring rules over the lower-cased app name so
"Google Chrome" and "chrome" rank the same.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .archetypes import classify, optimal_cascade_role
from .constants import (
    CODING_KEYWORDS,
    DEFAULT_MAX_APPS,
    DEFAULT_PRIMARY_WORKSPACE_SCORE,
    DESIGN_KEYWORDS,
    HIGH_RELEVANCE,
    MODERN_LEGACY_PAIRS,
    PRIMARY_APP_SCORES,
    PRIORITY_ARCHETYPE,
    PRIORITY_FALLBACK,
    PRIORITY_NAMED,
    RELEVANCE_FALLBACK,
    RELEVANCE_RULES,
    RESEARCH_KEYWORDS,
    Archetype,
    Role,
)
from .errors import InvalidInputError
from .models import CandidateScore, normalize_app_name

_LOG = logging.getLogger(__name__)


def context_kind(context: str | None) -> str:
    """Reduce free-text *context* to ``coding``/``research``/``design``/``default``."""
    ctx = (context or "").lower()
    if any(word in ctx for word in CODING_KEYWORDS):
        return "coding"
    if any(word in ctx for word in RESEARCH_KEYWORDS):
        return "research"
    if any(word in ctx for word in DESIGN_KEYWORDS):
        return "design"
    return "default"


def relevance_score(app: str, context: str | None) -> float:
    """Relevance of *app* for *context* on a 0-10 scale."""
    kind = context_kind(context)
    name = normalize_app_name(app)
    for needles, score in RELEVANCE_RULES[kind]:
        if any(needle in name for needle in needles):
            return score
    return RELEVANCE_FALLBACK[kind]


def context_priority(app: str, context: str | None) -> int:
    """Integer tie-break used when two apps share a relevance score."""
    kind = "coding" if context_kind(context) == "coding" else "default"
    name = normalize_app_name(app)
    for needle, priority in PRIORITY_NAMED[kind]:
        if needle in name:
            return priority
    return PRIORITY_ARCHETYPE[kind].get(classify(app), PRIORITY_FALLBACK[kind])


def score_candidates(apps: Iterable[str], context: str | None) -> list[CandidateScore]:
    """Score *apps* and sort by relevance, then priority (both descending).

    The sort is stable, so equally ranked apps keep their input order.
    """
    scored = [
        CandidateScore(
            app=app,
            archetype=classify(app),
            relevance=relevance_score(app, context),
            priority=context_priority(app, context),
        )
        for app in apps
    ]
    scored.sort(key=lambda c: (c.relevance, c.priority), reverse=True)
    return scored


def _superseded_legacy(apps: Iterable[str]) -> set[str]:
    """Legacy needles whose modern counterpart is present among *apps*."""
    names = [normalize_app_name(a) for a in apps]
    superseded = set()
    for modern, legacy in MODERN_LEGACY_PAIRS:
        has_modern = any(modern in n for n in names)
        has_legacy = any(legacy in n for n in names)
        if has_modern and has_legacy:
            superseded.add(legacy)
    return superseded


def _dedupe(apps: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    unique = []
    for app in apps:
        key = normalize_app_name(app)
        if key in seen:
            _LOG.debug("Ignoring duplicate candidate '%s'", app)
            continue
        seen.add(key)
        unique.append(app)
    return unique


def select_relevant(
    all_apps: Sequence[str],
    context: str | None,
    max_apps: int = DEFAULT_MAX_APPS,
    excluded: Iterable[str] = (),
) -> list[str]:
    """
    Pick at most *max_apps* apps from *all_apps* that suit *context*.

    Parameters
    ----------
    all_apps : Sequence[str]
        Candidate app names.
    context : str | None
        Free-text description of what the user is doing.
    max_apps : int
        Upper bound on the result length.
    excluded : Iterable[str]
        App names the user never wants for this context.

    Returns
    -------
    list[str]
        Selected names (as given by the caller) in ranking order.  Every app
        scoring at least ``HIGH_RELEVANCE`` is taken first; lower scores are
        taken only when they add a new archetype (or fewer than two apps have
        been chosen), and any slots left are filled in ranking order.  When a
        modern app and its legacy counterpart are both present the legacy one
        is never chosen.
    """
    if not all_apps:
        raise InvalidInputError("No candidate apps to choose from")
    if max_apps <= 0:
        raise InvalidInputError(f"max_apps must be positive, got {max_apps}")

    blocked = {normalize_app_name(a) for a in excluded}
    allowed = [a for a in _dedupe(all_apps) if normalize_app_name(a) not in blocked]
    if len(allowed) < len(all_apps):
        _LOG.debug("Excluded by user or duplicates: %d app(s)", len(all_apps) - len(allowed))

    ranked = score_candidates(allowed, context)
    legacy = _superseded_legacy(allowed)

    def _is_superseded(candidate: CandidateScore) -> bool:
        name = normalize_app_name(candidate.app)
        return any(needle in name for needle in legacy)

    selected: list[str] = []
    used_archetypes: set[Archetype] = set()

    for cand in ranked:
        if len(selected) >= max_apps:
            break
        if _is_superseded(cand):
            _LOG.debug("Skipping '%s': superseded by a modern alternative", cand.app)
            continue
        if cand.relevance >= HIGH_RELEVANCE:
            selected.append(cand.app)
            used_archetypes.add(cand.archetype)
            continue
        if cand.archetype not in used_archetypes or len(selected) < 2:
            selected.append(cand.app)
            used_archetypes.add(cand.archetype)

    for cand in ranked:
        if len(selected) >= max_apps:
            break
        if cand.app in selected or _is_superseded(cand):
            continue
        selected.append(cand.app)

    _LOG.debug("Selected %s for context '%s'", selected, context)
    return selected


def primary_app_score(app: str, context: str | None) -> float:
    """How well *app* suits the primary slot for *context* (0 = not at all)."""
    kind = context_kind(context)
    name = normalize_app_name(app)
    table = PRIMARY_APP_SCORES.get(kind)
    if table is None:
        if classify(app) is Archetype.CODE_WORKSPACE:
            return DEFAULT_PRIMARY_WORKSPACE_SCORE
        return 0.0
    for needle, score in table:
        if needle in name:
            return score
    return 0.0


def find_best_primary_app(apps: Sequence[str], context: str | None) -> str | None:
    """Best primary app for *context*; ties go to the first app seen."""
    best: str | None = None
    best_score = float("-inf")
    for app in apps:
        score = primary_app_score(app, context)
        if score > best_score:
            best, best_score = app, score
    return best


def order_apps_for_cascade(
    apps: Sequence[str], context: str | None
) -> list[tuple[str, Role]]:
    """Pair each app with its preferred role, highest layer first."""
    primary = find_best_primary_app(apps, context)
    result = []
    for app in apps:
        if app == primary:
            role = Role.PRIMARY
        else:
            role = optimal_cascade_role(classify(app), len(apps))
        result.append((app, role))
    result.sort(key=lambda pair: pair[1].layer, reverse=True)
    return result
