"""
workspace_arranger.cli_click
----------------------------

User-facing Click command-line interface.

Commands
--------
arrange : Compute a full-screen arrangement for a set of apps
classify: Show the archetype the engine infers for app names
select  : Show relevance scores and the apps chosen for a context
presets : List the built-in named layouts
prefs   : Manage natural-language layout rules (add/list/show/remove/clear)
"""

from __future__ import annotations

import json
import logging
import os
from importlib import metadata
from pathlib import Path
from typing import Optional

import click
from dotenv import find_dotenv, load_dotenv

from workspace_arranger.archetypes import classify, is_confident, optimal_cascade_role
from workspace_arranger.constants import (
    DEFAULT_CONTEXT,
    DEFAULT_MAX_APPS,
    DEFAULT_SCREEN,
    PREFS_FILE,
)
from workspace_arranger.errors import ArrangementError
from workspace_arranger.instructions import InstructionType, parse_instruction
from workspace_arranger.layout import arrange, arrange_or_fallback
from workspace_arranger.models import ScreenSize
from workspace_arranger.preferences import PreferenceStore
from workspace_arranger.presets import (
    WindowLayout,
    choose_preset,
    layouts_for_context,
    presets_for_count,
)
from workspace_arranger.relevance import score_candidates, select_relevant

_LOG = logging.getLogger(__name__)

_OUTPUT_OPTION = click.option(
    "-o",
    "--output",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format.",
)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _store() -> PreferenceStore:
    """Preference store honouring a path set in a freshly loaded .env."""
    return PreferenceStore(Path(os.getenv("WORKSPACE_ARRANGER_PREFS_FILE", PREFS_FILE)))


def _parse_screen(ctx: click.Context, param: click.Parameter, value: str) -> ScreenSize:
    try:
        return ScreenSize.parse(value)
    except ArrangementError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.version_option(metadata.version("workspace-arranger"))
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:  # noqa: D401  (Click demands plain name)
    """workspace-arranger – tile app windows to suit what you are doing."""
    _configure_logging(verbose)
    discovered = find_dotenv(usecwd=True)
    if discovered:
        load_dotenv(discovered)
        _LOG.debug("Loaded .env at startup: %s", discovered)
    ctx.ensure_object(dict)


# --------------------------------------------------------------------------- #
# arrange command                                                             #
# --------------------------------------------------------------------------- #


@cli.command("arrange")
@click.argument("apps", nargs=-1, required=True)
@click.option("-c", "--context", default=DEFAULT_CONTEXT, show_default=True, help="What you are doing.")
@click.option("-f", "--focus", "focused", default=None, help="App that should be primary.")
@click.option(
    "-s",
    "--screen",
    default=lambda: os.getenv("WORKSPACE_ARRANGER_SCREEN", DEFAULT_SCREEN),
    callback=_parse_screen,
    show_default=DEFAULT_SCREEN,
    help="Screen size as WIDTHxHEIGHT.",
)
@click.option(
    "-m",
    "--max-apps",
    type=click.IntRange(min=1),
    default=lambda: int(os.getenv("WORKSPACE_ARRANGER_MAX_APPS", DEFAULT_MAX_APPS)),
    show_default=str(DEFAULT_MAX_APPS),
    help="Maximum number of apps to arrange.",
)
@click.option("--pixels", is_flag=True, help="Include pixel bounds in the output.")
@click.option("--fallback", is_flag=True, help="Use an equal-split grid instead of failing.")
@_OUTPUT_OPTION
def cmd_arrange(
    apps: tuple[str, ...],
    context: str,
    focused: Optional[str],
    screen: ScreenSize,
    max_apps: int,
    pixels: bool,
    fallback: bool,
    output: str,
) -> None:
    """Arrange APPS so they cover the whole screen."""
    store = _store()
    runner = arrange_or_fallback if fallback else arrange
    try:
        result = runner(
            list(apps),
            screen,
            context=context,
            focused=focused,
            max_apps=max_apps,
            store=store,
        )
    except ArrangementError as exc:
        raise click.ClickException(str(exc)) from exc

    bounds_screen = screen if pixels else None
    if output == "json":
        payload = {
            "context": context,
            "screen": {"width": screen.width, "height": screen.height},
            "arrangements": [a.to_dict(bounds_screen) for a in result],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    header = f"{'App':24}  {'Role':13}  {'Layer':5}  {'X':>6}  {'Y':>6}  {'W':>6}  {'H':>6}"
    if pixels:
        header += "  Bounds"
    click.echo(header)
    click.echo("-" * len(header))
    for arr in result:
        r = arr.rect
        line = (
            f"{arr.app:24}  {arr.role.value:13}  {arr.layer:5}  "
            f"{r.x:6.3f}  {r.y:6.3f}  {r.width:6.3f}  {r.height:6.3f}"
        )
        if pixels:
            left, top, width, height = r.to_pixels(screen)
            line += f"  {left},{top} {width}x{height}"
        click.echo(line)


# --------------------------------------------------------------------------- #
# Inspection commands                                                         #
# --------------------------------------------------------------------------- #


@cli.command("classify")
@click.argument("names", nargs=-1, required=True)
@_OUTPUT_OPTION
def cmd_classify(names: tuple[str, ...], output: str) -> None:
    """Show the archetype inferred for each of NAMES."""
    rows = [
        {
            "app": name,
            "archetype": classify(name).value,
            "confident": is_confident(name),
            "role": optimal_cascade_role(classify(name)).value,
        }
        for name in names
    ]
    if output == "json":
        click.echo(json.dumps(rows, indent=2))
        return

    header = f"{'App':24}  {'Archetype':20}  {'Confident':9}  Role"
    click.echo(header)
    click.echo("-" * len(header))
    for row in rows:
        click.echo(
            f"{row['app']:24}  {row['archetype']:20}  {str(row['confident']):9}  {row['role']}"
        )


@cli.command("select")
@click.argument("apps", nargs=-1, required=True)
@click.option("-c", "--context", default=DEFAULT_CONTEXT, show_default=True, help="What you are doing.")
@click.option(
    "-m",
    "--max-apps",
    type=click.IntRange(min=1),
    default=lambda: int(os.getenv("WORKSPACE_ARRANGER_MAX_APPS", DEFAULT_MAX_APPS)),
    show_default=str(DEFAULT_MAX_APPS),
    help="Maximum number of apps to select.",
)
@_OUTPUT_OPTION
def cmd_select(apps: tuple[str, ...], context: str, max_apps: int, output: str) -> None:
    """Rank APPS for CONTEXT and show which ones would be arranged."""
    excluded = _store().excluded_for(context, apps)
    try:
        selected = select_relevant(list(apps), context, max_apps, excluded)
    except ArrangementError as exc:
        raise click.ClickException(str(exc)) from exc
    scores = score_candidates(apps, context)

    if output == "json":
        payload = {
            "context": context,
            "selected": selected,
            "excluded": sorted(excluded),
            "scores": [
                {
                    "app": s.app,
                    "archetype": s.archetype.value,
                    "relevance": s.relevance,
                    "priority": s.priority,
                }
                for s in scores
            ],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    header = f"{'App':24}  {'Relevance':>9}  {'Priority':>8}  Selected"
    click.echo(header)
    click.echo("-" * len(header))
    for s in scores:
        mark = "excluded" if s.app in excluded else ("yes" if s.app in selected else "")
        click.echo(f"{s.app:24}  {s.relevance:9.1f}  {s.priority:8d}  {mark}")


@cli.command("presets")
@click.option("-n", "--count", type=click.IntRange(1, 4), default=None, help="Only presets for COUNT apps.")
@click.option("-c", "--context", default=None, help="Mark the preset recommended for this context.")
def cmd_presets(count: Optional[int], context: Optional[str]) -> None:
    """List the built-in named layouts."""
    if count:
        layouts = presets_for_count(count)
    elif context:
        layouts = layouts_for_context(context) or list(WindowLayout)
    else:
        layouts = list(WindowLayout)
    recommended = choose_preset(context, count) if count and context else None

    click.echo(f"  {'Name':20}  {'Apps':4}  {'Contexts':36}  Description")
    click.echo("-" * 100)
    for layout in layouts:
        mark = "*" if layout is recommended else " "
        contexts = ", ".join(layout.context_categories)
        click.echo(
            f"{mark} {layout.value:20}  {layout.max_apps:4}  {contexts:36}  {layout.description}"
        )


# --------------------------------------------------------------------------- #
# prefs group                                                                 #
# --------------------------------------------------------------------------- #


@cli.group("prefs")
def prefs_commands() -> None:
    """Manage stored layout rules."""
    pass


@prefs_commands.command("add")
@click.argument("instruction")
def cmd_prefs_add(instruction: str) -> None:
    """Parse and store INSTRUCTION, e.g. "never open xcode"."""
    parsed = parse_instruction(instruction)
    if parsed is None:
        raise click.ClickException(f"Could not understand instruction: '{instruction}'")
    _store().add_instruction(parsed)
    detail = parsed.position or parsed.size or ""
    click.echo(
        f"Stored {parsed.type.value} rule for '{parsed.app_name}'"
        f" (context: {parsed.context}){' → ' + detail if detail else ''}"
    )
    if parsed.type is not InstructionType.NEVER_USE:
        click.echo(
            "Note: only never-use rules change arrangements; "
            "position and size rules are recorded for 'prefs show'.",
            err=True,
        )


@prefs_commands.command("show")
@click.argument("app")
@click.option("-c", "--context", default=None, help="Context to resolve rules for.")
def cmd_prefs_show(app: str, context: Optional[str]) -> None:
    """Show the effective rules for APP."""
    store = _store()
    click.echo(f"App:       {app}")
    click.echo(f"Never use: {'yes' if store.should_never_use(app, context) else 'no'}")
    click.echo(f"Position:  {store.preferred_position(app, context) or '-'}")
    click.echo(f"Size:      {store.preferred_size(app, context) or '-'}")


@prefs_commands.command("list")
@_OUTPUT_OPTION
def cmd_prefs_list(output: str) -> None:
    """List stored rules."""
    rules = _store().list_instructions()
    if output == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in rules], indent=2))
        return
    if not rules:
        click.echo("No rules stored.")
        return
    header = f"{'App':20}  {'Type':16}  {'Context':9}  Value"
    click.echo(header)
    click.echo("-" * len(header))
    for rule in rules:
        value = rule.position or rule.size or ""
        click.echo(f"{rule.app_name:20}  {rule.type.value:16}  {rule.context:9}  {value}")


@prefs_commands.command("remove")
@click.argument("app")
@click.option("-c", "--context", default=None, help="Only remove rules for this context.")
def cmd_prefs_remove(app: str, context: Optional[str]) -> None:
    """Delete the rules stored for APP."""
    removed = _store().remove(app, context)
    if not removed:
        click.echo(f"No rules for '{app}'", err=True)
        return
    click.echo(f"Removed {removed} rule(s) for '{app}'.")


@prefs_commands.command("clear")
@click.confirmation_option(prompt="Delete every stored rule?")
def cmd_prefs_clear() -> None:
    """Delete every stored rule."""
    _store().clear()
    click.echo("All rules removed.")


if __name__ == "__main__":  # pragma: no cover
    cli()
