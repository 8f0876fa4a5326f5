"""
workspace_arranger.constants
----------------------------

Centralised constants shared across the workspace-arranger code-base.

Every lookup table in this module is built once at import time and exposed
read-only (``MappingProxyType`` / tuples) so the engine can be called from
several threads without locking.
"""

from pathlib import Path
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping
import os

# --------------------------------------------------------------------------- #
# Paths
# --------------------------------------------------------------------------- #

# Location of the persistent preference store (override with
# $WORKSPACE_ARRANGER_PREFS_FILE).
PREFS_FILE: Final[Path] = Path(
    os.environ.get(
        "WORKSPACE_ARRANGER_PREFS_FILE",
        Path.home() / ".config/workspace-arranger/preferences.json",
    )
)

# Schema version written into the preference store.
PREFS_SCHEMA: Final[int] = 1

# --------------------------------------------------------------------------- #
# User-facing defaults
# --------------------------------------------------------------------------- #

# Upper bound on the number of windows the relevance filter keeps.
DEFAULT_MAX_APPS: Final[int] = int(os.environ.get("WORKSPACE_ARRANGER_MAX_APPS", "4"))

# Screen size used by the CLI when --screen is not given ("WIDTHxHEIGHT").
DEFAULT_SCREEN: Final[str] = os.environ.get("WORKSPACE_ARRANGER_SCREEN", "1440x900")

# Context used when the caller does not describe one.
DEFAULT_CONTEXT: Final[str] = "general"

# --------------------------------------------------------------------------- #
# Archetypes, roles and visibility
# --------------------------------------------------------------------------- #


class Archetype(str, Enum):
    """Behavioural category describing how an app's window is used."""

    TEXT_STREAM = "text_stream"
    CONTENT_CANVAS = "content_canvas"
    CODE_WORKSPACE = "code_workspace"
    GLANCEABLE_MONITOR = "glanceable_monitor"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class Role(str, Enum):
    """Position of a window in the layout hierarchy."""

    PRIMARY = "primary"
    SIDE_COLUMN = "side_column"
    CASCADE_PEEK = "cascade_peek"
    CORNER = "corner"

    @property
    def layer(self) -> int:
        return LAYER_PRIORITY[self]


class Visibility(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    MINIMAL = "minimal"
    HIDDEN = "hidden"


# Stacking layer per role.  Primary is strictly highest.
LAYER_PRIORITY: Final[Mapping[Role, int]] = MappingProxyType(
    {
        Role.PRIMARY: 3,
        Role.CASCADE_PEEK: 2,
        Role.SIDE_COLUMN: 1,
        Role.CORNER: 0,
    }
)

ROLE_VISIBILITY: Final[Mapping[Role, Visibility]] = MappingProxyType(
    {
        Role.PRIMARY: Visibility.FULL,
        Role.CASCADE_PEEK: Visibility.PARTIAL,
        Role.SIDE_COLUMN: Visibility.PARTIAL,
        Role.CORNER: Visibility.MINIMAL,
    }
)

# --------------------------------------------------------------------------- #
# Archetype database
# --------------------------------------------------------------------------- #

_TEXT_STREAM_APPS = (
    "terminal",
    "iterm",
    "iterm2",
    "console",
    "hyper",
    "warp",
    "slack",
    "discord",
    "messages",
    "telegram",
    "whatsapp",
    "signal",
    "skype",
    "zoom",
    "microsoft teams",
    "log viewer",
    "chat",
)

_CONTENT_CANVAS_APPS = (
    "arc",
    "safari",
    "chrome",
    "firefox",
    "edge",
    "brave",
    "opera",
    "webkit",
    "preview",
    "pdf viewer",
    "adobe reader",
    "figma",
    "sketch",
    "photoshop",
    "illustrator",
    "indesign",
    "canva",
    "notion",
    "obsidian",
    "logseq",
    "roam research",
    "bear",
    "notes",
    "pages",
    "word",
    "google docs",
    "keynote",
    "powerpoint",
    "numbers",
    "excel",
    "sheets",
)

_CODE_WORKSPACE_APPS = (
    "cursor",
    "xcode",
    "visual studio code",
    "vscode",
    "sublime text",
    "atom",
    "vim",
    "emacs",
    "intellij",
    "pycharm",
    "webstorm",
    "phpstorm",
    "clion",
    "android studio",
    "unity",
    "unreal engine",
    "nova",
    "coderunner",
    "dash",
    "kaleidoscope",
    "sourcetree",
    "github desktop",
    "tower",
    "fork",
)

_GLANCEABLE_MONITOR_APPS = (
    "activity monitor",
    "system monitor",
    "top",
    "htop",
    "spotify",
    "music",
    "apple music",
    "itunes",
    "soundcloud",
    "youtube music",
    "timer",
    "clock",
    "stopwatch",
    "countdown",
    "system preferences",
    "settings",
    "preferences",
    "menumeters",
    "istat menus",
    "network radar",
    "little snitch",
    "bartender",
    "finder",
    "file browser",
    "path finder",
)

# Normalised app name → archetype.
ARCHETYPE_DATABASE: Final[Mapping[str, Archetype]] = MappingProxyType(
    {
        **{name: Archetype.TEXT_STREAM for name in _TEXT_STREAM_APPS},
        **{name: Archetype.CONTENT_CANVAS for name in _CONTENT_CANVAS_APPS},
        **{name: Archetype.CODE_WORKSPACE for name in _CODE_WORKSPACE_APPS},
        **{name: Archetype.GLANCEABLE_MONITOR for name in _GLANCEABLE_MONITOR_APPS},
    }
)

# Keys in a fixed order so fuzzy matching never depends on dict ordering.
ARCHETYPE_KEYS: Final[tuple[str, ...]] = tuple(sorted(ARCHETYPE_DATABASE))

# Ordered (keywords, archetype) rules used when neither an exact nor a fuzzy
# database match exists.  First rule with a matching keyword wins.
ARCHETYPE_PATTERNS: Final[tuple[tuple[tuple[str, ...], Archetype], ...]] = (
    (("terminal", "console", "shell", "cmd", "bash", "zsh"), Archetype.TEXT_STREAM),
    (("chat", "message", "messenger", "talk"), Archetype.TEXT_STREAM),
    (("browser", "web"), Archetype.CONTENT_CANVAS),
    (("code", "editor", "ide", "dev", "studio"), Archetype.CODE_WORKSPACE),
    (("design", "photo", "image", "draw"), Archetype.CONTENT_CANVAS),
    (("music", "audio", "media", "player"), Archetype.GLANCEABLE_MONITOR),
    (("monitor", "system", "activity", "stats"), Archetype.GLANCEABLE_MONITOR),
)

# Archetype used when nothing else matches.
FALLBACK_ARCHETYPE: Final[Archetype] = Archetype.CONTENT_CANVAS

# --------------------------------------------------------------------------- #
# Sizing heuristics
# --------------------------------------------------------------------------- #

# Minimum readable width of a text-stream side column, in pixels.
MIN_TEXT_COLUMN_PX: Final[float] = 400.0

# Preferred reading width of a text stream shown as the primary window.
TEXT_PRIMARY_PX: Final[float] = 1000.0

# Minimum edge of a glanceable corner window, in pixels.
MIN_CORNER_PX: Final[float] = 200.0

# Content canvases shown as peeks never cover less than this screen share.
MIN_PEEK_AREA: Final[float] = 0.25
MAX_PEEK_WIDTH: Final[float] = 0.65
MAX_PEEK_HEIGHT: Final[float] = 0.60

# --------------------------------------------------------------------------- #
# Context vocabulary
# --------------------------------------------------------------------------- #

CODING_KEYWORDS: Final[tuple[str, ...]] = ("cod",)
RESEARCH_KEYWORDS: Final[tuple[str, ...]] = ("research", "browse")
DESIGN_KEYWORDS: Final[tuple[str, ...]] = ("design",)

# Relevance score (0-10) per context kind: ordered (substrings, score) rules,
# first match wins, otherwise the context's fallback score applies.
RELEVANCE_RULES: Final[Mapping[str, tuple[tuple[tuple[str, ...], float], ...]]] = (
    MappingProxyType(
        {
            "coding": (
                (("cursor",), 10.0),
                (("terminal", "iterm"), 9.0),
                (("arc", "safari", "chrome"), 8.0),
                (("xcode",), 7.0),
                (("vscode", "code"), 8.5),
                (("finder", "spotify"), 2.0),
            ),
            "research": (
                (("arc", "safari", "chrome"), 10.0),
                (("notes", "notion", "obsidian"), 8.0),
                (("preview", "pdf"), 6.0),
            ),
            "design": (
                (("figma", "sketch", "photoshop"), 10.0),
                (("arc", "safari"), 6.0),
            ),
            "default": (),
        }
    )
)

RELEVANCE_FALLBACK: Final[Mapping[str, float]] = MappingProxyType(
    {"coding": 1.0, "research": 3.0, "design": 2.0, "default": 5.0}
)

# Apps scoring at or above this are always selected.
HIGH_RELEVANCE: Final[float] = 8.0

# Integer tie-break priorities: named apps first, then archetype, then fallback.
PRIORITY_NAMED: Final[Mapping[str, tuple[tuple[str, int], ...]]] = MappingProxyType(
    {
        "coding": (("cursor", 100), ("terminal", 90), ("arc", 80), ("xcode", 70)),
        "default": (("cursor", 65), ("terminal", 60), ("arc", 55), ("xcode", 50)),
    }
)

PRIORITY_ARCHETYPE: Final[Mapping[str, Mapping[Archetype, int]]] = MappingProxyType(
    {
        "coding": MappingProxyType(
            {
                Archetype.CODE_WORKSPACE: 60,
                Archetype.TEXT_STREAM: 50,
                Archetype.CONTENT_CANVAS: 40,
            }
        ),
        "default": MappingProxyType(
            {
                Archetype.CODE_WORKSPACE: 45,
                Archetype.TEXT_STREAM: 40,
                Archetype.CONTENT_CANVAS: 35,
            }
        ),
    }
)

PRIORITY_FALLBACK: Final[Mapping[str, int]] = MappingProxyType(
    {"coding": 10, "default": 30}
)

# (modern, legacy): when both are present the legacy app is never selected.
MODERN_LEGACY_PAIRS: Final[tuple[tuple[str, str], ...]] = (("cursor", "xcode"),)

# Scores used to pick the best primary app for a context.
PRIMARY_APP_SCORES: Final[Mapping[str, tuple[tuple[str, float], ...]]] = (
    MappingProxyType(
        {
            "coding": (("cursor", 100.0), ("xcode", 80.0), ("vscode", 90.0)),
            "design": (("figma", 100.0), ("sketch", 90.0), ("photoshop", 85.0)),
        }
    )
)

# Score given to code workspaces when the context has no primary table.
DEFAULT_PRIMARY_WORKSPACE_SCORE: Final[float] = 50.0

# Focus priority in coding contexts (higher wins).
CODING_FOCUS_PRIORITY: Final[Mapping[Archetype, int]] = MappingProxyType(
    {
        Archetype.CODE_WORKSPACE: 4,
        Archetype.CONTENT_CANVAS: 3,
        Archetype.TEXT_STREAM: 2,
        Archetype.GLANCEABLE_MONITOR: 1,
        Archetype.UNKNOWN: 0,
    }
)

# --------------------------------------------------------------------------- #
# Role geometry
# --------------------------------------------------------------------------- #

# Code workspace primary size by selected-app count: (max count, (w, h)).
CODE_PRIMARY_SIZES: Final[tuple[tuple[int, tuple[float, float]], ...]] = (
    (2, (0.80, 0.95)),
    (3, (0.65, 0.90)),
)
CODE_PRIMARY_SIZE_MANY: Final[tuple[float, float]] = (0.60, 0.90)

# Side columns live in a right-hand vertical band.
SIDE_COLUMN_MIN_WIDTH: Final[float] = 0.30
SIDE_COLUMN_MAX_WIDTH: Final[float] = 0.45
SIDE_COLUMN_MIN_X: Final[float] = 0.60
SIDE_COLUMN_MAX_X: Final[float] = 0.65

# Cascade peeks: archetype base offset + index * step, clamped so the peek
# stays reachable near the top-left.
PEEK_BASE_OFFSETS: Final[Mapping[Archetype, tuple[float, float]]] = MappingProxyType(
    {
        Archetype.CONTENT_CANVAS: (0.02, 0.02),
        Archetype.CODE_WORKSPACE: (0.05, 0.02),
    }
)
PEEK_DEFAULT_OFFSET: Final[tuple[float, float]] = (0.05, 0.05)
PEEK_STEP: Final[tuple[float, float]] = (0.08, 0.06)
PEEK_MAX_X: Final[float] = 0.95
PEEK_MAX_Y: Final[float] = 0.25

# Corner anchors, used in order: bottom-right, bottom-left, top-right, top-left.
CORNER_ANCHORS: Final[tuple[tuple[float, float], ...]] = (
    (0.80, 0.80),
    (0.05, 0.80),
    (0.80, 0.05),
    (0.05, 0.05),
)

# --------------------------------------------------------------------------- #
# Tessellation
# --------------------------------------------------------------------------- #

# Largest count handled by the closed-form tilings; beyond it recursive
# bisection is used.
MAX_EXACT_TILES: Final[int] = 4

# Dominant column share for three windows: clamp(pref * factor, lo, hi).
THREE_TILE_FACTOR: Final[float] = 1.2
THREE_TILE_MIN: Final[float] = 0.6
THREE_TILE_MAX: Final[float] = 0.7

# Tolerance used by the coverage checks.
COVERAGE_TOLERANCE: Final[float] = 1e-6
