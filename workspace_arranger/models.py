"""
workspace_arranger.models
-------------------------

Value types flowing through the arrangement pipeline.

Everything here is created fresh per invocation and discarded afterwards;
rectangles are always fractions of the screen so a result can be replayed
on any display size.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import NamedTuple

from .constants import Archetype, Role, Visibility
from .errors import InvalidInputError

_SCREEN_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[xX×]\s*(\d+(?:\.\d+)?)\s*$")


def normalize_app_name(name: str) -> str:
    """Identity of an app name: trimmed and lower-cased."""
    return name.strip().lower()


class ScreenSize(NamedTuple):
    """Screen dimensions in pixels."""

    width: float
    height: float

    @classmethod
    def parse(cls, raw: str) -> "ScreenSize":
        """Parse ``"1440x900"`` style strings."""
        match = _SCREEN_RE.match(raw)
        if not match:
            raise InvalidInputError(f"Invalid screen size '{raw}' (expected WIDTHxHEIGHT)")
        screen = cls(float(match.group(1)), float(match.group(2)))
        screen.validate()
        return screen

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(
                f"Screen dimensions must be positive, got {self.width}x{self.height}"
            )


@dataclass(slots=True, frozen=True)
class Rect:
    """Axis-aligned rectangle in screen fractions."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def full(cls) -> "Rect":
        return cls(0.0, 0.0, 1.0, 1.0)

    @classmethod
    def from_pixels(
        cls, x: float, y: float, width: float, height: float, screen: ScreenSize
    ) -> "Rect":
        return cls(
            x / screen.width,
            y / screen.height,
            width / screen.width,
            height / screen.height,
        )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def intersection_area(self, other: "Rect") -> float:
        """Area shared by the interiors of both rectangles (0 when disjoint)."""
        dx = min(self.right, other.right) - max(self.x, other.x)
        dy = min(self.bottom, other.bottom) - max(self.y, other.y)
        if dx <= 0 or dy <= 0:
            return 0.0
        return dx * dy

    def to_pixels(self, screen: ScreenSize) -> tuple[int, int, int, int]:
        """Return ``(left, top, width, height)`` in whole pixels.

        Edges are rounded rather than sizes so adjacent tiles still meet
        exactly after conversion.
        """
        left = round(self.x * screen.width)
        top = round(self.y * screen.height)
        right = round(self.right * screen.width)
        bottom = round(self.bottom * screen.height)
        return left, top, right - left, bottom - top


@dataclass(slots=True, frozen=True)
class CandidateScore:
    """Relevance of one app for one context."""

    app: str
    archetype: Archetype
    relevance: float
    priority: int


@dataclass(slots=True, frozen=True)
class Arrangement:
    """Placement directive for a single app window."""

    app: str
    rect: Rect
    role: Role
    visibility: Visibility

    @property
    def layer(self) -> int:
        return self.role.layer

    def with_rect(self, rect: Rect) -> "Arrangement":
        return replace(self, rect=rect)

    def to_dict(self, screen: ScreenSize | None = None) -> dict:
        """JSON-friendly representation, optionally with pixel bounds."""
        data = {
            "app": self.app,
            "role": self.role.value,
            "layer": self.layer,
            "visibility": self.visibility.value,
            "rect": {
                "x": round(self.rect.x, 6),
                "y": round(self.rect.y, 6),
                "width": round(self.rect.width, 6),
                "height": round(self.rect.height, 6),
            },
        }
        if screen is not None:
            left, top, width, height = self.rect.to_pixels(screen)
            data["bounds"] = {"left": left, "top": top, "width": width, "height": height}
        return data


# Ordered output of the engine: one arrangement per selected app.
LayoutResult = list[Arrangement]
