"""
workspace_arranger.instructions
-------------------------------

Parse natural-language layout rules ("never open xcode", "when coding,
always put terminal on the right") into structured, storable instructions.

Parsed instructions are persisted by ``workspace_arranger.preferences``; the
arrangement engine only reads them (``NEVER_USE`` rules become per-context
exclusions for the relevance filter).
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_LOG = logging.getLogger(__name__)


class InstructionType(str, Enum):
    ALWAYS_POSITION = "always_position"
    PREFER_POSITION = "prefer_position"
    ALWAYS_SIZE = "always_size"
    NEVER_USE = "never_use"


class ParsedInstruction(BaseModel):
    """A single user rule about one app, optionally scoped to a context."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=False)

    app_name: str
    type: InstructionType
    context: str = "general"
    position: Optional[str] = None
    size: Optional[str] = None
    original_text: str = ""
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def matches(self, app_name: str, context: str) -> bool:
        """True when this rule applies to *app_name* in normalised *context*."""
        return self.app_name.lower() == app_name.strip().lower() and self.context in (
            context,
            "general",
        )


# --------------------------------------------------------------------------- #
# Patterns                                                                    #
# --------------------------------------------------------------------------- #

_ALWAYS_PATTERNS = (
    re.compile(r"always (?:put|place|open) (\w+) (?:on the |in the )?(\w+(?:\s\w+)*)"),
    re.compile(r"always have (\w+) (?:on the |in the )?(\w+(?:\s\w+)*)"),
)
_NEVER_PATTERNS = (
    re.compile(r"never (?:open|use|suggest) (\w+)"),
    re.compile(r"don'?t (?:open|use) (\w+)"),
    re.compile(r"do not (?:open|use) (\w+)"),
)
_SHOULD_PATTERNS = (
    re.compile(r"(\w+) should (?:always )?be (\w+(?:\s\w+)*)"),
    re.compile(r"(\w+) should (?:always )?go (?:on the |in the )?(\w+(?:\s\w+)*)"),
)
_PREFER_PATTERNS = (
    re.compile(r"i (?:prefer|like) (\w+) (?:on the |in the )?(\w+(?:\s\w+)*)"),
)
_CONTEXT_PATTERNS = (
    re.compile(r"when (\w+(?:\s\w+)*), (.+)"),
    re.compile(r"for (\w+(?:\s\w+)*), (.+)"),
    re.compile(r"during (\w+(?:\s\w+)*), (.+)"),
)

_SIZE_WORDS = ("narrow", "wide", "small", "large")


# --------------------------------------------------------------------------- #
# Normalisation helpers                                                       #
# --------------------------------------------------------------------------- #


def normalize_position(position: str) -> str:
    pos = position.lower()
    if ("right" in pos and "side" in pos) or pos == "right":
        return "right"
    if ("left" in pos and "side" in pos) or pos == "left":
        return "left"
    if "center" in pos or "middle" in pos:
        return "center"
    if "top" in pos and "right" in pos:
        return "topRight"
    if "top" in pos and "left" in pos:
        return "topLeft"
    if "bottom" in pos and "right" in pos:
        return "bottomRight"
    if "bottom" in pos and "left" in pos:
        return "bottomLeft"
    if "top" in pos:
        return "top"
    if "bottom" in pos:
        return "bottom"
    if "right" in pos and "half" in pos:
        return "rightHalf"
    if "left" in pos and "half" in pos:
        return "leftHalf"
    return position


def normalize_size(size: str) -> str:
    sz = size.lower()
    if "narrow" in sz or "thin" in sz:
        return "narrow"
    if "wide" in sz or "broad" in sz:
        return "wide"
    if "small" in sz or "tiny" in sz:
        return "small"
    if "large" in sz or "big" in sz:
        return "large"
    if "primary" in sz or "main" in sz:
        return "primary"
    return size


def normalize_context(context: str | None) -> str:
    """Map free text to ``coding``/``design``/``research``/``meeting``/``general``."""
    ctx = (context or "").lower()
    if "cod" in ctx or "develop" in ctx or "program" in ctx:
        return "coding"
    if "design" in ctx or "creat" in ctx:
        return "design"
    if "research" in ctx or "read" in ctx or "study" in ctx:
        return "research"
    if "meet" in ctx or "call" in ctx or "video" in ctx:
        return "meeting"
    return "general"


# --------------------------------------------------------------------------- #
# Parsers                                                                     #
# --------------------------------------------------------------------------- #


def _parse_always(text: str) -> ParsedInstruction | None:
    for pattern in _ALWAYS_PATTERNS:
        m = pattern.search(text)
        if m:
            return ParsedInstruction(
                app_name=m.group(1).capitalize(),
                type=InstructionType.ALWAYS_POSITION,
                position=normalize_position(m.group(2)),
                original_text=text,
            )
    return None


def _parse_never(text: str) -> ParsedInstruction | None:
    for pattern in _NEVER_PATTERNS:
        m = pattern.search(text)
        if m:
            return ParsedInstruction(
                app_name=m.group(1).capitalize(),
                type=InstructionType.NEVER_USE,
                original_text=text,
            )
    return None


def _parse_should(text: str) -> ParsedInstruction | None:
    for pattern in _SHOULD_PATTERNS:
        m = pattern.search(text)
        if m:
            preference = m.group(2)
            if any(word in preference for word in _SIZE_WORDS):
                return ParsedInstruction(
                    app_name=m.group(1).capitalize(),
                    type=InstructionType.ALWAYS_SIZE,
                    size=normalize_size(preference),
                    original_text=text,
                )
            return ParsedInstruction(
                app_name=m.group(1).capitalize(),
                type=InstructionType.ALWAYS_POSITION,
                position=normalize_position(preference),
                original_text=text,
            )
    return None


def _parse_prefer(text: str) -> ParsedInstruction | None:
    for pattern in _PREFER_PATTERNS:
        m = pattern.search(text)
        if m:
            return ParsedInstruction(
                app_name=m.group(1).capitalize(),
                type=InstructionType.PREFER_POSITION,
                position=normalize_position(m.group(2)),
                original_text=text,
            )
    return None


def _parse_context(text: str) -> ParsedInstruction | None:
    for pattern in _CONTEXT_PATTERNS:
        m = pattern.match(text)
        if m:
            parsed = parse_instruction(m.group(2))
            if parsed is not None:
                return parsed.model_copy(
                    update={
                        "context": normalize_context(m.group(1)),
                        "original_text": text,
                    }
                )
    return None


def parse_instruction(text: str) -> ParsedInstruction | None:
    """
    Parse *text* into a ``ParsedInstruction``.

    Context-prefixed rules ("when coding, …") are tried first so the prefix is
    not swallowed by one of the app-level patterns.  Returns ``None`` when no
    pattern matches.
    """
    normalized = text.strip().lower()
    if not normalized:
        return None

    for parser in (_parse_context, _parse_always, _parse_never, _parse_should, _parse_prefer):
        parsed = parser(normalized)
        if parsed is not None:
            _LOG.debug("Parsed instruction %r → %s", text, parsed.type.value)
            return parsed

    _LOG.debug("No instruction pattern matched %r", text)
    return None
