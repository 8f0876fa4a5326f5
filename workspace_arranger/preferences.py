"""
workspace_arranger.preferences
------------------------------

Persistent store for user layout instructions.

This module is intentionally *stand-alone* and synchronous.  The arrangement
engine only ever reads from it (``excluded_for``); writes come from the CLI.

Design
~~~~~~
" Instructions are ``ParsedInstruction`` pydantic models serialised into a
  versioned JSON document.
" A naive file-lock (fcntl) guards concurrent readers/writers and every write
  goes through a temp file + atomic rename.
" A malformed file is logged and treated as empty rather than aborting an
  arrangement.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from .constants import PREFS_FILE, PREFS_SCHEMA
from .instructions import InstructionType, ParsedInstruction, normalize_context

_LOG = logging.getLogger(__name__)


class PreferenceStore:
    """
    Lightweight singleton for reading/writing the preference file.

    The store performs an eager load on first construction and writes
    synchronously on every mutation.
    """

    _instance: "PreferenceStore" | None = None

    # ---------------  construction & internal helpers  -------------------- #

    def __new__(cls, prefs_file: Path | None = None) -> "PreferenceStore":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init(prefs_file or PREFS_FILE)
        return cls._instance

    def _init(self, prefs_file: Path) -> None:
        self._prefs_file = Path(prefs_file)
        self._instructions: List[ParsedInstruction] = []
        self._load_from_disk()

    @property
    def path(self) -> Path:
        return self._prefs_file

    # ---------------  disk I/O  ------------------------------------------- #

    def _load_from_disk(self) -> None:
        if not self._prefs_file.exists():
            return

        try:
            with self._prefs_file.open("r") as fp:
                fcntl.flock(fp.fileno(), fcntl.LOCK_SH)
                raw = json.load(fp)
                fcntl.flock(fp.fileno(), fcntl.LOCK_UN)
        except (OSError, ValueError) as exc:
            _LOG.warning("Failed to load preferences from %s: %s", self._prefs_file, exc)
            return

        schema = raw.get("schema", 1) if isinstance(raw, dict) else None
        if schema != PREFS_SCHEMA:
            _LOG.warning(
                "Ignoring preferences in %s: unsupported schema %r",
                self._prefs_file,
                schema,
            )
            return

        items = raw.get("instructions", [])
        if not isinstance(items, list):
            _LOG.warning(
                "Ignoring preferences in %s: 'instructions' is not a list", self._prefs_file
            )
            return

        for item in items:
            try:
                self._instructions.append(ParsedInstruction.model_validate(item))
            except ValidationError as exc:
                _LOG.warning("Skipping malformed instruction %r: %s", item, exc)

    def _write_atomic(self, data: dict) -> None:
        self._prefs_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._prefs_file.with_suffix(".tmp")
        with tmp_path.open("w") as fp:
            fcntl.flock(fp.fileno(), fcntl.LOCK_EX)
            json.dump(data, fp, indent=2)
            fp.flush()
            os.fsync(fp.fileno())
            fcntl.flock(fp.fileno(), fcntl.LOCK_UN)
        tmp_path.replace(self._prefs_file)

    def _persist(self) -> None:
        """Write the in-memory instructions to disk in an atomic manner."""
        data = {
            "schema": PREFS_SCHEMA,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "instructions": [i.model_dump(mode="json") for i in self._instructions],
        }
        try:
            self._write_atomic(data)
        except OSError as exc:  # pragma: no cover
            _LOG.error("Failed to write preferences to %s: %s", self._prefs_file, exc)

    # ---------------  public API  ----------------------------------------- #

    def add_instruction(self, instruction: ParsedInstruction) -> ParsedInstruction:
        """
        Store *instruction*, replacing any rule of the same type for the same
        app and context, and persist immediately.
        """
        self._instructions = [
            existing
            for existing in self._instructions
            if not (
                existing.app_name.lower() == instruction.app_name.lower()
                and existing.context == instruction.context
                and existing.type == instruction.type
            )
        ]
        self._instructions.append(instruction)
        self._persist()
        _LOG.info(
            "Stored %s rule for '%s' (context: %s)",
            instruction.type.value,
            instruction.app_name,
            instruction.context,
        )
        return instruction

    def remove(self, app_name: str, context: str | None = None) -> int:
        """Delete rules for *app_name* (optionally only in *context*).

        Returns the number of rules removed.
        """
        wanted = app_name.strip().lower()
        ctx = normalize_context(context) if context else None
        keep = [
            i
            for i in self._instructions
            if not (i.app_name.lower() == wanted and (ctx is None or i.context == ctx))
        ]
        removed = len(self._instructions) - len(keep)
        if removed:
            self._instructions = keep
            self._persist()
        return removed

    def list_instructions(self) -> List[ParsedInstruction]:
        """Shallow copy of all stored rules."""
        return list(self._instructions)

    def instructions_for(
        self, app_name: str, context: str | None = None
    ) -> List[ParsedInstruction]:
        """Rules for *app_name* that apply in *context* (or in every context)."""
        ctx = normalize_context(context)
        return [i for i in self._instructions if i.matches(app_name, ctx)]

    def should_never_use(self, app_name: str, context: str | None = None) -> bool:
        return any(
            i.type is InstructionType.NEVER_USE
            for i in self.instructions_for(app_name, context)
        )

    def excluded_for(
        self, context: str | None, apps: Iterable[str] | None = None
    ) -> set[str]:
        """
        Lower-cased app names the user never wants in *context*.

        When *apps* is given only those names are checked and returned (as
        given by the caller).
        """
        ctx = normalize_context(context)
        never = {
            i.app_name.lower()
            for i in self._instructions
            if i.type is InstructionType.NEVER_USE and i.context in (ctx, "general")
        }
        if apps is None:
            return never
        return {app for app in apps if app.strip().lower() in never}

    def preferred_position(self, app_name: str, context: str | None = None) -> Optional[str]:
        """ALWAYS rules win over PREFER rules."""
        rules = self.instructions_for(app_name, context)
        for kind in (InstructionType.ALWAYS_POSITION, InstructionType.PREFER_POSITION):
            for rule in rules:
                if rule.type is kind:
                    return rule.position
        return None

    def preferred_size(self, app_name: str, context: str | None = None) -> Optional[str]:
        for rule in self.instructions_for(app_name, context):
            if rule.type is InstructionType.ALWAYS_SIZE:
                return rule.size
        return None

    def clear(self) -> None:
        """Remove every stored rule."""
        self._instructions = []
        self._persist()
