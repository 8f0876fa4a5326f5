"""
workspace_arranger.errors
-------------------------

Exceptions raised by the arrangement engine.  Misclassification is never an
error: the classifier always degrades to a best guess.
"""

from __future__ import annotations


class ArrangementError(ValueError):
    """Base class for every error the engine reports."""


class InvalidInputError(ArrangementError):
    """Empty candidate list, non-positive screen size or ``max_apps <= 0``."""


class UnsupportedCardinalityError(ArrangementError):
    """No layout is defined for the requested number of windows."""

    def __init__(self, count: int, supported: tuple[int, int]) -> None:
        self.count = count
        self.supported = supported
        lo, hi = supported
        super().__init__(
            f"No layout defined for {count} windows (supported: {lo}-{hi})"
        )
