"""Shared pytest fixtures for tests."""

import pytest

from workspace_arranger.constants import Role, ROLE_VISIBILITY
from workspace_arranger.models import Arrangement, Rect, ScreenSize
from workspace_arranger.preferences import PreferenceStore


@pytest.fixture
def screen():
    """The default laptop screen used across the arrangement tests."""
    return ScreenSize(1440, 900)


@pytest.fixture
def prefs_file(tmp_path, monkeypatch):
    """Temporary preference file; also exported for the CLI."""
    path = tmp_path / "preferences.json"
    monkeypatch.setenv("WORKSPACE_ARRANGER_PREFS_FILE", str(path))
    PreferenceStore._instance = None
    yield path
    PreferenceStore._instance = None


@pytest.fixture
def store(prefs_file):
    """Fresh preference store backed by ``prefs_file``."""
    return PreferenceStore(prefs_file)


def make_arrangement(app, x, y, width, height, role=Role.CASCADE_PEEK):
    """Arrangement with the given preferred rectangle."""
    return Arrangement(
        app=app,
        rect=Rect(x, y, width, height),
        role=role,
        visibility=ROLE_VISIBILITY[role],
    )
