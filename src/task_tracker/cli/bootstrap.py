# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- makes sure the tasks file directory exists,
- wires the TaskStore into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test.
    If settings is None, falls back to get_settings().

    Raises OSError when the tasks file exists but cannot be read.
    A corrupt file does not raise; see state.task_store.load_error.
    """
    if settings is None:
        settings = get_settings()

    settings.tasks_file.parent.mkdir(parents=True, exist_ok=True)

    return AppState(
        settings=settings,
        task_store=TaskStore(settings.tasks_file),
    )


def startup_messages(state: AppState) -> list[str]:
    """Problems found while loading, phrased for the user (stderr)."""
    if state.task_store.load_error:
        return [f"Error parsing tasks file. It might be corrupted. {state.task_store.load_error}"]
    return []
