# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="WARNING",
        log_dir=None,
        tasks_file=tmp_path / "tasks.json",
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState with a real TaskStore on a per-test tasks file."""
    return AppState(settings=settings, task_store=TaskStore(settings.tasks_file))
