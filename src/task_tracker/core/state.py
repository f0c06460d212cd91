# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """Everything a command handler may touch during a session."""

    # Settings object (or a SimpleNamespace in tests).
    settings: Any
    task_store: TaskStore
