# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - the value is the canonical name written to the tasks file
    - `label` is what users type and see ("in-progress")
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @property
    def label(self) -> str:
        return self.value.lower().replace("_", "-")

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @classmethod
    def from_label(cls, raw: str) -> TaskStatus:
        """Parse either the canonical name or the label, case-insensitively."""
        key = (raw or "").strip().upper().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown task status: {raw!r}") from None


_ICONS = {
    TaskStatus.TODO: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.DONE: "[✓]",
}


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    description: str
    status: TaskStatus = TaskStatus.TODO

    def render(self) -> str:
        return f"{self.status.icon} {self.id}: {self.description} ({self.status.label})"
