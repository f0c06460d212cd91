# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from .task_codec import TaskFileCorrupt, load_tasks, save_tasks
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with ID {task_id} not found.")
        self.task_id = task_id


class TaskSaveError(RuntimeError):
    """Saving failed; the in-memory change has already been applied."""


@dataclass(frozen=True, slots=True)
class TaskListing:
    tasks: list[Task]
    status: TaskStatus | None = None
    warning: str | None = None


class TaskStore:
    """
    In-memory task list backed by a single tasks file.

    - the list keeps insertion order
    - ids are derived from the current maximum id (not a persisted counter)
    - every change that actually modifies the list rewrites the file
    - reads never touch the file

    A corrupt file is not fatal: the store starts empty and `load_error`
    carries the reason, so the caller can tell the user. The next save
    overwrites the file.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        self._tasks: list[Task] = []
        self.load_error: str | None = None
        self.load()
        logger.info("TaskStore ready path=%s total=%s", self._path, len(self._tasks))

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """(Re)read the file. OSError other than a missing file propagates."""
        try:
            self._tasks = load_tasks(self._path)
            self.load_error = None
        except TaskFileCorrupt as e:
            logger.info("Tasks file %s is corrupt, starting empty: %s", self._path, e)
            self._tasks = []
            self.load_error = str(e)

    # ---- low-level helpers ----

    def _index_of(self, task_id: int) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    def _next_id(self) -> int:
        return max((t.id for t in self._tasks), default=0) + 1

    @staticmethod
    def _check_description(description: str) -> None:
        if not description or not description.strip():
            raise ValueError("Task description cannot be empty.")
        try:
            description.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("Task description contains characters that cannot be saved.") from None

    def _save(self) -> None:
        try:
            save_tasks(self._path, self._tasks)
        except (OSError, UnicodeError) as e:
            logger.debug("Failed to save tasks to %s", self._path, exc_info=True)
            raise TaskSaveError(f"Could not save tasks to file. {e}") from e

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get_task(self, task_id: int) -> Task:
        return self._tasks[self._index_of(task_id)]

    def add_task(self, description: str) -> int:
        self._check_description(description)

        task = Task(id=self._next_id(), description=description, status=TaskStatus.TODO)
        self._tasks.append(task)
        logger.debug("Task added id=%s", task.id)
        self._save()
        return task.id

    def list_tasks(self, status: TaskStatus | str | None = None) -> TaskListing:
        """
        Snapshot of the tasks in insertion order.

        `status` may be a TaskStatus or a raw label typed by the user
        ("todo", "in-progress", "done"). An unknown label does not fail:
        all tasks are returned and `warning` explains why.
        """
        warning = None
        if isinstance(status, str) and not isinstance(status, TaskStatus):
            try:
                status = TaskStatus.from_label(status)
            except ValueError:
                warning = f"Invalid status filter: {status}. Showing all tasks."
                status = None

        tasks = [t for t in self._tasks if status is None or t.status == status]
        return TaskListing(tasks=tasks, status=status, warning=warning)

    def update_task(self, task_id: int, description: str) -> None:
        self._check_description(description)

        i = self._index_of(task_id)
        if self._tasks[i].description == description:
            return
        self._tasks[i] = replace(self._tasks[i], description=description)
        logger.debug("Task updated id=%s", task_id)
        self._save()

    def set_task_status(self, task_id: int, status: TaskStatus) -> None:
        i = self._index_of(task_id)
        if self._tasks[i].status == status:
            return
        self._tasks[i] = replace(self._tasks[i], status=status)
        logger.debug("Task status id=%s status=%s", task_id, status.value)
        self._save()

    def delete_task(self, task_id: int) -> None:
        del self._tasks[self._index_of(task_id)]
        logger.debug("Task deleted id=%s", task_id)
        self._save()
