# src/task_tracker/tasks/task_codec.py

"""
Read/write the tasks file.

The file is meant to be readable and hand-editable, so the reader is lenient:
- keys may be quoted or bare
- string values may be quoted or bare (up to the next comma / closing brace)
- whitespace and a trailing comma after the last object are ignored

It is NOT a general JSON parser: only a list of flat task objects is accepted.
Anything structurally different is reported as TaskFileCorrupt.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path

from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)

_WS = " \t\r\n"
_DIGITS = re.compile(r"[0-9]+")

_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}
_ENCODE = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"})


class TaskFileCorrupt(ValueError):
    """The tasks file exists but cannot be turned into a valid task list."""


# ---- encoding ----


def _quote(s: str) -> str:
    return '"' + s.translate(_ENCODE) + '"'


def _encode_task(task: Task) -> str:
    return (
        "  {\n"
        f'    "id": {int(task.id)},\n'
        f'    "description": {_quote(task.description)},\n'
        f'    "status": {_quote(task.status.value)}\n'
        "  }"
    )


def encode_tasks(tasks: Iterable[Task]) -> str:
    objects = [_encode_task(t) for t in tasks]
    if not objects:
        return "[]\n"
    return "[\n" + ",\n".join(objects) + "\n]\n"


# ---- decoding ----


def _skip_ws(s: str, pos: int) -> int:
    while pos < len(s) and s[pos] in _WS:
        pos += 1
    return pos


def _read_string(s: str, pos: int) -> tuple[str, int]:
    """Read a quoted string starting at s[pos] == '"'. Returns (value, index after closing quote)."""
    out: list[str] = []
    i = pos + 1
    while i < len(s):
        ch = s[i]
        if ch == '"':
            return "".join(out), i + 1
        if ch == "\\" and i + 1 < len(s):
            nxt = s[i + 1]
            out.append(_ESCAPES.get(nxt, "\\" + nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    raise TaskFileCorrupt(f"unterminated string starting at offset {pos}")


def _split_objects(inner: str) -> list[dict[str, str]]:
    objects: list[dict[str, str]] = []
    pos = _skip_ws(inner, 0)
    while pos < len(inner):
        if inner[pos] != "{":
            raise TaskFileCorrupt(f"expected '{{' at offset {pos}, found {inner[pos]!r}")
        fields, end = _parse_object(inner, pos)
        objects.append(fields)
        pos = _skip_ws(inner, end + 1)
        if pos >= len(inner):
            break
        if inner[pos] != ",":
            raise TaskFileCorrupt(f"expected ',' between tasks at offset {pos}")
        pos = _skip_ws(inner, pos + 1)
    return objects


def _read_key(s: str, pos: int) -> tuple[str, int]:
    if s[pos] == '"':
        return _read_string(s, pos)
    end = pos
    while end < len(s) and s[end] not in _WS and s[end] not in ':,"{}':
        end += 1
    if end == pos:
        raise TaskFileCorrupt(f"expected a field name at offset {pos}, found {s[pos]!r}")
    return s[pos:end], end


def _read_value(s: str, pos: int) -> tuple[str, int]:
    """A quoted string, or bare text up to the next ',' or '}' (quotes in it are literal)."""
    if pos < len(s) and s[pos] == '"':
        return _read_string(s, pos)
    if pos < len(s) and s[pos] == "{":
        raise TaskFileCorrupt(f"nested object at offset {pos}")
    end = pos
    while end < len(s) and s[end] not in ",}":
        end += 1
    return s[pos:end].strip(), end


def _parse_object(s: str, start: int) -> tuple[dict[str, str], int]:
    """Parse the object opened at s[start]. Returns (fields, index of the closing '}')."""
    fields: dict[str, str] = {}
    pos = _skip_ws(s, start + 1)
    while pos < len(s) and s[pos] != "}":
        key, pos = _read_key(s, pos)
        pos = _skip_ws(s, pos)
        if pos >= len(s) or s[pos] != ":":
            raise TaskFileCorrupt(f"expected ':' after field {key!r}")
        value, pos = _read_value(s, _skip_ws(s, pos + 1))
        if key in fields:
            raise TaskFileCorrupt(f"field {key!r} appears twice")
        fields[key] = value

        pos = _skip_ws(s, pos)
        if pos < len(s) and s[pos] == ",":
            pos = _skip_ws(s, pos + 1)
        elif pos < len(s) and s[pos] != "}":
            raise TaskFileCorrupt(f"unexpected {s[pos]!r} after field {key!r}")
    if pos >= len(s):
        raise TaskFileCorrupt(f"unterminated object starting at offset {start}")
    return fields, pos


def _parse_id(raw: str, index: int) -> int:
    raw = raw.strip()
    if not _DIGITS.fullmatch(raw):
        raise TaskFileCorrupt(f"task #{index} has an invalid id: {raw[:20]!r}")
    try:
        task_id = int(raw)
    except ValueError:
        # more digits than int() accepts
        raise TaskFileCorrupt(f"task #{index} has an id that is too long ({len(raw)} digits)") from None
    if task_id <= 0:
        raise TaskFileCorrupt(f"task #{index} has an invalid id: {raw!r}")
    return task_id


def _task_from_fields(fields: dict[str, str], index: int) -> Task:
    for name in ("id", "description", "status"):
        if name not in fields:
            raise TaskFileCorrupt(f"task #{index} is missing field {name!r}")

    task_id = _parse_id(fields["id"], index)

    description = fields["description"]
    if not description.strip():
        raise TaskFileCorrupt(f"task #{index} has an empty description")

    try:
        status = TaskStatus.from_label(fields["status"])
    except ValueError:
        raise TaskFileCorrupt(f"task #{index} has an unknown status: {fields['status']!r}") from None

    return Task(id=task_id, description=description, status=status)


def decode_tasks(text: str) -> list[Task]:
    content = text.strip()
    if not content:
        return []
    if not (content.startswith("[") and content.endswith("]")):
        raise TaskFileCorrupt("expected a list of tasks enclosed in [ ]")

    tasks: list[Task] = []
    seen: set[int] = set()
    for index, fields in enumerate(_split_objects(content[1:-1]), start=1):
        task = _task_from_fields(fields, index)
        if task.id in seen:
            raise TaskFileCorrupt(f"duplicate task id {task.id}")
        seen.add(task.id)
        tasks.append(task)
    return tasks


# ---- files ----


def load_tasks(path: str | Path) -> list[Task]:
    """
    Missing file -> [].
    Undecodable content -> TaskFileCorrupt.
    Any other OSError (permissions, path is a directory, ...) propagates.

    A leading UTF-8 BOM (added by some editors) is ignored.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Tasks file %s does not exist yet.", path)
        return []
    try:
        text = path.read_text("utf-8-sig")
    except UnicodeDecodeError as e:
        raise TaskFileCorrupt(f"file is not valid UTF-8 ({e.reason})") from e
    tasks = decode_tasks(text)
    logger.debug("Loaded %d tasks from %s", len(tasks), path)
    return tasks


def save_tasks(path: str | Path, tasks: Iterable[Task]) -> None:
    """
    Rewrite the whole file: write a sibling .tmp file, then rename it into place.

    The payload is encoded before anything is written, so a UnicodeEncodeError
    leaves both the file and the directory untouched.
    """
    path = Path(path)
    payload = encode_tasks(tasks).encode("utf-8")
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_bytes(payload)
        os.replace(tmp, path)
    except OSError:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise
    logger.debug("Saved tasks to %s (%d bytes)", path, len(payload))
