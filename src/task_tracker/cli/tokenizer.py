# src/task_tracker/cli/tokenizer.py

"""
Split a command line into arguments.

Rules:
- arguments are separated by runs of spaces/tabs
- "..." is one argument, quotes stripped; the next '"' always closes it
  (no nesting, no backslash escapes)
- an unclosed '"' swallows the rest of the line
- a '"' in the middle of an unquoted argument is an ordinary character
"""

from __future__ import annotations

from collections.abc import Iterable

_SEPARATORS = " \t"


def tokenize(line: str) -> list[str]:
    args: list[str] = []
    pos, n = 0, len(line)

    while True:
        while pos < n and line[pos] in _SEPARATORS:
            pos += 1
        if pos >= n:
            return args

        if line[pos] == '"':
            close = line.find('"', pos + 1)
            if close == -1:
                args.append(line[pos + 1 :])
                return args
            args.append(line[pos + 1 : close])
            pos = close + 1
            continue

        start = pos
        while pos < n and line[pos] not in _SEPARATORS:
            pos += 1
        args.append(line[start:pos])


def quote_args(args: Iterable[str]) -> str:
    """Inverse of tokenize() for arguments without '"': quote the ones that need it."""
    parts = []
    for arg in args:
        if not arg or any(ch in _SEPARATORS for ch in arg):
            parts.append(f'"{arg}"')
        else:
            parts.append(arg)
    return " ".join(parts)
