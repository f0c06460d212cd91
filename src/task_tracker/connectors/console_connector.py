# src/task_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TextIO

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = "> "
WELCOME = "🎉 Welcome to the Interactive Task Tracker! 🎉"


def run_console_loop(
    state: AppState,
    *,
    read_line: Callable[[str], str] = input,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> None:
    """
    Interactive read loop: one command at a time, each one (and its save)
    finished before the next prompt. EOF and Ctrl+C behave like `exit`.
    """
    out = out or sys.stdout
    err = err or sys.stderr

    logger.info("Console started (tasks=%s).", state.task_store.path)
    print(WELCOME, file=out)
    print(command_registry.build_help(), file=out)

    while True:
        try:
            line = read_line(PROMPT).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            print(file=out)
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print(file=out)
            break

        if not line:
            continue

        try:
            result = command_registry.handle_line(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            print("Internal error while handling a command.", file=err)
            continue

        if result is None:
            continue

        for text in result.out:
            print(text, file=out)
        for text in result.err:
            print(text, file=err)
        out.flush()

        if result.exit:
            break

    logger.info("Console finished.")
