# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console loop.
Exit status: 0 on a normal session end, 1 if the tasks file cannot be read.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state, startup_messages
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def console_level_for(name: str) -> int:
    """Map a level name ("debug", "WARNING", ...) to its number; anything else is WARNING."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def main() -> int:
    settings = get_settings()

    console_level = console_level_for(settings.log_level)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except OSError as e:
        logger.debug("Startup failed.", exc_info=True)
        print(f"Error reading tasks file: {e}", file=sys.stderr)
        return 1

    for message in startup_messages(state):
        print(message, file=sys.stderr)

    run_console_loop(state)
    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
