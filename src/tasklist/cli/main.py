# src/tasklist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the saved task list), then
runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    file_level = getattr(logging, level_name, logging.INFO)
    # The console is the UI; only problems should interleave with it.
    setup_logging(
        log_dir=settings.data_dir,
        console_level=max(file_level, logging.WARNING),
        file_level=file_level,
    )

    logger.info("Starting %s...", settings.app_name)
    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        # Every mutation is saved as it happens; nothing left to flush.
        logger.info("Bye. tasks=%d", len(state.task_store))


if __name__ == "__main__":
    main()
