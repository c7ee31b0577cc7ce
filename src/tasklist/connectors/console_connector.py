# src/tasklist/connectors/console_connector.py

from __future__ import annotations

import logging

from ..cli.commands import registry as command_registry
from ..cli.commands import render_list
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit", "/q")

# After these the refreshed list is printed.
LIST_CHANGING = {"/add", "/a", "/done", "/toggle", "/x", "/del", "/delete", "/rm", "/commit"}


def _prompt(state: AppState) -> str:
    if state.edit.active:
        return f"tasks (editing #{state.edit.active_edit_id})> "
    return f"tasks [{state.task_filter.value}]> "


def handle_line(state: AppState, line: str) -> str | None:
    """
    Turn one input line into a reply.

    Plain text is shorthand for /add. Returns None for blank input.
    """
    line = line.strip()
    if not line:
        return None

    if not line.startswith("/"):
        line = f"/add {line}"

    def emit(text: str) -> None:
        print(text, flush=True)

    try:
        reply = command_registry.handle(state, line, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    if reply is not None and line.split()[0].lower() in LIST_CHANGING:
        reply = f"{reply}\n{render_list(state)}"
    return reply


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.task_store))
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "tasklist"))

    print(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    print(render_list(state))

    while True:
        try:
            user_input = input(_prompt(state))
        except EOFError:
            logger.info("Console EOF received, exiting.")
            print()
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.strip().lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            print(reply)

    logger.info("Console connector finished.")
