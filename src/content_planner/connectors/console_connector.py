# src/content_planner/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Any

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

# Runs a coroutine to completion on the app's single event loop.
RunOnLoop = Callable[[Coroutine[Any, Any, Any]], Any]

YES_ANSWERS = {"y", "yes"}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _read_line(prompt: str) -> str | None:
    """input() with EOF / Ctrl+C mapped to None."""
    try:
        return input(prompt)
    except (EOFError, KeyboardInterrupt):
        print()
        return None


class ConsoleNotifier:
    """Transient notifications as timestamped console lines."""

    def success(self, text: str) -> None:
        logger.debug("notify success: %s", text)
        _print_ts(f"[OK] {text}")

    def error(self, text: str) -> None:
        logger.debug("notify error: %s", text)
        _print_ts(f"[ERROR] {text}")


class ConsolePrompt:
    """
    Console input collection.

    The console is the only thing on the loop while a command runs, so a
    blocking read here holds up nothing but the command that asked.
    """

    async def ask(self, question: str) -> str | None:
        answer = _read_line(f"{question} (empty to cancel): ")
        if answer is None or not answer.strip():
            return None
        return answer.strip()

    async def confirm(self, question: str) -> bool:
        answer = _read_line(f"{question} [y/N]: ")
        return answer is not None and answer.strip().lower() in YES_ANSWERS


def run_console_loop(state: AppState, run: RunOnLoop) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "Monthly Planner"))
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            print("Commands start with '/'. Use /help to list them.")
            continue

        try:
            response = run(command_registry.handle(state, user_input))
        except KeyboardInterrupt:
            logger.info("Command interrupted: %s", user_input)
            response = "Interrupted."
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response:
            print(response)
            print()

    logger.info("Console connector finished.")
