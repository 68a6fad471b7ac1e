# src/content_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, fetches tasks once, then runs the console
REPL in the main thread. Store calls run on one long-lived asyncio loop, so the
HTTP client's connection pool survives between commands.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, load_initial_tasks, shutdown_state
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    # console stays quiet below WARNING; the file gets everything at DEBUG
    console_level = max(getattr(logging, level_name, logging.INFO), logging.WARNING)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (api=%s)...", settings.app_name, settings.api_base_url)

    with asyncio.Runner() as runner:
        state = create_initial_state(settings=settings)
        try:
            runner.run(load_initial_tasks(state))
            print(runner.run(command_registry.handle(state, "/month")))
            print()
            run_console_loop(state, runner.run)
        except KeyboardInterrupt:
            logger.info("Interrupted.")
        finally:
            runner.run(shutdown_state(state))

    logger.info("Bye.")


if __name__ == "__main__":
    main()
