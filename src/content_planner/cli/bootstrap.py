# src/content_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (HTTP client, store, editor, console I/O).
"""

from __future__ import annotations

import logging
from datetime import date

from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, ConsolePrompt
from ..core.ports import InputPrompt, Notifier, TaskApi
from ..core.state import AppState
from ..tasks.task_api import RemoteTaskApi
from ..tasks.task_store import TaskStore
from ..ui.editor import TaskEditor

logger = logging.getLogger(__name__)


def create_initial_state(
    *,
    settings=None,
    api: TaskApi | None = None,
    notifier: Notifier | None = None,
    prompt: InputPrompt | None = None,
    today: date | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Every collaborator is injectable so tests can pass fakes.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    if api is None:
        api = RemoteTaskApi.from_settings(settings)
    notifier = notifier or ConsoleNotifier()
    prompt = prompt or ConsolePrompt()

    store = TaskStore(api)
    today = today or date.today()

    return AppState(
        settings=settings,
        api=api,
        store=store,
        editor=TaskEditor(store, notifier, prompt),
        notifier=notifier,
        view_year=today.year,
        view_month=today.month,
    )


async def load_initial_tasks(state: AppState) -> bool:
    """Initial fetch on startup; the app still starts (empty) if it fails."""
    ok = await state.store.list()
    if not ok:
        state.notifier.error("Failed to fetch tasks! Use /refresh to try again.")
    return ok


async def shutdown_state(state: AppState) -> None:
    aclose = getattr(state.api, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:
        logger.debug("HTTP client close failed.", exc_info=True)
