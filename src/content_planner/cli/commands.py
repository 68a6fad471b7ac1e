# src/content_planner/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date

from ..core.state import AppState
from ..tasks.task_models import parse_date
from ..ui.editor import EditorError
from ..ui.month_view import parse_month, render_month

CommandResult = str | None
CommandHandler = Callable[[AppState, list[str]], CommandResult | Awaitable[CommandResult]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /month, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._maxsplit: dict[str, int] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        maxsplit: int = -1,
    ) -> None:
        """`maxsplit` limits argument splitting so the last argument keeps its inner whitespace."""
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._maxsplit[key] = maxsplit
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            self._maxsplit[alias.lower()] = maxsplit

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        args = rest.split(maxsplit=self._maxsplit.get(name, -1))

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%s", name, args)
        try:
            result = handler(state, args)
            if inspect.isawaitable(result):
                result = await result
        except EditorError as e:
            return str(e)
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _color(state: AppState) -> bool:
    return bool(getattr(state.settings, "color", False))


def _render_view(state: AppState) -> str:
    return render_month(
        state.store.tasks,
        state.view_year,
        state.view_month,
        color=_color(state),
        today=date.today(),
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_month(state: AppState, args: list[str]) -> str:
    """
    /month            -> show the current month view
    /month next|prev  -> move one month
    /month today      -> jump to the current month
    /month 2024-06    -> jump to a month
    """
    if args:
        arg = args[0].lower()
        if arg in ("next", "n", "+"):
            state.move_view(1)
        elif arg in ("prev", "p", "-"):
            state.move_view(-1)
        elif arg == "today":
            state.view_today()
        else:
            try:
                state.view_year, state.view_month = parse_month(arg)
            except ValueError as e:
                return f"{e}. Usage: /month [prev|next|today|YYYY-MM]"
    return _render_view(state)


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    if not tasks:
        return "No tasks loaded. Use /refresh to fetch them."
    lines = [f"{len(tasks)} task(s):"]
    for t in tasks:
        lines.append(f"  {t.id:<26} {t.start or '-':<12} {t.status or '-':<22} {t.title}")
    return "\n".join(lines)


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    if not await state.store.list():
        state.notifier.error("Failed to fetch tasks!")
        return "Showing the last loaded tasks."
    return _render_view(state)


async def cmd_add(state: AppState, args: list[str]) -> str | None:
    if not args:
        return "Usage: /add YYYY-MM-DD"
    day = parse_date(args[0])
    if day is None:
        return f"Not a date: {args[0]!r}. Usage: /add YYYY-MM-DD"
    created = await state.editor.create_on(day)
    if created is None:
        return None
    state.view_year, state.view_month = day.year, day.month
    return _render_view(state)


def cmd_open(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /open ID"
    state.editor.open(args[0])
    return state.editor.render()


def cmd_show(state: AppState, args: list[str]) -> str:
    return state.editor.render()


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set FIELD VALUE...   -> edit a draft field (local until /save)
    /set FIELD            -> clear it (status cannot be cleared)
    """
    if not args:
        return "Usage: /set FIELD VALUE..."
    name = args[0].lower()
    state.editor.set_field(name, args[1] if len(args) > 1 else "")
    value = getattr(state.editor.draft, name)
    return f"{name} = {value or '(cleared)'} (unsaved, use /save)"


async def cmd_save(state: AppState, args: list[str]) -> str | None:
    updated = await state.editor.save()
    if updated is None:
        return None
    return _render_view(state)


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if not state.editor.is_open:
        return "Nothing to cancel."
    state.editor.cancel()
    return "Changes discarded."


async def cmd_delete(state: AppState, args: list[str]) -> str | None:
    if not await state.editor.delete():
        return None
    return _render_view(state)


def cmd_status(state: AppState, args: list[str]) -> str:
    editor = state.editor
    open_task = f"{editor.task_id} (unsaved draft)" if editor.is_open else "none"
    return (
        "Status:\n"
        f"  API: {getattr(state.settings, 'api_base_url', '?')}\n"
        f"  Tasks loaded: {len(state.store)}\n"
        f"  Month view: {state.view_year:04d}-{state.view_month:02d}\n"
        f"  Open task: {open_task}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "month", cmd_month, help_text="Month grid: /month [prev|next|today|YYYY-MM].", aliases=["m"]
)
registry.register("list", cmd_list, help_text="List all loaded tasks.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Re-fetch tasks from the server.", aliases=["r"])
registry.register("add", cmd_add, help_text="Create a task on a date: /add YYYY-MM-DD.")
registry.register("open", cmd_open, help_text="Open a task in the editor: /open ID.", aliases=["o"])
registry.register("show", cmd_show, help_text="Show the open task draft.")
registry.register(
    "set", cmd_set, help_text="Edit a draft field: /set FIELD VALUE (no value clears it).", maxsplit=1
)
registry.register("save", cmd_save, help_text="Save the open draft to the server.")
registry.register("cancel", cmd_cancel, help_text="Discard the open draft.")
registry.register("delete", cmd_delete, help_text="Delete the open task (asks first).")
registry.register("status", cmd_status, help_text="Show API/settings status.")
