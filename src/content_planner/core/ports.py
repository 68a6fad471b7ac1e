# src/content_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the store and the editor.

The core depends on Protocols instead of concrete implementations.
This keeps the HTTP client and the console swappable and makes testing easier.
"""

from typing import Any, Protocol

from ..tasks.task_models import Task, TaskDraft


class TaskApi(Protocol):
    """
    Remote Task API.

    Every failure (transport, HTTP status, malformed body) is raised as TaskApiError.
    """

    async def list_tasks(self) -> list[Task]: ...

    async def create_task(self, draft: TaskDraft) -> Task: ...

    async def update_task(self, task_id: str, body: dict[str, Any]) -> Task: ...

    async def delete_task(self, task_id: str) -> None: ...


class Notifier(Protocol):
    """Transient user-visible notifications (toasts)."""

    def success(self, text: str) -> None: ...

    def error(self, text: str) -> None: ...


class InputPrompt(Protocol):
    """
    Explicit input collection.

    ask() returns the entered text, or None when the user cancelled.
    """

    async def ask(self, question: str) -> str | None: ...

    async def confirm(self, question: str) -> bool: ...
