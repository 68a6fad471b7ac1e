# src/content_planner/ui/editor.py

"""
Task editor: the state behind the "click a date" / "click an event" dialogs.

Field edits stay in a local draft until save(); nothing is persisted per field.
The store reports failures through return values, the editor turns them into
notifications.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from ..core.ports import InputPrompt, Notifier
from ..tasks.task_models import Task, TaskDraft, TaskStatus, parse_date
from ..tasks.task_store import TaskStore
from .fields import EDITOR_FIELDS, FIELDS_BY_NAME, display_value

logger = logging.getLogger(__name__)

TITLE_QUESTION = "Write the task title"
DELETE_QUESTION = "Are you sure you want to delete this task?"


class EditorError(ValueError):
    """Local misuse of the editor (nothing open, bad field or value)."""


class TaskEditor:
    def __init__(self, store: TaskStore, notifier: Notifier, prompt: InputPrompt) -> None:
        self.store = store
        self.notifier = notifier
        self.prompt = prompt
        self.task_id: str | None = None
        self.draft: TaskDraft | None = None

    @property
    def is_open(self) -> bool:
        return self.draft is not None

    def _require_open(self) -> tuple[str, TaskDraft]:
        if self.task_id is None or self.draft is None:
            raise EditorError("No task is open. Use /open ID first.")
        return self.task_id, self.draft

    # ---- date click ----

    async def create_on(self, day: date) -> Task | None:
        title = await self.prompt.ask(TITLE_QUESTION)
        if title is None or not title.strip():
            logger.debug("Task creation on %s cancelled", day)
            return None

        draft = TaskDraft(title=title.strip(), start=day.isoformat(), status=TaskStatus.NOT_READY)
        created = await self.store.create(draft)
        if created is None:
            self.notifier.error("Failed to create task!")
            return None
        self.notifier.success("Task created!")
        return created

    # ---- event click ----

    def open(self, task_id: str) -> TaskDraft:
        task = self.store.get(task_id)
        if task is None:
            raise EditorError(f"No task with id {task_id}.")
        self.task_id = task.id
        self.draft = task.draft()
        return self.draft

    def close(self) -> None:
        self.task_id = None
        self.draft = None

    def cancel(self) -> None:
        # An in-flight save keeps running; its result still lands in the store.
        self.close()

    def set_field(self, name: str, value: str) -> TaskDraft:
        _, draft = self._require_open()
        field = FIELDS_BY_NAME.get(name)
        if field is None:
            known = ", ".join(f.name for f in EDITOR_FIELDS)
            raise EditorError(f"Unknown field {name!r}. Fields: {known}")

        # An empty value is sent as "" so the server clears the field.
        new_value: str = value.strip()

        if field.name == "status":
            if not new_value:
                raise EditorError(f"Status cannot be cleared. Use one of: {', '.join(field.options)}")
            status = TaskStatus.parse(new_value)
            if status is None:
                raise EditorError(f"Unknown status {new_value!r}. Use one of: {', '.join(field.options)}")
            new_value = status
        elif field.kind == "date" and new_value:
            parsed = parse_date(new_value)
            if parsed is None:
                raise EditorError(f"{field.label} must be a date (YYYY-MM-DD).")
            new_value = parsed.isoformat()

        self.draft = replace(draft, **{field.name: new_value})
        return self.draft

    async def save(self) -> Task | None:
        task_id, draft = self._require_open()
        updated = await self.store.update(task_id, draft)
        if updated is None:
            self.notifier.error("Failed to update task!")
            return None
        # Only close the draft this save was made from.
        if self.task_id == task_id and self.draft is draft:
            self.close()
        self.notifier.success("Task updated successfully!")
        return updated

    async def delete(self) -> bool:
        task_id, _ = self._require_open()
        if not await self.prompt.confirm(DELETE_QUESTION):
            return False

        if not await self.store.delete(task_id):
            self.notifier.error("Failed to delete task!")
            return False
        if self.task_id == task_id:
            self.close()
        self.notifier.success("Task deleted successfully!")
        return True

    # ---- rendering ----

    def render(self) -> str:
        task_id, draft = self._require_open()
        lines = [f"{draft.title or '(untitled)'}  (id {task_id})", ""]
        for field in EDITOR_FIELDS:
            value = getattr(draft, field.name)
            lines.append(f"  {field.label:<13} {display_value(value, field.kind)}")
            if field.options:
                lines.append(f"  {'':<13} options: {' | '.join(field.options)}")
        lines.append("")
        lines.append("Edit with /set FIELD VALUE, then /save, /cancel or /delete.")
        return "\n".join(lines)
