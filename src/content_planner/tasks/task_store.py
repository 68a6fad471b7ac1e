# src/content_planner/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from ..core.ports import TaskApi
from .task_api import TaskApiError
from .task_models import Task, TaskDraft, patch_to_api

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Client-side mirror of the server's task list.

    The server is the source of truth. Every mutation goes to the API first and
    local state is reconciled from the response; a failed call leaves local state
    unchanged and is reported through the return value (None / False).

    Concurrency:
    - all calls run on one asyncio loop, so list mutations never interleave
    - no dedup, no version check: whichever response lands last wins
    """

    def __init__(self, api: TaskApi) -> None:
        self._api = api
        self._tasks: list[Task] = []

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot of the current ordered sequence."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def tasks_on(self, day: date) -> list[Task]:
        return [t for t in self._tasks if t.occupies(day)]

    # ---- remote operations ----

    async def list(self) -> bool:
        """Replace local state with the server's task list. Stale on failure."""
        try:
            fetched = await self._api.list_tasks()
        except TaskApiError as e:
            logger.warning("Failed to fetch tasks: %s", e)
            return False

        # One entry per id; the last occurrence wins.
        by_id: dict[str, Task] = {}
        for task in fetched:
            by_id.pop(task.id, None)
            by_id[task.id] = task
        if len(by_id) != len(fetched):
            logger.warning("Server returned %d duplicate task id(s)", len(fetched) - len(by_id))

        self._tasks = list(by_id.values())
        logger.info("Fetched %d task(s)", len(self._tasks))
        return True

    async def create(self, draft: TaskDraft) -> Task | None:
        try:
            created = await self._api.create_task(draft)
        except TaskApiError as e:
            logger.warning("Failed to create task title=%r: %s", draft.title, e)
            return None

        idx = self._index_of(created.id)
        if idx is None:
            self._tasks.append(created)
        else:
            logger.warning("Created task id=%s already present locally; replacing", created.id)
            self._tasks[idx] = created
        logger.info("Task created id=%s start=%s", created.id, created.start)
        return created

    async def update(self, task_id: str, patch: Mapping[str, Any] | TaskDraft) -> Task | None:
        """
        Send `patch` for `task_id` and replace the local entry with the server's record.

        `patch` is either a full draft or a mapping of field names to new values.
        """
        body = patch.to_api() if isinstance(patch, TaskDraft) else patch_to_api(patch)
        body.pop("_id", None)

        try:
            updated = await self._api.update_task(task_id, body)
        except TaskApiError as e:
            logger.warning("Failed to update task id=%s: %s", task_id, e)
            return None

        if updated.id != task_id:
            logger.warning(
                "Server answered update of id=%s with id=%s; local list left as is", task_id, updated.id
            )
            return updated

        idx = self._index_of(task_id)
        if idx is None:
            logger.warning("Updated task id=%s is not in the local list; nothing replaced", task_id)
        else:
            self._tasks[idx] = updated
            logger.info("Task updated id=%s fields=%s", task_id, sorted(body))
        return updated

    async def delete(self, task_id: str) -> bool:
        try:
            await self._api.delete_task(task_id)
        except TaskApiError as e:
            logger.warning("Failed to delete task id=%s: %s", task_id, e)
            return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.info("Task deleted id=%s", task_id)
        return True

    # ---- helpers ----

    def _index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None
