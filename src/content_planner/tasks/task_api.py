# src/content_planner/tasks/task_api.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .task_models import Task, TaskDraft

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"


def _task_path(task_id: str) -> str:
    return f"{TASKS_PATH}/{quote(str(task_id), safe='')}"


class TaskApiError(RuntimeError):
    """
    Any failed Remote Task API call.

    Transport errors, timeouts, non-2xx responses and malformed bodies all
    collapse into this one type; status_code is set when the server answered.
    """

    def __init__(self, operation: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status_code = status_code


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


class RemoteTaskApi:
    """
    Async client for the Remote Task API (`/api/tasks`).

    No retries and no auth: a failed call raises TaskApiError and it is up to
    the caller (the TaskStore) to decide what to do with it.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: httpx.Timeout | float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout if timeout is not None else make_timeout(5.0, 15.0),
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings) -> RemoteTaskApi:
        return cls(
            settings.api_base_url,
            timeout=make_timeout(
                connect_s=float(settings.http_connect_timeout),
                read_s=float(settings.http_read_timeout),
            ),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> RemoteTaskApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- low-level helpers ----

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("TaskApi: %s %s", method, path)
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            raise TaskApiError(operation, f"HTTP {code}", status_code=code) from e
        except httpx.TimeoutException as e:
            raise TaskApiError(operation, f"timeout ({e.__class__.__name__})") from e
        except httpx.HTTPError as e:
            raise TaskApiError(operation, f"network error ({e.__class__.__name__})") from e
        except httpx.InvalidURL as e:
            raise TaskApiError(operation, f"invalid URL ({e})") from e
        return response

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TaskApiError(operation, "response is not JSON", status_code=response.status_code) from e

    def _task(self, operation: str, response: httpx.Response) -> Task:
        try:
            return Task.from_api(self._json(operation, response))
        except ValueError as e:
            raise TaskApiError(operation, str(e), status_code=response.status_code) from e

    # ---- public API ----

    async def list_tasks(self) -> list[Task]:
        response = await self._request("list", "GET", TASKS_PATH)
        data = self._json("list", response)
        if not isinstance(data, list):
            raise TaskApiError("list", "expected a JSON array", status_code=response.status_code)

        tasks: list[Task] = []
        for item in data:
            try:
                tasks.append(Task.from_api(item))
            except ValueError as e:
                logger.warning("TaskApi: skipping malformed task entry: %s", e)
        return tasks

    async def create_task(self, draft: TaskDraft) -> Task:
        response = await self._request("create", "POST", TASKS_PATH, json=draft.to_api())
        return self._task("create", response)

    async def update_task(self, task_id: str, body: dict[str, Any]) -> Task:
        response = await self._request("update", "PUT", _task_path(task_id), json=body)
        return self._task("update", response)

    async def delete_task(self, task_id: str) -> None:
        await self._request("delete", "DELETE", _task_path(task_id))
