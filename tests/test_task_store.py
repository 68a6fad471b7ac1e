# tests/test_task_store.py

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from content_planner.tasks.task_api import TaskApiError
from content_planner.tasks.task_models import Task, TaskDraft, TaskStatus
from content_planner.tasks.task_store import TaskStore

from .fakes import FakeTaskApi, wire


class EchoCreateApi:
    """Returns a fixed server record from create, like the real API does for a new post."""

    def __init__(self, record: dict[str, Any]) -> None:
        self.record = record
        self.sent: list[dict[str, Any]] = []

    async def create_task(self, draft: TaskDraft) -> Task:
        self.sent.append(draft.to_api())
        return Task.from_api(self.record)


async def _loaded_store(api: FakeTaskApi) -> TaskStore:
    store = TaskStore(api)
    assert await store.list() is True
    return store


@pytest.mark.asyncio
async def test_list_replaces_state_and_is_idempotent(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    first = store.tasks
    assert [t.id for t in first] == ["1", "2"]

    assert await store.list() is True
    assert store.tasks == first

    del api.records["1"]
    assert await store.list() is True
    assert [t.id for t in store.tasks] == ["2"]


@pytest.mark.asyncio
async def test_list_failure_keeps_stale_state(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    before = store.tasks

    api.records["3"] = wire("3", "New on server", "2024-06-20")
    api.fail.add("list")

    assert await store.list() is False
    assert store.tasks == before


@pytest.mark.asyncio
async def test_list_keeps_one_entry_per_id() -> None:
    class DuplicatingApi(FakeTaskApi):
        async def list_tasks(self) -> list[Task]:
            return [
                Task.from_api(wire("1", "old")),
                Task.from_api(wire("2", "other")),
                Task.from_api(wire("1", "new")),
            ]

    store = TaskStore(DuplicatingApi())
    assert await store.list() is True
    assert [(t.id, t.title) for t in store.tasks] == [("2", "other"), ("1", "new")]


@pytest.mark.asyncio
async def test_create_on_empty_store_appends_server_record() -> None:
    api = EchoCreateApi({"id": "42", "title": "Post A", "start": "2024-06-01"})
    store = TaskStore(api)

    created = await store.create(TaskDraft(title="Post A", start="2024-06-01"))

    assert created == Task(id="42", title="Post A", start="2024-06-01", status=None)
    assert store.tasks == (created,)
    assert "_id" not in api.sent[0]


@pytest.mark.asyncio
async def test_create_preserves_prior_order(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    before = store.tasks

    created = await store.create(TaskDraft(title="Reel", start="2024-06-12"))

    assert created is not None
    assert store.tasks[:-1] == before
    assert store.tasks[-1] == created
    assert [t.id for t in store.tasks].count(created.id) == 1
    assert created.status == TaskStatus.NOT_READY


@pytest.mark.asyncio
async def test_create_failure_leaves_state_unchanged(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    before = store.tasks
    api.fail.add("create")

    assert await store.create(TaskDraft(title="Nope")) is None
    assert store.tasks == before


@pytest.mark.asyncio
async def test_duplicate_create_yields_two_records(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)

    a = await store.create(TaskDraft(title="Double click"))
    b = await store.create(TaskDraft(title="Double click"))

    assert a is not None and b is not None
    assert a.id != b.id
    assert len(store) == 4


@pytest.mark.asyncio
async def test_create_returning_existing_id_replaces_in_place(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    store._api = EchoCreateApi(wire("1", "Launch teaser (server copy)", "2024-06-04"))
    second = store.get("2")

    created = await store.create(TaskDraft(title="Launch teaser"))

    assert created is not None
    assert [t.id for t in store.tasks] == ["1", "2"]
    assert store.tasks[0] == created
    assert store.tasks[0].title == "Launch teaser (server copy)"
    assert store.tasks[1] == second


class OtherIdUpdateApi:
    """Answers every update with the record of a different task."""

    def __init__(self, record: dict[str, Any]) -> None:
        self.record = record

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> Task:
        return Task.from_api(self.record)


@pytest.mark.asyncio
async def test_update_answered_with_other_id_keeps_one_entry_per_id(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    before = store.tasks
    store._api = OtherIdUpdateApi(wire("2", "Carousel (edited)"))

    updated = await store.update("1", {"title": "x"})

    assert updated is not None and updated.id == "2"
    assert [t.id for t in store.tasks] == ["1", "2"]
    assert store.tasks == before


@pytest.mark.asyncio
async def test_update_status_scenario() -> None:
    api = FakeTaskApi([wire("1", "Post", status="Not Ready")])
    store = await _loaded_store(api)

    updated = await store.update("1", {"status": TaskStatus.APPROVED})

    assert updated is not None
    assert store.tasks == (updated,)
    assert store.tasks[0].status == "Approved"
    assert api.calls[-1] == ("update", "1", {"status": "Approved"})


@pytest.mark.asyncio
async def test_update_replaces_only_matching_entry(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    other = store.get("2")

    updated = await store.update("1", {"title": "Teaser v2", "video_url": "youtu.be/x"})

    assert updated is not None
    assert store.get("1") == updated
    assert updated.title == "Teaser v2"
    assert updated.video_url == "youtu.be/x"
    assert store.get("2") == other
    assert api.calls[-1] == ("update", "1", {"title": "Teaser v2", "videourl": "youtu.be/x"})


@pytest.mark.asyncio
async def test_update_with_full_draft_sends_record_without_id(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    draft = store.get("1").draft()
    draft.comments = "Needs a better hook"

    updated = await store.update("1", draft)

    assert updated is not None and updated.comments == "Needs a better hook"
    body = api.calls[-1][2]
    assert "_id" not in body
    assert body["Comments"] == "Needs a better hook"
    assert body["platform"] == "Instagram"


@pytest.mark.asyncio
async def test_update_without_local_match_changes_nothing(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    before = store.tasks
    api.records["9"] = wire("9", "Created elsewhere")

    updated = await store.update("9", {"title": "Renamed"})

    assert updated is not None
    assert store.tasks == before


@pytest.mark.asyncio
async def test_update_failure_leaves_state_unchanged(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)
    before = store.tasks
    api.fail.add("update")

    assert await store.update("1", {"status": "Correction"}) is None
    assert store.tasks == before


@pytest.mark.asyncio
async def test_update_rejects_unknown_field_before_calling_server(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)

    with pytest.raises(ValueError):
        await store.update("1", {"colour": "red"})
    assert api.call_names() == ["list"]


@pytest.mark.asyncio
async def test_delete_removes_entry(api: FakeTaskApi) -> None:
    store = await _loaded_store(api)

    assert await store.delete("1") is True
    assert store.get("1") is None
    assert [t.id for t in store.tasks] == ["2"]


@pytest.mark.asyncio
async def test_failed_delete_leaves_sequence_unchanged() -> None:
    api = FakeTaskApi([wire("42", "Post A", "2024-06-01")])
    store = await _loaded_store(api)
    before = store.tasks
    api.fail.add("delete")

    assert await store.delete("42") is False
    assert store.tasks == before


@pytest.mark.asyncio
async def test_store_does_not_swallow_unexpected_errors() -> None:
    class BrokenApi(FakeTaskApi):
        async def list_tasks(self) -> list[Task]:
            raise KeyError("bug")

    store = TaskStore(BrokenApi())
    with pytest.raises(KeyError):
        await store.list()


def test_tasks_on_uses_exclusive_end(api: FakeTaskApi) -> None:
    store = TaskStore(api)
    store._tasks = [
        Task.from_api(wire("a", "Campaign week", "2024-06-03", end="2024-06-06")),
        Task.from_api(wire("b", "Single", "2024-06-05")),
    ]

    assert [t.id for t in store.tasks_on(date(2024, 6, 5))] == ["a", "b"]
    assert store.tasks_on(date(2024, 6, 6)) == []


def test_task_api_error_carries_operation_and_status() -> None:
    err = TaskApiError("delete", "HTTP 404", status_code=404)
    assert err.operation == "delete"
    assert err.status_code == 404
    assert "delete failed" in str(err)
