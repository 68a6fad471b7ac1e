# src/content_planner/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Approval lifecycle of a planned post.

    Values are the exact strings the Remote Task API stores.
    """

    NOT_READY = "Not Ready"
    WAITING_FOR_APPROVAL = "Waiting for Approval"
    CORRECTION = "Correction"
    APPROVED = "Approved"

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus | None:
        """Case-insensitive lookup; None for unknown values."""
        if not raw:
            return None
        needle = raw.strip().lower()
        for status in cls:
            if status.value.lower() == needle:
                return status
        return None


STATUS_COLORS: dict[str, str] = {
    TaskStatus.NOT_READY: "orange",
    TaskStatus.WAITING_FOR_APPROVAL: "blue",
    TaskStatus.CORRECTION: "red",
    TaskStatus.APPROVED: "green",
}

UNKNOWN_STATUS_COLOR = "gray"


def status_color(status: str | None) -> str:
    if not status:
        return UNKNOWN_STATUS_COLOR
    return STATUS_COLORS.get(status, UNKNOWN_STATUS_COLOR)


# Python field name -> wire key used by the Remote Task API.
FIELD_TO_WIRE: dict[str, str] = {
    "title": "title",
    "start": "start",
    "end": "end",
    "status": "status",
    "platform": "platform",
    "content_type": "contentType",
    "campaign": "campaign",
    "caption": "caption",
    "post_url": "postUrl",
    "url": "url",
    "video_url": "videourl",
    "comments": "Comments",
}

WIRE_TO_FIELD: dict[str, str] = {wire: name for name, wire in FIELD_TO_WIRE.items()}
# Older records use a lowercase key.
WIRE_TO_FIELD.setdefault("comments", "comments")

ID_KEYS = ("_id", "id")


def parse_date(value: str | None) -> date | None:
    """Date part of `YYYY-MM-DD` or an ISO datetime (`YYYY-MM-DDTHH:MM:SS...`)."""
    if not value:
        return None
    raw = value.strip().split("T")[0]
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        return None


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def field_to_wire(name: str) -> str:
    """Map a Python field name (or an already-wire key) to the wire key."""
    if name in FIELD_TO_WIRE:
        return FIELD_TO_WIRE[name]
    if name in WIRE_TO_FIELD:
        return FIELD_TO_WIRE[WIRE_TO_FIELD[name]]
    raise ValueError(f"Unknown task field: {name}")


def patch_to_api(patch: Mapping[str, Any]) -> dict[str, Any]:
    """
    Translate a patch keyed by Python field names (or wire keys) into a wire body.

    Id keys are dropped: the id travels in the URL and is immutable.
    """
    body: dict[str, Any] = {}
    for key, value in patch.items():
        if key in ID_KEYS:
            continue
        body[field_to_wire(key)] = str(value) if isinstance(value, StrEnum) else value
    return body


@dataclass(slots=True, kw_only=True)
class TaskDraft:
    """A task as the user edits it; no server id yet (or id kept aside)."""

    title: str = ""
    start: str | None = None
    end: str | None = None
    status: str | None = TaskStatus.NOT_READY

    platform: str | None = None
    content_type: str | None = None
    campaign: str | None = None
    caption: str | None = None
    post_url: str | None = None
    url: str | None = None
    video_url: str | None = None
    comments: str | None = None

    # Server fields this client does not model; sent back untouched.
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def start_date(self) -> date | None:
        return parse_date(self.start)

    @property
    def end_date(self) -> date | None:
        return parse_date(self.end)

    def occupies(self, day: date) -> bool:
        """
        True if the task covers `day` on the calendar.

        `end` is exclusive, as for all-day calendar events; a missing or
        non-later end means a single-day task.
        """
        start = self.start_date
        if start is None:
            return False
        end = self.end_date
        if end is None or end <= start:
            return day == start
        return start <= day < end

    def to_api(self) -> dict[str, Any]:
        body: dict[str, Any] = dict(self.extra)
        for name, wire in FIELD_TO_WIRE.items():
            value = getattr(self, name)
            if value is None:
                continue
            body[wire] = str(value) if isinstance(value, StrEnum) else value
        return body

    @staticmethod
    def _fields_from_api(payload: Mapping[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {name: None for name in FIELD_TO_WIRE}
        extra: dict[str, Any] = {}
        for key, value in payload.items():
            if key in ID_KEYS:
                continue
            name = WIRE_TO_FIELD.get(key)
            if name is None:
                extra[key] = value
                continue
            # "Comments" wins over the legacy lowercase key.
            if name == "comments" and key == "comments" and "Comments" in payload:
                continue
            values[name] = _str_or_none(value)

        values["title"] = values["title"] or ""
        status = values["status"]
        if status is not None:
            # Unknown statuses are kept verbatim (rendered gray).
            values["status"] = TaskStatus.parse(status) or status
        values["extra"] = extra
        return values


@dataclass(slots=True, kw_only=True)
class Task(TaskDraft):
    """A task as stored by the Remote Task API."""

    id: str

    @classmethod
    def from_api(cls, payload: Any) -> Task:
        if not isinstance(payload, Mapping):
            raise ValueError(f"Task payload must be an object, got {type(payload).__name__}")

        raw_id = next((payload[k] for k in ID_KEYS if payload.get(k) not in (None, "")), None)
        if raw_id is None:
            raise ValueError("Task payload has no id")

        return cls(id=str(raw_id), **TaskDraft._fields_from_api(payload))

    def to_api(self) -> dict[str, Any]:
        body = TaskDraft.to_api(self)
        body["_id"] = self.id
        return body

    def draft(self) -> TaskDraft:
        """Editable copy without the id."""
        return TaskDraft(
            **{name: getattr(self, name) for name in FIELD_TO_WIRE},
            extra=dict(self.extra),
        )
