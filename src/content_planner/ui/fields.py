# src/content_planner/ui/fields.py

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from ..tasks.task_models import TaskStatus

EMPTY_PLACEHOLDER = "(not set, use /set to add)"

PLATFORM_OPTIONS: tuple[str, ...] = ("Instagram", "Facebook", "LinkedIn")
STATUS_OPTIONS: tuple[str, ...] = tuple(s.value for s in TaskStatus)


@dataclass(frozen=True, slots=True)
class EditorField:
    name: str
    label: str
    kind: str = "text"  # text | select | date | textarea
    options: tuple[str, ...] = ()


# Order matches the editor dialog: two-column grid first, then the long fields.
EDITOR_FIELDS: tuple[EditorField, ...] = (
    EditorField("title", "Title"),
    EditorField("platform", "Platform", "select", PLATFORM_OPTIONS),
    EditorField("post_url", "Image URL"),
    EditorField("url", "Post URL"),
    EditorField("video_url", "Video URL"),
    EditorField("status", "Status", "select", STATUS_OPTIONS),
    EditorField("content_type", "Content type"),
    EditorField("campaign", "Campaign"),
    EditorField("start", "Start", "date"),
    EditorField("end", "End", "date"),
    EditorField("caption", "Caption", "textarea"),
    EditorField("comments", "Comments", "textarea"),
)

FIELDS_BY_NAME: dict[str, EditorField] = {f.name: f for f in EDITOR_FIELDS}


def format_url_label(url: str) -> str:
    """Short link label: the hostname without a leading `www.`."""
    try:
        host = urlsplit(url if url.startswith("http") else f"https://{url}").hostname
    except ValueError:
        return url
    if not host:
        return url
    return host.removeprefix("www.")


def looks_like_url(value: str) -> bool:
    return "." in value and " " not in value.strip()


def display_value(value: str | None, kind: str = "text") -> str:
    """How a field value is shown in the editor (links get a short label)."""
    if not value:
        return EMPTY_PLACEHOLDER
    if kind == "text" and looks_like_url(value):
        return f"{format_url_label(value)} <{value}>"
    return value
