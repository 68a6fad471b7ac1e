# src/content_planner/ui/month_view.py

"""
Month grid rendering for the terminal.

The grid shows day numbers with a per-day task counter colored by the first
task's status; an agenda below lists every task placed in the month.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from ..tasks.task_models import Task, status_color

ANSI_RESET = "\033[0m"
ANSI_COLORS: dict[str, str] = {
    "orange": "\033[38;5;208m",
    "blue": "\033[34m",
    "red": "\033[31m",
    "green": "\033[32m",
    "gray": "\033[90m",
}
ANSI_UNDERLINE = "\033[4m"

CELL_WIDTH = 6
TITLE_MAX = 48


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    id: str
    title: str
    start: date
    end: date | None
    color: str
    status: str | None

    def covers(self, day: date) -> bool:
        # end is exclusive, as for all-day calendar events
        if self.end is None or self.end <= self.start:
            return day == self.start
        return self.start <= day < self.end


def to_calendar_events(tasks: Iterable[Task]) -> list[CalendarEvent]:
    events: list[CalendarEvent] = []
    for t in tasks:
        start = t.start_date
        if start is None:
            continue
        events.append(
            CalendarEvent(
                id=t.id,
                title=t.title,
                start=start,
                end=t.end_date,
                color=status_color(t.status),
                status=t.status,
            )
        )
    return events


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1


def parse_month(raw: str) -> tuple[int, int]:
    """Parse `YYYY-MM` into (year, month)."""
    try:
        y_s, m_s = raw.strip().split("-", 1)
        year, month = int(y_s), int(m_s)
    except ValueError:
        raise ValueError(f"Expected YYYY-MM, got {raw!r}") from None
    if not 1 <= month <= 12 or year < 1:
        raise ValueError(f"Expected YYYY-MM, got {raw!r}")
    return year, month


def _paint(text: str, color: str | None, enabled: bool) -> str:
    if not enabled or not color:
        return text
    return f"{ANSI_COLORS.get(color, '')}{text}{ANSI_RESET}"


def _truncate(text: str, limit: int = TITLE_MAX) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


def events_by_day(events: Iterable[CalendarEvent], year: int, month: int) -> dict[date, list[CalendarEvent]]:
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    out: dict[date, list[CalendarEvent]] = {}
    for ev in events:
        for offset in range(days_in_month):
            day = first + timedelta(days=offset)
            if ev.covers(day):
                out.setdefault(day, []).append(ev)
    return out


def render_month(
    tasks: Iterable[Task],
    year: int,
    month: int,
    *,
    color: bool = True,
    today: date | None = None,
) -> str:
    by_day = events_by_day(to_calendar_events(tasks), year, month)

    title = f"{calendar.month_name[month]} {year}"
    width = CELL_WIDTH * 7
    lines = [title.center(width).rstrip(), ""]
    lines.append("".join(name[:2].rjust(CELL_WIDTH) for name in calendar.day_abbr))

    for week in calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(year, month):
        cells: list[str] = []
        for day in week:
            if day.month != month:
                cells.append(" " * CELL_WIDTH)
                continue
            day_events = by_day.get(day, [])
            counter = f"+{len(day_events)}" if day_events else ""
            is_today = day == today
            mark = "*" if is_today and not color else " "
            cell = f"{day.day:>2}{mark}{counter:<2}".rjust(CELL_WIDTH)
            if is_today and color:
                cell = f"{ANSI_UNDERLINE}{cell}{ANSI_RESET}"
            if day_events:
                cell = _paint(cell, day_events[0].color, color)
            cells.append(cell)
        lines.append("".join(cells))

    lines.append("")
    if not by_day:
        lines.append("No tasks this month. Use /add YYYY-MM-DD to plan one.")
        return "\n".join(lines)

    for day in sorted(by_day):
        lines.append(f"{day:%a %d}")
        for ev in by_day[day]:
            status = ev.status or "no status"
            marker = _paint(f"[{status}]", ev.color, color)
            lines.append(f"   {marker} {_truncate(ev.title) or '(untitled)'}  (id {ev.id})")
    return "\n".join(lines)
