# src/content_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..tasks.task_store import TaskStore
from ..ui.editor import TaskEditor
from ..ui.month_view import shift_month
from .ports import Notifier, TaskApi


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    api: TaskApi
    store: TaskStore
    editor: TaskEditor
    notifier: Notifier

    view_year: int
    view_month: int

    def move_view(self, delta: int) -> None:
        self.view_year, self.view_month = shift_month(self.view_year, self.view_month, delta)

    def view_today(self, today: date | None = None) -> None:
        today = today or date.today()
        self.view_year, self.view_month = today.year, today.month
