# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from content_planner.cli.bootstrap import create_initial_state
from content_planner.core.state import AppState

from .fakes import FakeTaskApi, RecordingNotifier, ScriptedPrompt, wire


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="Monthly Planner",
        log_level="INFO",
        color=False,
        api_base_url="https://api.test",
        http_connect_timeout=1.0,
        http_read_timeout=1.0,
        data_dir=tmp_path / "data",
    )


@pytest.fixture()
def api() -> FakeTaskApi:
    return FakeTaskApi(
        [
            wire("1", "Launch teaser", "2024-06-03", status="Not Ready", platform="Instagram"),
            wire("2", "Carousel", "2024-06-10", status="Approved"),
        ]
    )


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def prompt() -> ScriptedPrompt:
    return ScriptedPrompt()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    api: FakeTaskApi,
    notifier: RecordingNotifier,
    prompt: ScriptedPrompt,
) -> AppState:
    """AppState wired with deterministic fakes; the month view starts at June 2024."""
    return create_initial_state(
        settings=settings,
        api=api,
        notifier=notifier,
        prompt=prompt,
        today=date(2024, 6, 15),
    )
