# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from supatodo.cli.bootstrap import build_state
from supatodo.core.state import AppState
from supatodo.core.todos import TaskListController

from .fakes import FakeNotifier, FakeSessionGateway, FakeTaskStore

FALLBACK_OWNER = "temp1@example.com"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="supatodo-test",
        log_level="DEBUG",
        supabase_url="https://example.supabase.co",
        supabase_key="anon-key",
        tasks_table="tasks",
        fallback_owner_email=FALLBACK_OWNER,
        data_dir=tmp_path,
        log_file=tmp_path / "supatodo.log",
    )


@pytest.fixture()
def session() -> FakeSessionGateway:
    return FakeSessionGateway(email="alice@example.com")


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def logouts() -> list[str]:
    return []


@pytest.fixture()
def controller(session: FakeSessionGateway, store: FakeTaskStore, logouts: list[str]) -> TaskListController:
    return TaskListController(
        session=session,
        store=store,
        fallback_owner_email=FALLBACK_OWNER,
        on_logout=lambda: logouts.append("logout"),
    )


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    session: FakeSessionGateway,
    store: FakeTaskStore,
    notifier: FakeNotifier,
) -> AppState:
    """AppState wired with deterministic fakes."""
    return build_state(settings=settings, session=session, store=store, notifier=notifier)
