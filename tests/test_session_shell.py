# tests/test_session_shell.py

from __future__ import annotations

import asyncio

import pytest

from supatodo.core.models import AuthEvent
from supatodo.core.shell import SessionShell, ShellEvent, View, transition

from .fakes import FakeSessionGateway


@pytest.mark.asyncio
async def test_start_with_existing_session_shows_authenticated() -> None:
    gw = FakeSessionGateway(email="alice@example.com")
    shell = SessionShell(gw)

    await shell.start()

    assert shell.view == View.AUTHENTICATED
    assert shell.loading is False
    assert len(gw.handlers) == 1


@pytest.mark.asyncio
async def test_start_without_session_shows_login() -> None:
    shell = SessionShell(FakeSessionGateway(email=None))
    await shell.start()
    assert shell.view == View.LOGIN
    assert shell.loading is False


@pytest.mark.asyncio
async def test_start_probe_failure_falls_back_to_login() -> None:
    gw = FakeSessionGateway(email="alice@example.com")
    gw.fail["get_current_email"] = "jwt expired"
    shell = SessionShell(gw)

    await shell.start()

    assert shell.view == View.LOGIN
    assert shell.loading is False
    assert gw.call_names() == ["get_current_email"]


@pytest.mark.asyncio
async def test_loading_is_true_while_probe_is_pending() -> None:
    gw = FakeSessionGateway(email=None)
    gate = asyncio.Event()
    gw.gates["get_current_email"] = gate
    shell = SessionShell(gw)

    starting = asyncio.create_task(shell.start())
    await asyncio.sleep(0)
    assert shell.loading is True

    gate.set()
    await starting
    assert shell.loading is False


@pytest.mark.asyncio
async def test_session_notifications_drive_view() -> None:
    gw = FakeSessionGateway(email=None)
    shell = SessionShell(gw)
    await shell.start()

    gw.emit(AuthEvent.SIGNED_IN, None)
    assert shell.view == View.LOGIN

    gw.emit(AuthEvent.SIGNED_IN, "bob@example.com")
    assert shell.view == View.AUTHENTICATED

    gw.emit(AuthEvent.TOKEN_REFRESHED, "bob@example.com")
    assert shell.view == View.AUTHENTICATED

    gw.emit(AuthEvent.SIGNED_OUT, None)
    assert shell.view == View.LOGIN


@pytest.mark.asyncio
async def test_stop_unsubscribes_exactly_once() -> None:
    gw = FakeSessionGateway(email=None)
    shell = SessionShell(gw)
    await shell.start()

    shell.stop()
    shell.stop()

    assert gw.subscriptions[0].unsubscribed == 1
    assert gw.handlers == []


@pytest.mark.asyncio
async def test_no_view_changes_after_stop() -> None:
    gw = FakeSessionGateway(email=None)
    shell = SessionShell(gw)
    await shell.start()
    handler = gw.handlers[0]
    shell.stop()

    handler(AuthEvent.SIGNED_IN, "late@example.com")

    assert shell.view == View.LOGIN


@pytest.mark.asyncio
async def test_logout_complete_and_login_callbacks() -> None:
    shell = SessionShell(FakeSessionGateway(email="alice@example.com"))
    await shell.start()

    shell.on_logout_complete()
    assert shell.view == View.LOGIN

    shell.on_login()
    assert shell.view == View.AUTHENTICATED


def test_navigation_only_between_auth_views() -> None:
    shell = SessionShell(FakeSessionGateway())

    shell.show_signup()
    assert shell.view == View.SIGNUP
    shell.show_login()
    assert shell.view == View.LOGIN

    shell.on_login()
    shell.show_signup()
    assert shell.view == View.AUTHENTICATED


def test_listeners_fire_only_on_change() -> None:
    shell = SessionShell(FakeSessionGateway())
    seen: list[tuple[View, View]] = []
    shell.add_listener(lambda old, new: seen.append((old, new)))

    shell.on_logout_complete()
    shell.on_login()
    shell.on_login()

    assert seen == [(View.LOGIN, View.AUTHENTICATED)]


@pytest.mark.parametrize(
    ("view", "event", "expected"),
    [
        (View.LOGIN, ShellEvent.SESSION_FOUND, View.AUTHENTICATED),
        (View.LOGIN, ShellEvent.SESSION_MISSING, View.LOGIN),
        (View.SIGNUP, ShellEvent.SIGNED_IN, View.AUTHENTICATED),
        (View.AUTHENTICATED, ShellEvent.SIGNED_OUT, View.LOGIN),
        (View.AUTHENTICATED, ShellEvent.LOGOUT_COMPLETED, View.LOGIN),
        (View.AUTHENTICATED, ShellEvent.SESSION_PROBE_FAILED, View.LOGIN),
        (View.SIGNUP, ShellEvent.SHOW_SIGNUP, View.SIGNUP),
        (View.AUTHENTICATED, ShellEvent.SHOW_LOGIN, View.AUTHENTICATED),
    ],
)
def test_transition_table(view: View, event: ShellEvent, expected: View) -> None:
    assert transition(view, event) == expected
