# src/supatodo/core/shell.py

from __future__ import annotations

"""
Session shell.

Decides which of three mutually exclusive views is visible and keeps that
decision in sync with the auth provider:
- probes the current session once on start,
- listens to session-change notifications until stopped,
- accepts explicit login / logout-complete / navigation events from the views.
"""

import logging
from collections.abc import Callable
from enum import Enum

from .errors import GatewayError
from .models import AuthEvent
from .ports import SessionGateway, Subscription

logger = logging.getLogger(__name__)


class View(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    AUTHENTICATED = "authenticated"


class ShellEvent(str, Enum):
    SESSION_FOUND = "session_found"
    SESSION_MISSING = "session_missing"
    SESSION_PROBE_FAILED = "session_probe_failed"
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGOUT_COMPLETED = "logout_completed"
    SHOW_SIGNUP = "show_signup"
    SHOW_LOGIN = "show_login"


ViewListener = Callable[[View, View], None]


def transition(view: View, event: ShellEvent) -> View:
    """Next view for `event`; the only place the view ever changes."""
    if event in (ShellEvent.SESSION_FOUND, ShellEvent.SIGNED_IN, ShellEvent.LOGIN_SUCCEEDED):
        return View.AUTHENTICATED

    if event in (
            ShellEvent.SESSION_MISSING,
            ShellEvent.SESSION_PROBE_FAILED,
            ShellEvent.SIGNED_OUT,
            ShellEvent.LOGOUT_COMPLETED,
    ):
        return View.LOGIN

    # Navigation links only exist on the two auth views.
    if event == ShellEvent.SHOW_SIGNUP and view == View.LOGIN:
        return View.SIGNUP
    if event == ShellEvent.SHOW_LOGIN and view == View.SIGNUP:
        return View.LOGIN

    return view


class SessionShell:
    def __init__(self, session: SessionGateway) -> None:
        self._session = session
        self.view = View.LOGIN
        self.loading = False
        self._subscription: Subscription | None = None
        self._stopped = False
        self._listeners: list[ViewListener] = []

    def add_listener(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: ShellEvent) -> View:
        old = self.view
        new = transition(old, event)
        if new != old:
            self.view = new
            logger.info("View %s -> %s (%s)", old.value, new.value, event.value)
            for listener in list(self._listeners):
                try:
                    listener(old, new)
                except Exception:
                    logger.exception("View listener failed.")
        return self.view

    async def start(self) -> None:
        """Subscribe to session changes, then probe for an existing session."""
        if self._subscription is None and not self._stopped:
            self._subscription = self._session.on_session_change(self._on_session_change)

        self.loading = True
        try:
            email = await self._session.get_current_email()
        except GatewayError as e:
            logger.error("Error fetching session: %s", e.message)
            self.dispatch(ShellEvent.SESSION_PROBE_FAILED)
        except Exception:
            logger.exception("Error checking user login status.")
            self.dispatch(ShellEvent.SESSION_PROBE_FAILED)
        else:
            self.dispatch(ShellEvent.SESSION_FOUND if email else ShellEvent.SESSION_MISSING)
        finally:
            self.loading = False

    def stop(self) -> None:
        """Drop the session subscription. Safe to call more than once."""
        if self._stopped:
            return
        self._stopped = True
        sub, self._subscription = self._subscription, None
        if sub is not None:
            try:
                sub.unsubscribe()
            except Exception:
                logger.exception("Failed to unsubscribe from session changes.")

    def _on_session_change(self, event: AuthEvent, session_email: str | None) -> None:
        if self._stopped:
            return
        if event == AuthEvent.SIGNED_IN and session_email:
            self.dispatch(ShellEvent.SIGNED_IN)
        elif event == AuthEvent.SIGNED_OUT:
            self.dispatch(ShellEvent.SIGNED_OUT)
        else:
            logger.debug("Ignoring session event %s", event)

    # ---- callbacks handed to the views ----

    def on_login(self) -> None:
        self.dispatch(ShellEvent.LOGIN_SUCCEEDED)

    def on_logout_complete(self) -> None:
        self.dispatch(ShellEvent.LOGOUT_COMPLETED)

    def show_signup(self) -> None:
        self.dispatch(ShellEvent.SHOW_SIGNUP)

    def show_login(self) -> None:
        self.dispatch(ShellEvent.SHOW_LOGIN)
