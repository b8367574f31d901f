# src/supatodo/core/auth.py

from __future__ import annotations

"""
Login and sign-up forms.

Two independent forms, no shared state machine. Sign-in hands control back
to the shell through `on_login`; sign-up never does, because a new account has
to be confirmed by email before the first login.
"""

import logging
from collections.abc import Callable

from .errors import GatewayError
from .ports import Notifier, SessionGateway

logger = logging.getLogger(__name__)


class _CredentialsForm:
    idle_label = ""
    busy_label = ""

    def __init__(self, session: SessionGateway, notifier: Notifier) -> None:
        self._session = session
        self._notifier = notifier
        self.email = ""
        self.password = ""
        self.submitting = False

    @property
    def submit_label(self) -> str:
        return self.busy_label if self.submitting else self.idle_label

    @property
    def submit_enabled(self) -> bool:
        return not self.submitting


class LoginForm(_CredentialsForm):
    idle_label = "Login"
    busy_label = "Logging in..."

    def __init__(
            self,
            session: SessionGateway,
            notifier: Notifier,
            on_login: Callable[[], None],
    ) -> None:
        super().__init__(session, notifier)
        self._on_login = on_login

    async def submit(self) -> bool:
        """Sign in with the current email/password. Returns True when logged in."""
        if self.submitting:
            return False

        self.submitting = True
        try:
            principal = await self._session.sign_in(self.email, self.password)
        except GatewayError as e:
            logger.error("Login error: %s", e.message)
            self._notifier.error("Login failed: " + e.message)
            return False
        finally:
            self.submitting = False

        if principal is None:
            logger.warning("Sign-in succeeded without user data (email=%s)", self.email)
            self._notifier.error("Login failed: No user data returned.")
            return False

        self._notifier.success("Login successful!", description="Welcome back!", duration=3000)
        self._on_login()
        return True


class SignupForm(_CredentialsForm):
    idle_label = "Sign Up"
    busy_label = "Signing up..."

    async def submit(self) -> bool:
        """Create the account. Returns True when the provider returned a user."""
        if self.submitting:
            return False

        self.submitting = True
        try:
            principal = await self._session.sign_up(self.email, self.password)
        except GatewayError as e:
            logger.error("Signup error: %s", e.message)
            self._notifier.error("Signup failed: " + e.message)
            return False
        finally:
            self.submitting = False

        if principal is None:
            logger.warning("Sign-up returned no user data (email=%s)", self.email)
            return False

        self._notifier.success(
            "Signup successful! Please verify your email.",
            description="A verification email has been sent to your inbox.",
            duration=5000,
        )
        return True
