# src/supatodo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The shell, auth forms and task list controller depend on Protocols instead of
the Supabase SDK. Every coroutine raises GatewayError on failure.
"""

from collections.abc import Callable
from typing import Awaitable, Protocol

from .models import AuthEvent, Principal, TaskRecord

SessionChangeHandler = Callable[[AuthEvent, "str | None"], None]
# (event, email of the session carried by the event or None)


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


class SessionGateway(Protocol):
    """Authentication / session provider."""

    def get_current_email(self) -> Awaitable[str | None]: ...
    def sign_in(self, email: str, password: str) -> Awaitable[Principal | None]: ...
    def sign_up(self, email: str, password: str) -> Awaitable[Principal | None]: ...
    def sign_out(self) -> Awaitable[None]: ...
    def on_session_change(self, handler: SessionChangeHandler) -> Subscription: ...


class TaskStoreGateway(Protocol):
    """Single remote collection of task rows."""

    def list(self) -> Awaitable[list[TaskRecord]]: ...

    def insert(
            self,
            *,
            title: str,
            description: str,
            owner: str,
    ) -> Awaitable[list[TaskRecord]]: ...

    def update(
            self,
            task_id: int,
            *,
            title: str | None = None,
            description: str | None = None,
    ) -> Awaitable[list[TaskRecord]]: ...

    def delete(self, task_id: int) -> Awaitable[None]: ...


class Notifier(Protocol):
    """Toast-style notifications; presentation belongs to the connector."""

    def success(self, message: str, *, description: str | None = None, duration: int | None = None) -> None: ...
    def error(self, message: str, *, description: str | None = None, duration: int | None = None) -> None: ...
