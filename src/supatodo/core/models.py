# src/supatodo/core/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class AuthEvent(StrEnum):
    """Session change notifications emitted by the auth provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"

    @classmethod
    def parse(cls, raw: Any) -> AuthEvent | None:
        value = getattr(raw, "value", raw)
        try:
            return cls(str(value))
        except ValueError:
            return None


@dataclass(slots=True, frozen=True)
class Principal:
    """Authenticated user returned by sign-in / sign-up."""

    id: str | None
    email: str | None


@dataclass(slots=True, frozen=True)
class TaskRecord:
    """
    A task row as stored remotely.

    The owner column (email) is written on insert only and never mapped back.
    """

    id: int
    title: str
    description: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> TaskRecord:
        return cls(
            id=int(row["id"]),
            title=str(row.get("title") or ""),
            description=str(row.get("description") or ""),
        )


@dataclass(slots=True)
class TodoItem:
    """
    Client-side view of a TaskRecord.

    NOTE: `completed` exists only in memory. It is not a column in the tasks
    table, is never sent on insert/update, and resets to False on every load.
    Do not "fix" this by persisting it.
    """

    id: int
    title: str
    description: str
    completed: bool = False

    @classmethod
    def from_record(cls, record: TaskRecord) -> TodoItem:
        return cls(id=record.id, title=record.title, description=record.description)
