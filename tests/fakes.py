# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from supatodo.core.errors import GatewayError
from supatodo.core.models import AuthEvent, Principal, TaskRecord
from supatodo.core.ports import SessionChangeHandler


class _Gated:
    """
    Shared helpers for fakes:
    - `fail[name] = "msg"` makes the next calls of `name` raise GatewayError("msg")
    - `gates[name] = asyncio.Event()` holds calls of `name` in flight until set
    - `gates[(name, first_arg)]` holds only the calls with that first argument
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail: dict[str, str] = {}
        self.gates: dict[str | tuple, asyncio.Event] = {}

    async def _enter(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is None and args:
            gate = self.gates.get((name, args[0]))
        if gate is not None:
            await gate.wait()
        if name in self.fail:
            raise GatewayError(self.fail[name], operation=name)

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


@dataclass(slots=True)
class FakeSubscription:
    owner: FakeSessionGateway
    handler: SessionChangeHandler
    unsubscribed: int = 0

    def unsubscribe(self) -> None:
        self.unsubscribed += 1
        if self.handler in self.owner.handlers:
            self.owner.handlers.remove(self.handler)


class FakeSessionGateway(_Gated):
    def __init__(self, email: str | None = None) -> None:
        super().__init__()
        self.email = email
        self.principal: Principal | None = Principal(id="user-1", email=email or "user@example.com")
        self.handlers: list[SessionChangeHandler] = []
        self.subscriptions: list[FakeSubscription] = []

    async def get_current_email(self) -> str | None:
        await self._enter("get_current_email")
        return self.email

    async def sign_in(self, email: str, password: str) -> Principal | None:
        await self._enter("sign_in", email, password)
        return self.principal

    async def sign_up(self, email: str, password: str) -> Principal | None:
        await self._enter("sign_up", email, password)
        return self.principal

    async def sign_out(self) -> None:
        await self._enter("sign_out")
        self.email = None

    def on_session_change(self, handler: SessionChangeHandler) -> FakeSubscription:
        self.handlers.append(handler)
        sub = FakeSubscription(owner=self, handler=handler)
        self.subscriptions.append(sub)
        return sub

    def emit(self, event: AuthEvent, email: str | None) -> None:
        for handler in list(self.handlers):
            handler(event, email)


class FakeTaskStore(_Gated):
    """In-memory tasks table; rows keep their owner so tests can inspect it."""

    def __init__(self, rows: list[dict] | None = None) -> None:
        super().__init__()
        self.insert_returns_nothing = False
        self.seed(rows or [])

    def seed(self, rows: list[dict]) -> None:
        self.rows = [dict(r) for r in rows]
        self._next_id = max((int(r["id"]) for r in self.rows), default=0) + 1

    async def list(self) -> list[TaskRecord]:
        await self._enter("list")
        return [TaskRecord.from_row(r) for r in self.rows]

    async def insert(self, *, title: str, description: str, owner: str) -> list[TaskRecord]:
        await self._enter("insert", title, description, owner)
        if self.insert_returns_nothing:
            return []
        row = {"id": self._next_id, "title": title, "description": description, "email": owner}
        self._next_id += 1
        self.rows.append(row)
        return [TaskRecord.from_row(row)]

    async def update(
            self,
            task_id: int,
            *,
            title: str | None = None,
            description: str | None = None,
    ) -> list[TaskRecord]:
        await self._enter("update", task_id, title, description)
        out: list[TaskRecord] = []
        for row in self.rows:
            if row["id"] == task_id:
                if title is not None:
                    row["title"] = title
                if description is not None:
                    row["description"] = description
                out.append(TaskRecord.from_row(row))
        return out

    async def delete(self, task_id: int) -> None:
        await self._enter("delete", task_id)
        self.rows = [r for r in self.rows if r["id"] != task_id]


@dataclass(slots=True)
class Toast:
    level: str
    message: str
    description: str | None
    duration: int | None


@dataclass(slots=True)
class FakeNotifier:
    toasts: list[Toast] = field(default_factory=list)

    def success(self, message: str, *, description: str | None = None, duration: int | None = None) -> None:
        self.toasts.append(Toast("success", message, description, duration))

    def error(self, message: str, *, description: str | None = None, duration: int | None = None) -> None:
        self.toasts.append(Toast("error", message, description, duration))
