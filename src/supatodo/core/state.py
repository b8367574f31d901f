# src/supatodo/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from .auth import LoginForm, SignupForm
from .ports import Notifier, SessionGateway, TaskStoreGateway
from .shell import SessionShell
from .todos import TaskListController


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    session: SessionGateway
    store: TaskStoreGateway
    notifier: Notifier
    shell: SessionShell

    login_form: LoginForm
    signup_form: SignupForm

    # Present only while the authenticated view is mounted.
    todos: TaskListController | None = None

    running: bool = True
    pending: set = field(default_factory=set)

    def mount_todos(self) -> TaskListController:
        """Fresh controller for a newly entered authenticated view."""
        fallback = str(getattr(self.settings, "fallback_owner_email", "temp1@example.com"))
        self.todos = TaskListController(
            session=self.session,
            store=self.store,
            fallback_owner_email=fallback,
            on_logout=self.shell.on_logout_complete,
        )
        return self.todos

    def unmount_todos(self) -> None:
        self.todos = None
