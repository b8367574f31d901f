# src/supatodo/core/todos.py

from __future__ import annotations

"""
Task list controller.

Mirrors the remote tasks table into a local list and exposes create, edit,
toggle, delete and logout. Each remote operation:
- clears the error slot before the call,
- tracks its own in-flight flag (create, shared edit-save, per-id delete),
- touches the local list only after the gateway confirmed the change,
- turns any failure into a message in the single error slot.

Toggle is local only: `completed` is not a column of the tasks table.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .errors import GatewayError
from .keys import KeyEvent, is_cancel, is_commit
from .models import TodoItem
from .ports import SessionGateway, TaskStoreGateway

logger = logging.getLogger(__name__)

MSG_NOT_LOGGED_IN = "User not logged in. Please log in to manage todos."
MSG_FILL_BOTH = "Please fill in both title and description."
MSG_NO_DATA = "No data returned from server."
MSG_FETCH_FAILED = "Failed to fetch todos. Please try again."
MSG_ADD_FAILED = "Failed to add todo. Please try again."
MSG_UPDATE_FAILED = "Failed to update todo. Please try again."
MSG_DELETE_FAILED = "Failed to delete todo. Please try again."
MSG_LOGOUT_FAILED = "Failed to logout. Please try again."


@dataclass(slots=True)
class InFlight:
    adding: bool = False
    updating: bool = False
    deleting_id: int | None = None
    logging_out: bool = False


@dataclass(slots=True)
class EditSlot:
    """The single item being edited (task_id is None outside edit mode)."""

    task_id: int | None = None
    title: str = ""
    description: str = ""

    @property
    def active(self) -> bool:
        return self.task_id is not None


@dataclass
class TaskListController:
    session: SessionGateway
    store: TaskStoreGateway
    fallback_owner_email: str
    on_logout: Callable[[], None] | None = None

    items: list[TodoItem] = field(default_factory=list)
    loading: bool = True
    error: str | None = None
    user_email: str | None = None

    title_input: str = ""
    description_input: str = ""

    edit: EditSlot = field(default_factory=EditSlot)
    in_flight: InFlight = field(default_factory=InFlight)

    # ---- lifecycle ----

    async def mount(self) -> None:
        await self.refresh_identity()
        await self.load()

    async def refresh_identity(self) -> None:
        self.error = None
        try:
            email = await self.session.get_current_email()
        except GatewayError as e:
            logger.error("Error fetching session: %s", e.message)
            email = None

        if not email:
            self.error = MSG_NOT_LOGGED_IN
        else:
            self.user_email = email
        logger.debug("User email: %s", email)

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            records = await self.store.list()
            self.items = [TodoItem.from_record(r) for r in records]
        except GatewayError as e:
            logger.error("Error fetching todos: %s", e.message)
            self.error = MSG_FETCH_FAILED
        except Exception:
            logger.exception("Unexpected error while fetching todos.")
            self.error = "An unexpected error occurred."
        finally:
            self.loading = False

    # ---- create ----

    @property
    def can_add(self) -> bool:
        return (
            not self.in_flight.adding
            and bool(self.title_input.strip())
            and bool(self.description_input.strip())
        )

    async def create(self) -> bool:
        title = self.title_input.strip()
        description = self.description_input.strip()
        if not title or not description:
            self.error = MSG_FILL_BOTH
            return False

        self.in_flight.adding = True
        self.error = None
        try:
            created = await self.store.insert(
                title=title,
                description=description,
                owner=self.user_email or self.fallback_owner_email,
            )
            if not created:
                self.error = MSG_NO_DATA
                return False

            self.items.append(TodoItem.from_record(created[0]))
            self.title_input = ""
            self.description_input = ""
            return True
        except GatewayError as e:
            logger.error("Error adding todo: %s", e.message)
            self.error = MSG_ADD_FAILED
            return False
        except Exception:
            logger.exception("Unexpected error while adding todo.")
            self.error = "An unexpected error occurred while adding todo."
            return False
        finally:
            self.in_flight.adding = False

    # ---- toggle (local only) ----

    def toggle(self, task_id: int) -> None:
        for item in self.items:
            if item.id == task_id:
                item.completed = not item.completed

    # ---- edit ----

    def start_edit(self, task_id: int) -> None:
        item = self.find(task_id)
        if item is None:
            return
        # A previous edit slot is dropped without saving.
        self.edit = EditSlot(task_id=item.id, title=item.title, description=item.description)

    def cancel_edit(self) -> None:
        self.edit = EditSlot()

    @property
    def can_save(self) -> bool:
        return (
            not self.in_flight.updating
            and bool(self.edit.title.strip())
            and bool(self.edit.description.strip())
        )

    async def save_edit(self) -> bool:
        task_id = self.edit.task_id
        if task_id is None:
            return False

        title = self.edit.title.strip()
        description = self.edit.description.strip()
        if not title or not description:
            self.error = MSG_FILL_BOTH
            return False

        self.in_flight.updating = True
        self.error = None
        try:
            await self.store.update(task_id, title=title, description=description)
        except GatewayError as e:
            logger.error("Error updating todo %s: %s", task_id, e.message)
            self.error = MSG_UPDATE_FAILED
            return False
        except Exception:
            logger.exception("Unexpected error while updating todo %s.", task_id)
            self.error = "An unexpected error occurred while updating todo."
            return False
        finally:
            self.in_flight.updating = False

        for item in self.items:
            if item.id == task_id:
                item.title = title
                item.description = description
        if self.edit.task_id == task_id:
            self.cancel_edit()
        return True

    # ---- delete ----

    def is_deleting(self, task_id: int) -> bool:
        return self.in_flight.deleting_id == task_id

    def can_edit(self, task_id: int) -> bool:
        return not self.is_deleting(task_id)

    async def delete(self, task_id: int) -> bool:
        self.in_flight.deleting_id = task_id
        self.error = None
        try:
            await self.store.delete(task_id)
        except GatewayError as e:
            logger.error("Error deleting todo %s: %s", task_id, e.message)
            self.error = MSG_DELETE_FAILED
            return False
        except Exception:
            logger.exception("Unexpected error while deleting todo %s.", task_id)
            self.error = "An unexpected error occurred while deleting todo."
            return False
        finally:
            # A later delete may own the slot by now.
            if self.in_flight.deleting_id == task_id:
                self.in_flight.deleting_id = None

        self.items = [item for item in self.items if item.id != task_id]
        return True

    # ---- logout ----

    async def logout(self) -> bool:
        self.in_flight.logging_out = True
        self.error = None
        try:
            await self.session.sign_out()
        except GatewayError as e:
            logger.error("Error logging out: %s", e.message)
            self.error = MSG_LOGOUT_FAILED
            return False
        except Exception:
            logger.exception("Unexpected logout error.")
            self.error = "An unexpected error occurred during logout."
            return False
        finally:
            self.in_flight.logging_out = False

        self.user_email = None
        self.items = []
        if self.on_logout is not None:
            self.on_logout()
        return True

    # ---- keyboard ----

    async def key_in_create(self, event: KeyEvent) -> bool:
        if is_commit(event):
            await self.create()
            return True
        if is_cancel(event):
            self.cancel_edit()
            return True
        return False

    async def key_in_edit(self, event: KeyEvent) -> bool:
        if is_commit(event):
            await self.save_edit()
            return True
        if is_cancel(event):
            self.cancel_edit()
            return True
        return False

    # ---- helpers ----

    def find(self, task_id: int) -> TodoItem | None:
        for item in self.items:
            if item.id == task_id:
                return item
        return None
