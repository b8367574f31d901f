# src/supatodo/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.keys import ENTER, ESCAPE, KeyEvent
from ..core.shell import View
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str | None]]

logger = logging.getLogger(__name__)

ADD_SEPARATOR = "::"


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._views: dict[str, frozenset[View]] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        views: tuple[View, ...] = tuple(View),
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        allowed = frozenset(views)
        self._handlers[key] = handler
        self._views[key] = allowed
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            self._views[alias.lower()] = allowed

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command (or nothing to say).
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        # Keep the raw tail: titles and descriptions may contain repeated spaces.
        rest = line[1:].strip()[len(parts[0]):].strip()
        args = [rest] if rest else []

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if state.shell.view not in self._views[name]:
            return f"/{name} is not available on the {state.shell.view.value} view."

        return await handler(state, args, emit)

    def build_help(self, view: View | None = None) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            if view is not None and view not in self._views[name]:
                continue
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].split()[0])
    except ValueError:
        return None


def _split_title_description(text: str) -> tuple[str, str]:
    title, sep, description = text.partition(ADD_SEPARATOR)
    if not sep:
        return text.strip(), ""
    return title.strip(), description.strip()


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help(state.shell.view)


async def cmd_signup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    state.shell.show_signup()
    return None


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    state.shell.show_login()
    return None


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    """
    /add                        -> submit the current title/description buffers
    /add <title> :: <description> -> fill both buffers, then submit
    """
    todos = state.todos
    if todos is None:
        return None
    if todos.in_flight.adding:
        return "Adding..."
    if args:
        todos.title_input, todos.description_input = _split_title_description(args[0])
    await todos.key_in_create(KeyEvent(ENTER))
    return None


async def cmd_title(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    todos = state.todos
    if todos is None:
        return None
    text = args[0] if args else ""
    if todos.edit.active:
        todos.edit.title = text
    else:
        todos.title_input = text
    return None


async def cmd_desc(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    todos = state.todos
    if todos is None:
        return None
    text = args[0] if args else ""
    if todos.edit.active:
        todos.edit.description = text
    else:
        todos.description_input = text
    return None


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    todos = state.todos
    task_id = _parse_id(args)
    if todos is None or task_id is None:
        return "Usage: /done <id>"
    if todos.find(task_id) is None:
        return f"No todo with id {task_id}."
    todos.toggle(task_id)
    return None


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    """
    /edit <id>                          -> enter edit mode with the current values
    /edit <id> <title> :: <description> -> enter edit mode, replace both, then save

    Either side of "::" may be left empty to keep the current value.
    """
    todos = state.todos
    task_id = _parse_id(args)
    if todos is None or task_id is None:
        return "Usage: /edit <id> [<title> :: <description>]"
    if not todos.can_edit(task_id):
        return f"Todo {task_id} is being deleted."
    if todos.find(task_id) is None:
        return f"No todo with id {task_id}."

    tail = args[0].split(maxsplit=1)
    if len(tail) > 1 and todos.in_flight.updating:
        return "Saving..."

    todos.start_edit(task_id)
    if len(tail) > 1:
        title, _, description = tail[1].partition(ADD_SEPARATOR)
        if title.strip():
            todos.edit.title = title.strip()
        if description.strip():
            todos.edit.description = description.strip()
        await todos.key_in_edit(KeyEvent(ENTER))
    return None


async def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    todos = state.todos
    if todos is None or not todos.edit.active:
        return "Nothing is being edited. Use /edit <id> first."
    if todos.in_flight.updating:
        return "Saving..."
    await todos.key_in_edit(KeyEvent(ENTER))
    return None


async def cmd_cancel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    todos = state.todos
    if todos is not None:
        await todos.key_in_edit(KeyEvent(ESCAPE))
    return None


async def cmd_del(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    todos = state.todos
    task_id = _parse_id(args)
    if todos is None or task_id is None:
        return "Usage: /del <id>"
    if todos.is_deleting(task_id):
        return f"Todo {task_id} is already being deleted."
    if emit:
        emit(f"Deleting todo {task_id}...")
    await todos.delete(task_id)
    return None


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    if state.todos is not None:
        await state.todos.load()
    return None


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    # The connector re-renders after every command.
    return None


async def cmd_logout(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    todos = state.todos
    if todos is None:
        return None
    if todos.in_flight.logging_out:
        return "Already logging out..."
    if emit:
        emit("Logging out...")
    await todos.logout()
    return None


_TODO_VIEW = (View.AUTHENTICATED,)

registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("signup", cmd_signup, help_text="Switch to the sign-up form.", views=(View.LOGIN,))
registry.register("login", cmd_login, help_text="Switch to the login form.", views=(View.SIGNUP,))
registry.register(
    "add",
    cmd_add,
    help_text="Add a todo: /add <title> :: <description> (or /add to submit the buffers).",
    views=_TODO_VIEW,
)
registry.register("title", cmd_title, help_text="Set the title buffer (edit buffer while editing).", views=_TODO_VIEW)
registry.register("desc", cmd_desc, help_text="Set the description buffer (edit buffer while editing).", views=_TODO_VIEW)
registry.register("done", cmd_done, help_text="Toggle completed: /done <id>.", aliases=["toggle"], views=_TODO_VIEW)
registry.register("edit", cmd_edit, help_text="Edit a todo: /edit <id> [<title> :: <description>].", views=_TODO_VIEW)
registry.register("save", cmd_save, help_text="Save the active edit.", views=_TODO_VIEW)
registry.register("cancel", cmd_cancel, help_text="Cancel the active edit.", views=_TODO_VIEW)
registry.register("del", cmd_del, help_text="Delete a todo: /del <id>.", aliases=["rm"], views=_TODO_VIEW)
registry.register("reload", cmd_reload, help_text="Reload todos from the server.", views=_TODO_VIEW)
registry.register("list", cmd_list, help_text="Show the todo list.", aliases=["ls"], views=_TODO_VIEW)
registry.register("logout", cmd_logout, help_text="Sign out.", views=_TODO_VIEW)
