# src/supatodo/connectors/console_connector.py

from __future__ import annotations

import asyncio
import getpass
import logging
from collections.abc import Awaitable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.auth import LoginForm, SignupForm
from ..core.shell import View
from ..core.state import AppState
from ..core.todos import TaskListController

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Prints toast notifications as timestamped lines."""

    def success(self, message: str, *, description: str | None = None, duration: int | None = None) -> None:
        self._show("OK", message, description)

    def error(self, message: str, *, description: str | None = None, duration: int | None = None) -> None:
        self._show("ERROR", message, description)

    @staticmethod
    def _show(level: str, message: str, description: str | None) -> None:
        _print_ts(f"[{level}] {message}")
        if description:
            print(f"    {description}", flush=True)


def render_todos(todos: TaskListController) -> str:
    """Text rendering of the authenticated view."""
    if todos.loading:
        return "Loading todos..."

    lines: list[str] = []
    header = "== Todo List =="
    if todos.user_email:
        header += f"  ({todos.user_email})"
    if todos.in_flight.logging_out:
        header += "  [Logging out...]"
    lines.append(header)

    if todos.error:
        lines.append(f"!! {todos.error}")

    add_label = "Adding..." if todos.in_flight.adding else "Add Todo"
    lines.append(f"  new: title={todos.title_input!r} description={todos.description_input!r}  [{add_label}]")

    if not todos.items:
        lines.append("  No todos yet. Add your first one!")
        return "\n".join(lines)

    for item in todos.items:
        if todos.edit.task_id == item.id:
            save_label = "Saving..." if todos.in_flight.updating else "Save"
            lines.append(f"  #{item.id} editing: title={todos.edit.title!r} description={todos.edit.description!r}")
            lines.append(f"       [/save: {save_label}] [/cancel]")
            continue

        mark = "[x]" if item.completed else "[ ]"
        badge = "  (Completed)" if item.completed else ""
        deleting = "  (deleting...)" if todos.is_deleting(item.id) else ""
        lines.append(f"  {mark} #{item.id} {item.title}{badge}{deleting}")
        if item.description:
            for desc_line in item.description.splitlines():
                lines.append(f"        {desc_line}")

    return "\n".join(lines)


async def _read_line(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


async def _read_password(prompt: str) -> str:
    return await asyncio.to_thread(getpass.getpass, prompt)


def _spawn(state: AppState, coro: Awaitable[None]) -> asyncio.Task:
    """Run a handler concurrently; keep a reference until it finishes."""
    task = asyncio.ensure_future(coro)
    state.pending.add(task)
    task.add_done_callback(state.pending.discard)
    return task


async def _mount_todos(state: AppState, todos: TaskListController) -> None:
    print(render_todos(todos), flush=True)
    try:
        await todos.mount()
    except Exception:
        logger.exception("Todo list mount crashed.")
    if state.todos is todos:
        print(render_todos(todos), flush=True)


def _on_view_change(state: AppState, old: View, new: View) -> None:
    if old == View.AUTHENTICATED:
        state.unmount_todos()

    if new == View.AUTHENTICATED:
        todos = state.mount_todos()
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; todo list was not loaded.")
            return
        _spawn(state, _mount_todos(state, todos))
    else:
        _print_ts(f"[{new.value.upper()}] Use /help for commands. Use /exit to quit.")


async def _prompt_required(prompt: str, *, secret: bool = False) -> str:
    """Ask until a non-empty value is entered. Slash commands are returned as typed."""
    while True:
        value = await (_read_password(prompt) if secret else _read_line(prompt))
        if secret:
            if value:
                return value
        else:
            value = value.strip()
            if value:
                return value
        print("Please fill out this field.", flush=True)


async def _run_credentials_view(state: AppState, form: LoginForm | SignupForm, title: str) -> None:
    print(f"\n== {title} ==", flush=True)
    email = await _prompt_required("Email: ")
    if email.startswith("/"):
        await _run_command(state, email)
        return

    password = await _prompt_required("Password: ", secret=True)

    form.email = email
    form.password = password
    _print_ts(f"[{form.submit_label}]")
    await form.submit()


async def _run_command(state: AppState, line: str) -> None:
    if line.lower() in EXIT_COMMANDS:
        logger.info("Console exit command received.")
        state.running = False
        return

    if not line.startswith("/"):
        _print_ts("Use /add <title> :: <description> to add a todo, /help for all commands.")
        return

    try:
        reply = await command_registry.handle(state, line, emit=_print_ts)
    except Exception:
        logger.exception("Command handler crashed.")
        reply = "Internal error while handling a command."

    if reply is not None:
        _print_ts(reply)

    todos = state.todos
    if todos is not None and state.shell.view == View.AUTHENTICATED:
        print(render_todos(todos), flush=True)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    shell = state.shell
    shell.add_listener(lambda old, new: _on_view_change(state, old, new))

    _print_ts("Loading...")
    await shell.start()
    if shell.view != View.AUTHENTICATED:
        _print_ts(f"[{shell.view.value.upper()}] Use /help for commands. Use /exit to quit.")

    try:
        while state.running:
            try:
                view = shell.view
                if view == View.LOGIN:
                    print("Don't have an account? /signup", flush=True)
                    await _run_credentials_view(state, state.login_form, "Login")
                    continue
                if view == View.SIGNUP:
                    print("Already have an account? /login", flush=True)
                    await _run_credentials_view(state, state.signup_form, "Sign Up")
                    continue

                line = (await _read_line(">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if line.lower() in EXIT_COMMANDS:
                logger.info("Console exit command received.")
                break
            if not line:
                continue
            if shell.view != view and not line.startswith("/"):
                # Typed for the view that was left while waiting; prompt again.
                logger.debug("Dropping input typed on the %s view.", view.value)
                continue

            # Backend calls run concurrently; the prompt stays responsive.
            _spawn(state, _run_command(state, line))
    finally:
        if state.pending:
            await asyncio.gather(*list(state.pending), return_exceptions=True)
        shell.stop()
        logger.info("Console connector finished.")
