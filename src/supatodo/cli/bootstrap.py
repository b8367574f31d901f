# src/supatodo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the Supabase gateways, notifier, shell and auth forms into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier
from ..connectors.supabase_gateway import SupabaseSessionGateway, SupabaseTaskStore, create_supabase_client
from ..core.auth import LoginForm, SignupForm
from ..core.ports import Notifier, SessionGateway, TaskStoreGateway
from ..core.shell import SessionShell
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)


def build_state(
    *,
    settings,
    session: SessionGateway,
    store: TaskStoreGateway,
    notifier: Notifier,
) -> AppState:
    """Wire already-built gateways into AppState (used directly by tests)."""
    shell = SessionShell(session)
    return AppState(
        settings=settings,
        session=session,
        store=store,
        notifier=notifier,
        shell=shell,
        login_form=LoginForm(session, notifier, on_login=shell.on_login),
        signup_form=SignupForm(session, notifier),
    )


async def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState backed by Supabase.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    client = await create_supabase_client(settings)
    logger.info("Using tasks table %r", settings.tasks_table)

    return build_state(
        settings=settings,
        session=SupabaseSessionGateway(client),
        store=SupabaseTaskStore(client, table=settings.tasks_table),
        notifier=ConsoleNotifier(),
    )
