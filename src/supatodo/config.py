# src/supatodo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the Supabase client is created lazily).
- Components receive settings by injection; get_settings() is only the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SUPATODO"

DEFAULT_TASKS_TABLE = "tasks"
DEFAULT_FALLBACK_OWNER_EMAIL = "temp1@example.com"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Supabase ----
    supabase_url: str | None
    supabase_key: str | None
    tasks_table: str

    # Owner sent on insert when the session has no email.
    fallback_owner_email: str

    # ---- Local paths (ignored by git) ----
    data_dir: Path
    log_file: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "supatodo").strip() or "supatodo"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        supabase_url = _first_env(_k("SUPABASE_URL"), "SUPABASE_URL", default=None)
        supabase_key = _first_env(
            _k("SUPABASE_KEY"),
            "SUPABASE_ANON_KEY",
            "SUPABASE_KEY",
            default=None,
        )
        tasks_table = _env(_k("TASKS_TABLE"), DEFAULT_TASKS_TABLE).strip() or DEFAULT_TASKS_TABLE
        fallback_owner_email = (
            _env(_k("FALLBACK_OWNER_EMAIL"), DEFAULT_FALLBACK_OWNER_EMAIL).strip()
            or DEFAULT_FALLBACK_OWNER_EMAIL
        )

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/supatodo"))
        log_file = _env_path(_k("LOG_FILE"), data_dir / "supatodo.log")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            supabase_url=supabase_url.strip() if supabase_url else None,
            supabase_key=supabase_key.strip() if supabase_key else None,
            tasks_table=tasks_table,
            fallback_owner_email=fallback_owner_email,
            data_dir=data_dir,
            log_file=log_file,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load .env once (never overriding the real environment) and cache Settings."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
