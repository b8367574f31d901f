# src/supatodo/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# SDK layers underneath the supabase client; they log every request.
_NOISY_PREFIXES = (
    "httpx",
    "httpcore",
    "hpack",
    "gotrue",
    "supabase_auth",
    "postgrest",
    "realtime",
    "supabase",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - allow all supatodo logs
    - suppress Supabase SDK / HTTP transport chatter unless ERROR+
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "supatodo" or name.startswith("supatodo."):
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        # Any other 3rd party: only errors to console.
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_file: str | Path = ".local/supatodo/supatodo.log",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: filtered so log lines do not drown the rendered views
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    # SDK layers: warnings and up, in the file as well.
    for name in _NOISY_PREFIXES:
        logging.getLogger(name).setLevel(logging.WARNING)
