# src/supatodo/cli/main.py

"""
CLI entrypoint.

Initializes logging, connects to Supabase, builds AppState, then runs the
console connector on an asyncio loop until the user exits.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import ConfigurationError, friendly_gateway_error_message
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = await create_initial_state(settings=settings)
    await run_console_loop(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_file=settings.log_file, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "supatodo"))

    try:
        asyncio.run(_run(settings))
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        print(friendly_gateway_error_message(e), file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
