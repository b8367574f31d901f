# src/supatodo/core/errors.py

from __future__ import annotations


class GatewayError(RuntimeError):
    """A session or task store call failed; `message` is safe to show to the user."""

    def __init__(self, message: str, *, operation: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation


class ConfigurationError(RuntimeError):
    pass


def sdk_error_message(exc: BaseException) -> str:
    """Pull the human-readable part out of an SDK exception."""
    msg = getattr(exc, "message", None)
    if isinstance(msg, str) and msg.strip():
        return msg.strip()
    text = str(exc).strip()
    return text or exc.__class__.__name__


def friendly_gateway_error_message(err: Exception) -> str:
    msg = str(err).strip() or "Backend error."
    if "Supabase URL is not set" in msg:
        return "Backend is not configured (missing URL). Set SUPATODO_SUPABASE_URL in .env (see .env.example)."
    if "Supabase key is not set" in msg:
        return "Backend is not configured (missing key). Set SUPATODO_SUPABASE_KEY in .env (see .env.example)."
    return msg
