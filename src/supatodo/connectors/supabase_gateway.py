# src/supatodo/connectors/supabase_gateway.py

from __future__ import annotations

"""
Supabase adapters for the SessionGateway and TaskStoreGateway ports.

The SDK raises its own exception types (auth errors, PostgREST APIError,
httpx transport errors). All of them are converted to GatewayError here so
the core never sees SDK types.
"""

import logging
from typing import Any

from supabase import AsyncClient, acreate_client

from ..core.errors import ConfigurationError, GatewayError, sdk_error_message
from ..core.models import AuthEvent, Principal, TaskRecord
from ..core.ports import SessionChangeHandler

logger = logging.getLogger(__name__)


async def create_supabase_client(settings) -> AsyncClient:
    """
    Create the async Supabase client.

    No secrets are needed at import time; this is the first place the URL and
    key are required.
    """
    url = (getattr(settings, "supabase_url", None) or "").strip()
    key = (getattr(settings, "supabase_key", None) or "").strip()

    if not url:
        raise ConfigurationError("Supabase URL is not set. Set SUPATODO_SUPABASE_URL in your .env.")
    if not key:
        raise ConfigurationError("Supabase key is not set. Set SUPATODO_SUPABASE_KEY in your .env.")

    logger.info("Connecting to Supabase at %s", url)
    return await acreate_client(url, key)


def _email_of(obj: Any) -> str | None:
    user = getattr(obj, "user", None)
    email = getattr(user, "email", None)
    return str(email) if email else None


def _principal_of(response: Any) -> Principal | None:
    user = getattr(response, "user", None)
    if user is None:
        return None
    user_id = getattr(user, "id", None)
    email = getattr(user, "email", None)
    return Principal(id=str(user_id) if user_id else None, email=str(email) if email else None)


class _SessionSubscription:
    """Wraps the SDK subscription so a second unsubscribe() is a no-op."""

    def __init__(self, inner: Any) -> None:
        self._inner = inner
        self._active = True

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        try:
            self._inner.unsubscribe()
        except Exception as e:
            logger.warning("Auth subscription unsubscribe failed: %r", e)


class SupabaseSessionGateway:
    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get_current_email(self) -> str | None:
        try:
            session = await self._client.auth.get_session()
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="get_session") from e
        if session is None:
            return None
        return _email_of(session)

    async def sign_in(self, email: str, password: str) -> Principal | None:
        try:
            resp = await self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="sign_in") from e
        return _principal_of(resp)

    async def sign_up(self, email: str, password: str) -> Principal | None:
        try:
            resp = await self._client.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="sign_up") from e
        return _principal_of(resp)

    async def sign_out(self) -> None:
        try:
            await self._client.auth.sign_out()
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="sign_out") from e

    def on_session_change(self, handler: SessionChangeHandler) -> _SessionSubscription:
        def _callback(event: Any, session: Any) -> None:
            parsed = AuthEvent.parse(event)
            if parsed is None:
                logger.debug("Unknown auth event: %r", event)
                return
            handler(parsed, _email_of(session) if session is not None else None)

        return _SessionSubscription(self._client.auth.on_auth_state_change(_callback))


class SupabaseTaskStore:
    def __init__(self, client: AsyncClient, table: str = "tasks") -> None:
        self._client = client
        self._table = table

    def _rows(self, response: Any) -> list[TaskRecord]:
        data = getattr(response, "data", None)
        if not isinstance(data, list):
            return []
        return [TaskRecord.from_row(row) for row in data if isinstance(row, dict)]

    async def list(self) -> list[TaskRecord]:
        try:
            resp = await self._client.table(self._table).select("*").execute()
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="list") from e
        return self._rows(resp)

    async def insert(self, *, title: str, description: str, owner: str) -> list[TaskRecord]:
        # "completed" is deliberately absent: the table has no such column.
        payload = {"title": title, "description": description, "email": owner}
        try:
            resp = await self._client.table(self._table).insert(payload).execute()
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="insert") from e
        return self._rows(resp)

    async def update(
            self,
            task_id: int,
            *,
            title: str | None = None,
            description: str | None = None,
    ) -> list[TaskRecord]:
        fields: dict[str, str] = {}
        if title is not None:
            fields["title"] = title
        if description is not None:
            fields["description"] = description
        if not fields:
            return []
        try:
            resp = await self._client.table(self._table).update(fields).eq("id", task_id).execute()
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="update") from e
        return self._rows(resp)

    async def delete(self, task_id: int) -> None:
        try:
            await self._client.table(self._table).delete().eq("id", task_id).execute()
        except Exception as e:
            raise GatewayError(sdk_error_message(e), operation="delete") from e
