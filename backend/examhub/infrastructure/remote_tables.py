"""Remote Table Client — async fetch/insert/update/delete against PostgREST tables.

Invariants:
    - Equality filters only, encoded as `column=eq.value` (bool -> true/false,
      None -> is.null)
    - Every call is independent: no retry, no cache, no batching, no transaction
    - Transport errors and non-2xx responses raise RemoteStoreError;
      HTTP 409 / Postgres 23505 raise RemoteConflictError
    - Successful calls always return a list of row dicts (possibly empty)
    - A 2xx reply that is not JSON raises RemoteStoreError, like any upstream failure
    - update/delete refuse an empty match (would touch every row)

Design Decisions:
    - Singleton client initialized on startup; FastAPI lifespan opens/closes it
    - `Prefer: return=representation` so writes echo the stored rows, including
      generated ids and timestamps
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from examhub.core.errors import RemoteConflictError, RemoteStoreError
from examhub.core.repository_protocols import Row

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def encode_filter_value(value: Any) -> str:
    """Encode one equality criterion in PostgREST syntax."""
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{'true' if value else 'false'}"
    return f"eq.{value}"


def encode_filters(filters: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    if not filters:
        return []
    return [(column, encode_filter_value(value)) for column, value in filters.items()]


class RemoteTableClient:
    """Thin async wrapper over a PostgREST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1/",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def fetch(self, table: str, filters: Mapping[str, Any] | None = None) -> list[Row]:
        return await self._request("GET", table, "fetch", params=encode_filters(filters))

    async def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        return await self._request("POST", table, "insert", json=rows)

    async def update(
        self, table: str, patch: Row, match: Mapping[str, Any],
    ) -> list[Row]:
        if not match:
            raise ValueError(f"Refusing unfiltered update on '{table}'")
        return await self._request(
            "PATCH", table, "update", params=encode_filters(match), json=patch,
        )

    async def delete(self, table: str, match: Mapping[str, Any]) -> list[Row]:
        if not match:
            raise ValueError(f"Refusing unfiltered delete on '{table}'")
        return await self._request(
            "DELETE", table, "delete", params=encode_filters(match),
        )

    async def health_check(self) -> bool:
        """Check remote store connectivity (for readiness probes)."""
        try:
            response = await self._http.get("")
            return response.is_success
        except httpx.HTTPError as e:
            logger.error(f"Remote store health check failed: {e}")
            return False

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
    ) -> list[Row]:
        try:
            response = await self._http.request(
                method, table, params=params or None, json=json,
            )
        except httpx.HTTPError as e:
            logger.error(
                f"Remote {operation} on {table} failed: {e!r}",
                extra={"table": table, "action": operation},
            )
            raise RemoteStoreError(str(e) or type(e).__name__, table, operation)

        if not response.is_success:
            raise self._map_error_response(response, table, operation)
        try:
            return _rows_from(response)
        except ValueError as e:
            logger.error(
                f"Remote {operation} on {table} returned a non-JSON body: {e}",
                extra={
                    "table": table, "action": operation,
                    "upstream_status": response.status_code,
                },
            )
            raise RemoteStoreError(
                f"Unreadable response body: {e}", table, operation, response.status_code,
            )

    def _map_error_response(
        self, response: httpx.Response, table: str, operation: str,
    ) -> RemoteStoreError:
        code, message = _error_fields(response)
        logger.error(
            f"Remote {operation} on {table} returned {response.status_code}: {message}",
            extra={
                "table": table, "action": operation,
                "upstream_status": response.status_code, "error_code": code,
            },
        )
        if response.status_code == httpx.codes.CONFLICT or code == UNIQUE_VIOLATION:
            return RemoteConflictError(
                message, table, operation, response.status_code, code,
            )
        return RemoteStoreError(message, table, operation, response.status_code, code)


def _rows_from(response: httpx.Response) -> list[Row]:
    if response.status_code == httpx.codes.NO_CONTENT or not response.content:
        return []
    body = response.json()
    if body is None:
        return []
    if isinstance(body, list):
        return body
    return [body]


def _error_fields(response: httpx.Response) -> tuple[str | None, str]:
    """Extract PostgREST's {code, message} from an error body."""
    try:
        body = response.json()
    except ValueError:
        return None, response.text or response.reason_phrase
    if isinstance(body, dict):
        code = body.get("code")
        message = body.get("message") or body.get("error") or response.reason_phrase
        return (str(code) if code is not None else None), str(message)
    return None, response.reason_phrase


# Singleton (initialized on startup)
table_client: RemoteTableClient | None = None


def init_remote_tables(base_url: str, api_key: str, **kwargs) -> RemoteTableClient:
    global table_client
    table_client = RemoteTableClient(base_url, api_key, **kwargs)
    return table_client


async def close_remote_tables() -> None:
    global table_client
    if table_client is not None:
        await table_client.aclose()
        table_client = None


def get_table_client() -> RemoteTableClient:
    """FastAPI dependency for the remote table client."""
    if table_client is None:
        raise RuntimeError("Remote table client not initialized")
    return table_client
