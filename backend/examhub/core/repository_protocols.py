"""Boundary Protocols — the contract between services and the remote store.

Invariants:
    - Services depend on TableGateway, never on httpx or a concrete client
    - All methods return lists of row dicts; failures raise RemoteStoreError
"""

from collections.abc import Mapping
from typing import Any, Protocol

Row = dict[str, Any]


class TableGateway(Protocol):
    """Contract for filtered table access — implemented by infrastructure."""
    async def fetch(
        self, table: str, filters: Mapping[str, Any] | None = None,
    ) -> list[Row]: ...
    async def insert(self, table: str, rows: Row | list[Row]) -> list[Row]: ...
    async def update(
        self, table: str, patch: Row, match: Mapping[str, Any],
    ) -> list[Row]: ...
    async def delete(self, table: str, match: Mapping[str, Any]) -> list[Row]: ...
