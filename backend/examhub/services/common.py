"""Service Helpers — remote-failure translation and small payload utilities.

Invariants:
    - remote_operation converts RemoteStoreError into OperationFailedError
      ("Failed to <action>") and RemoteConflictError into ConflictError
    - ExamHubErrors raised inside the block (404, 403, ...) pass through untouched
    - The raw upstream failure is logged once here, with the action name
"""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from examhub.core.errors import (
    ConflictError, MissingFieldError, OperationFailedError,
    RemoteConflictError, RemoteStoreError,
)

logger = logging.getLogger(__name__)


@contextmanager
def remote_operation(action: str, conflict_message: str | None = None) -> Iterator[None]:
    """Wrap remote table calls made on behalf of one controller action."""
    try:
        yield
    except RemoteConflictError as e:
        logger.warning(
            f"Conflict while trying to {action}: {e.detail}",
            extra={"table": e.table, "action": action},
        )
        raise ConflictError(
            conflict_message or f"Failed to {action}: duplicate value", e.detail,
        ) from e
    except RemoteStoreError as e:
        logger.error(
            f"Error while trying to {action}: {e.message}",
            extra={"table": e.table, "action": action, "upstream_status": e.upstream_status},
        )
        raise OperationFailedError(f"Failed to {action}", e.detail) from e


def is_blank(value: Any) -> bool:
    """Falsy-but-meaningful values (0, False) count as present."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple)):
        return len(value) == 0
    return False


def require_fields(payload: dict, fields: Iterable[str]) -> None:
    """Raise MissingFieldError for the first absent required field."""
    for name in fields:
        if is_blank(payload.get(name)):
            raise MissingFieldError(name)


def first_or_none(rows: list[dict]) -> dict | None:
    return rows[0] if rows else None


def unique_in_order(values: Iterable) -> list:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(values))
