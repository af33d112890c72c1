"""Response Envelope — pure builders for the uniform Success/Failure body.

Invariants:
    - Every body has exactly status, message, data, timestamp (+ optional error)
    - data is always a list: lists/tuples kept, None -> [], anything else wrapped
    - error detail attached only when include_detail is True (non-production)
"""

import traceback
from datetime import datetime, timezone
from typing import Any

SUCCESS = "Success"
FAILURE = "Failure"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_data(data: Any) -> list:
    """Coerce a payload into the list shape the envelope always carries."""
    if data is None:
        return []
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]


def build_success(message: str, data: Any = None) -> dict:
    return {
        "status": SUCCESS,
        "message": message,
        "data": normalize_data(data),
        "timestamp": utc_timestamp(),
    }


def build_failure(
    message: str,
    error_detail: Any = None,
    include_detail: bool = False,
    include_stack: bool = False,
) -> dict:
    """Build a Failure body; error detail only when explicitly allowed."""
    body = {
        "status": FAILURE,
        "message": message,
        "data": [],
        "timestamp": utc_timestamp(),
    }
    if error_detail is not None and include_detail:
        body["error"] = describe_error(error_detail, include_stack)
    return body


def describe_error(error_detail: Any, include_stack: bool = False) -> dict:
    """Render an exception, dict, list or string as the `error` object."""
    if isinstance(error_detail, BaseException):
        described = {"message": str(error_detail)}
        if include_stack:
            described["stack"] = "".join(traceback.format_exception(
                type(error_detail), error_detail, error_detail.__traceback__,
            ))
        return described
    if isinstance(error_detail, dict):
        return {"message": str(error_detail.get("message", "")), "details": error_detail}
    if isinstance(error_detail, list):
        return {"message": "Invalid request data", "details": error_detail}
    return {"message": str(error_detail)}
