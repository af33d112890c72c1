"""Fake PostgREST Store — in-memory tables served through httpx.MockTransport.

Invariants:
    - Understands GET/POST/PATCH/DELETE on /rest/v1/<table> with `eq.` and
      `is.null` filters, the subset RemoteTableClient emits
    - Inserts get a uuid id, created_at, and the column defaults of the real schema
    - Unique constraints answer 409 with Postgres code 23505
    - fail_next makes the next request answer 500 (upstream failure)
    - blind_reads tables answer GET with no rows (simulates a racing writer)

Design Decisions:
    - Values compared as strings the way PostgREST compares query text:
      booleans as true/false, everything else via str()
    - Every request is recorded so tests can assert on the wire format
"""

import json
from copy import deepcopy
from datetime import datetime, timezone
from uuid import uuid4

import httpx

PREFIX = "/rest/v1/"

DEFAULTS = {
    "exams": {"is_active": True, "is_deleted": False},
    "subjects": {"is_active": True, "is_deleted": False},
    "topics": {"is_active": True, "is_deleted": False},
    "translations": {"is_deleted": False, "is_published": False},
    "enrollments": {"exam_ids": []},
}

UNIQUE = {
    "translations": [("key",)],
    "enrollments": [("user_id",)],
    "users": [("user_id",)],
    "topics": [("name", "subject_id")],
}


def _as_text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _matches(row: dict, filters: list[tuple[str, str]]) -> bool:
    for column, expr in filters:
        value = row.get(column)
        if expr == "is.null":
            if value is not None:
                return False
        elif expr.startswith("eq."):
            if value is None or _as_text(value) != expr[3:]:
                return False
        else:
            raise AssertionError(f"Unsupported filter {column}={expr}")
    return True


def _response(status: int, body=None) -> httpx.Response:
    if body is None:
        return httpx.Response(status)
    return httpx.Response(status, json=body)


def _unique_violation(table: str, columns: tuple) -> httpx.Response:
    return _response(409, {
        "code": "23505",
        "message": f'duplicate key value violates unique constraint "{table}_{"_".join(columns)}_key"',
    })


class FakeRestStore:

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_next = False
        self.blind_reads: set[str] = set()

    # -- Seeding / inspection -----------------------------------------------

    def seed(self, table: str, **row) -> dict:
        stored = self._with_defaults(table, row)
        self.rows(table).append(stored)
        return deepcopy(stored)

    def rows(self, table: str) -> list[dict]:
        return self.tables.setdefault(table, [])

    def get(self, table: str, row_id) -> dict | None:
        for row in self.rows(table):
            if str(row["id"]) == str(row_id):
                return row
        return None

    def requests_to(self, table: str, method: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path == PREFIX + table and (method is None or r.method == method)
        ]

    # -- Transport handler --------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_next:
            self.fail_next = False
            return _response(500, {"code": "XX000", "message": "upstream exploded"})

        path = request.url.path
        assert path.startswith(PREFIX), f"unexpected path {path}"
        table = path[len(PREFIX):]
        if not table:
            return _response(200, {"swagger": "2.0"})

        filters = list(request.url.params.multi_items())
        body = json.loads(request.content) if request.content else None

        if request.method == "GET":
            if table in self.blind_reads:
                return _response(200, [])
            return _response(200, [deepcopy(r) for r in self.rows(table) if _matches(r, filters)])
        if request.method == "POST":
            return self._insert(table, body)
        if request.method == "PATCH":
            return self._update(table, body, filters)
        if request.method == "DELETE":
            removed = [r for r in self.rows(table) if _matches(r, filters)]
            self.tables[table] = [r for r in self.rows(table) if not _matches(r, filters)]
            return _response(200, removed)
        return _response(405, {"message": f"{request.method} not supported"})

    def _insert(self, table: str, body) -> httpx.Response:
        incoming = body if isinstance(body, list) else [body]
        staged = [self._with_defaults(table, row) for row in incoming]
        for columns in UNIQUE.get(table, []):
            seen = {self._unique_key(r, columns) for r in self.rows(table)}
            for row in staged:
                key = self._unique_key(row, columns)
                if key in seen:
                    return _unique_violation(table, columns)
                seen.add(key)
        self.rows(table).extend(staged)
        return _response(201, deepcopy(staged))

    def _update(self, table: str, patch: dict, filters) -> httpx.Response:
        targets = [r for r in self.rows(table) if _matches(r, filters)]
        for columns in UNIQUE.get(table, []):
            for target in targets:
                candidate = self._unique_key({**target, **patch}, columns)
                clash = any(
                    other is not target and self._unique_key(other, columns) == candidate
                    for other in self.rows(table)
                )
                if clash:
                    return _unique_violation(table, columns)
        for target in targets:
            target.update(deepcopy(patch))
        return _response(200, deepcopy(targets))

    @staticmethod
    def _unique_key(row: dict, columns: tuple) -> tuple:
        return tuple(_as_text(row.get(c)) for c in columns)

    @staticmethod
    def _with_defaults(table: str, row: dict) -> dict:
        return {
            "id": str(uuid4()),
            "created_at": datetime.now(timezone.utc).isoformat(),
            **deepcopy(DEFAULTS.get(table, {})),
            **deepcopy(row),
        }
