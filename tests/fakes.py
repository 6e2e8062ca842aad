"""In-memory stand-in for the Supabase query builder used by the services."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx
from postgrest import APIError

UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    "users": [("email",), ("student_id",)],
    "votes": [("election_id", "voter_id")],
}

# parent table -> (child table, referencing column), mirroring "on delete cascade".
CASCADES: dict[str, list[tuple[str, str]]] = {
    "elections": [("candidates", "election_id"), ("votes", "election_id")],
    "candidates": [("votes", "candidate_id")],
}


@dataclass
class FakeResponse:
    data: Any
    count: int | None = None


@dataclass
class FakeQuery:
    store: FakeSupabase
    table: str
    action: str = "select"
    columns: str = "*"
    payload: Any = None
    count_mode: str | None = None
    head: bool = False
    filters: list[tuple[str, str, Any]] = field(default_factory=list)
    order_by: tuple[str, bool] | None = None
    limit_value: int | None = None
    offset_value: int = 0

    def select(self, columns: str = "*", count: str | None = None, head: bool = False):
        self.action = "select"
        self.columns = columns
        self.count_mode = count
        self.head = head
        return self

    def insert(self, payload: Any):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict[str, Any]):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column: str, values: list[Any]):
        self.filters.append(("in", column, [str(value) for value in values]))
        return self

    def lt(self, column: str, value: Any):
        self.filters.append(("lt", column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, value: int):
        self.limit_value = value
        return self

    def offset(self, value: int):
        self.offset_value = value
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        for op, column, value in self.filters:
            current = row.get(column)
            if op == "eq" and str(current) != str(value):
                return False
            if op == "in" and str(current) not in value:
                return False
            if op == "lt" and not (current is not None and str(current) < str(value)):
                return False
        return True

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        if self.columns == "*":
            return dict(row)
        return {name.strip(): row.get(name.strip()) for name in self.columns.split(",")}

    def execute(self) -> FakeResponse:
        return self.store.run(self)


class FakeSupabase:
    """Thread-safe table store that enforces the same unique keys as the schema."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.unavailable: set[str] = set()
        self._lock = threading.Lock()
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(store=self, table=name)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def seed(self, table: str, **values: Any) -> dict[str, Any]:
        row = self._complete(values)
        self.rows(table).append(row)
        return dict(row)

    def _complete(self, values: dict[str, Any]) -> dict[str, Any]:
        row = dict(values)
        row.setdefault("id", str(uuid.uuid4()))
        if "created_at" not in row:
            self._clock += 1
            row["created_at"] = f"2024-01-01T00:00:00.{self._clock:06d}+00:00"
        return row

    def _violates_unique(self, table: str, row: dict[str, Any]) -> bool:
        for key in UNIQUE_KEYS.get(table, []):
            if any(row.get(column) is None for column in key):
                continue
            for existing in self.rows(table):
                if existing["id"] != row["id"] and all(
                    str(existing.get(column)) == str(row.get(column)) for column in key
                ):
                    return True
        return False

    def _remove(self, table: str, doomed: list[dict[str, Any]]) -> None:
        removed = {id(row) for row in doomed}
        self.tables[table] = [row for row in self.rows(table) if id(row) not in removed]
        ids = {str(row["id"]) for row in doomed}
        for child, column in CASCADES.get(table, []):
            orphans = [row for row in self.rows(child) if str(row.get(column)) in ids]
            if orphans:
                self._remove(child, orphans)

    def run(self, query: FakeQuery) -> FakeResponse:
        if query.table in self.unavailable:
            raise httpx.ConnectError("connection refused")

        with self._lock:
            rows = self.rows(query.table)

            if query.action == "insert":
                payloads = query.payload if isinstance(query.payload, list) else [query.payload]
                created = []
                for payload in payloads:
                    row = self._complete(payload)
                    if self._violates_unique(query.table, row):
                        raise APIError(
                            {
                                "code": "23505",
                                "message": "duplicate key value violates unique constraint",
                            }
                        )
                    rows.append(row)
                    created.append(dict(row))
                return FakeResponse(created)

            matched = [row for row in rows if query._matches(row)]

            if query.action == "update":
                updated = []
                for row in matched:
                    candidate = {**row, **query.payload}
                    if self._violates_unique(query.table, candidate):
                        raise APIError(
                            {
                                "code": "23505",
                                "message": "duplicate key value violates unique constraint",
                            }
                        )
                    row.update(query.payload)
                    updated.append(dict(row))
                return FakeResponse(updated)

            if query.action == "delete":
                self._remove(query.table, matched)
                return FakeResponse([dict(row) for row in matched])

            if query.order_by:
                column, desc = query.order_by
                matched = sorted(matched, key=lambda row: str(row.get(column)), reverse=desc)
            matched = matched[query.offset_value :]
            if query.limit_value is not None:
                matched = matched[: query.limit_value]

            if query.head:
                return FakeResponse(None, count=len(matched))
            return FakeResponse([query._project(row) for row in matched], count=len(matched))
