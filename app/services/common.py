"""Shared Supabase data access helpers and the role guard."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from typing import Any

import httpx
from postgrest import APIError

from app.config import settings
from app.schemas.user import CurrentUser, Role
from app.utils.errors import (
    DuplicateRecordError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
)
from supabase import Client

logger = logging.getLogger(__name__)
_user_cache: dict[str, tuple[float, dict[str, Any]]] = {}
_cache_lock = threading.Lock()


def _cache_get(cache: dict[Any, tuple[float, Any]], key: Any) -> Any | None:
    now = time.monotonic()
    with _cache_lock:
        entry = cache.get(key)
        if not entry:
            return None
        expires_at, value = entry
        if expires_at <= now:
            cache.pop(key, None)
            return None
        return value


def _cache_set(
    cache: dict[Any, tuple[float, Any]],
    key: Any,
    value: Any,
    ttl_seconds: int,
) -> None:
    if ttl_seconds <= 0:
        return

    with _cache_lock:
        max_entries = max(100, settings.data_cache_max_entries)
        if len(cache) >= max_entries:
            oldest_key = next(iter(cache))
            cache.pop(oldest_key, None)
        cache[key] = (time.monotonic() + ttl_seconds, value)


def invalidate_user_cache(user_id: str) -> None:
    """Drop a cached user row after its profile or role changed."""
    with _cache_lock:
        _user_cache.pop(str(user_id), None)


def is_unique_violation(exc: APIError) -> bool:
    """Return True when a write failed on a unique constraint."""
    message = str(getattr(exc, "message", "")).lower()
    code = str(getattr(exc, "code", "")).lower()
    return code == "23505" or "duplicate key value" in message


def require_role(user: CurrentUser, allowed: set[Role], reason: str | None = None) -> None:
    """Raise ForbiddenError unless ``user`` holds one of the ``allowed`` roles."""
    if user.role not in allowed:
        names = ", ".join(sorted(role.value for role in allowed))
        raise ForbiddenError(reason or f"This action requires role: {names}")


class SupabaseService:
    """Thin helper wrapper around a Supabase client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def execute(self, query, default: Any = None) -> Any:
        """Execute a Supabase query and normalize store errors."""
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            message = str(getattr(exc, "message", None) or "Database request failed")
            if is_unique_violation(exc):
                raise DuplicateRecordError(message) from exc
            raise InvalidInputError(message) from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase request failed: %s", exc)
            raise StoreUnavailableError() from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = settings.slow_query_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow Supabase query %.1fms", elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    def select_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
        not_found_label: str | None = None,
    ) -> dict[str, Any]:
        """Select a single row and raise NotFoundError when missing."""
        row = self.find_one(table, filters, columns)
        if row is None:
            raise NotFoundError(not_found_label or table)
        return row

    def find_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Select a single row or return None."""
        query = self.client.table(table).select(columns)
        for key, value in filters.items():
            query = query.eq(key, value)
        rows = self.execute(query.limit(1), default=[])
        return rows[0] if rows else None

    def select_many(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select many rows from a table with optional filters and paging."""
        query = self.client.table(table).select(columns)
        if filters:
            for key, value in filters.items():
                query = query.eq(key, value)
        if order_by:
            query = query.order(order_by, desc=descending)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return self.execute(query, default=[])

    def select_in(
        self,
        table: str,
        column: str,
        values: Iterable[str],
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """Select rows whose ``column`` is one of ``values``."""
        ids = sorted({str(value) for value in values})
        if not ids:
            return []
        return self.execute(
            self.client.table(table).select(columns).in_(column, ids),
            default=[],
        )

    def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        """Count rows in a table with optional equality filters."""
        query = self.client.table(table).select("*", count="exact", head=True)
        if filters:
            for key, value in filters.items():
                query = query.eq(key, value)
        try:
            response = query.execute()
        except APIError as exc:
            message = getattr(exc, "message", "Database request failed")
            raise InvalidInputError(str(message)) from exc
        except httpx.HTTPError as exc:
            raise StoreUnavailableError() from exc
        return response.count or 0

    def insert_one(self, table: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return the created object."""
        rows = self.execute(self.client.table(table).insert(payload), default=[])
        if not rows:
            raise InvalidInputError(f"Failed to insert into {table}")
        return rows[0]

    def update(
        self,
        table: str,
        filters: dict[str, Any],
        payload: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Update rows by equality filters and return the updated rows."""
        query = self.client.table(table).update(payload)
        for key, value in filters.items():
            query = query.eq(key, value)
        return self.execute(query, default=[])

    def delete(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """Delete rows by equality filters and return removed rows."""
        query = self.client.table(table).delete()
        for key, value in filters.items():
            query = query.eq(key, value)
        return self.execute(query, default=[])

    def get_user(self, user_id: str) -> dict[str, Any]:
        """Return a user profile row."""
        cache_key = str(user_id)
        cached_user = _cache_get(_user_cache, cache_key)
        if cached_user is not None:
            return dict(cached_user)

        user = self.select_one("users", {"id": user_id}, not_found_label="User")
        _cache_set(_user_cache, cache_key, dict(user), settings.user_cache_ttl_seconds)
        return user


def index_by_id(rows: Iterable[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    """Map rows by their string ``id``."""
    return {str(row["id"]): row for row in rows}
