"""FastAPI dependency injection helpers."""

from __future__ import annotations

import threading
import time
from typing import Any

from fastapi import Depends, Header

from app.config import settings
from app.schemas.user import CurrentUser, Role
from app.services.common import SupabaseService
from app.utils.errors import NotFoundError, UnauthorizedError
from app.utils.supabase_client import get_service_client, get_supabase_client
from supabase import Client

_token_cache: dict[str, tuple[float, Any]] = {}
_cache_lock = threading.Lock()


def _cache_get(cache: dict[Any, tuple[float, Any]], key: Any) -> Any | None:
    """Return a cache value when present and not expired."""
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
    max_entries: int,
) -> None:
    """Store a bounded cache value with TTL."""
    if ttl_seconds <= 0:
        return

    with _cache_lock:
        bounded_max_entries = max(1, max_entries)
        if len(cache) >= bounded_max_entries:
            oldest_key = next(iter(cache))
            cache.pop(oldest_key, None)
        cache[key] = (time.monotonic() + ttl_seconds, value)


def get_db_client() -> Client:
    """Return the privileged Supabase client used by backend services."""
    return get_service_client()


def get_auth_client() -> Client:
    """Return the anon-key Supabase client used for Supabase Auth calls."""
    return get_supabase_client()


def get_authenticated_user(authorization: str = Header(None)) -> Any:
    """Extract and validate a Supabase JWT from the Authorization header.

    Raises:
        UnauthorizedError: 401 if the header is missing, malformed, or
            the token cannot be validated.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")

    token = authorization.split(" ", 1)[1]
    cached_user = _cache_get(_token_cache, token)
    if cached_user is not None:
        return cached_user

    supabase = get_supabase_client()

    try:
        response = supabase.auth.get_user(token)
        if not response or not response.user:
            raise UnauthorizedError("Invalid token")
        _cache_set(
            _token_cache,
            token,
            response.user,
            settings.auth_token_cache_ttl_seconds,
            settings.auth_token_cache_max_entries,
        )
        return response.user
    except UnauthorizedError:
        raise
    except Exception as exc:
        raise UnauthorizedError("Invalid or expired token") from exc


def build_current_user(auth_user: Any, profile: dict[str, Any] | None) -> CurrentUser:
    """Merge the Supabase Auth user with its profile row.

    Accounts without a profile row are treated as students.
    """
    profile = profile or {}
    metadata = getattr(auth_user, "user_metadata", None) or {}
    return CurrentUser(
        id=str(auth_user.id),
        email=str(profile.get("email") or getattr(auth_user, "email", "") or ""),
        role=Role(profile.get("role") or Role.STUDENT),
        display_name=profile.get("display_name") or metadata.get("display_name"),
        student_id=profile.get("student_id"),
    )


def get_current_user(
    auth_user: Any = Depends(get_authenticated_user),
    client: Client = Depends(get_db_client),
) -> CurrentUser:
    """Return the caller's identity and role for protected routes."""
    db = SupabaseService(client)
    try:
        profile = db.get_user(str(auth_user.id))
    except NotFoundError:
        profile = None
    return build_current_user(auth_user, profile)
