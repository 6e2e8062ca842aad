"""Live voter activity feed.

Activity events are a best-effort broadcast written after each vote. They are
never consulted for tallying and may be pruned at any time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from app.config import settings
from app.schemas.user import CurrentUser
from app.services.common import SupabaseService
from app.utils.time import hours_ago, humanize_relative_time, now_utc
from supabase import Client

logger = logging.getLogger(__name__)


def voter_initials(display_name: str | None, email: str | None) -> str:
    """Return up to two uppercase initials for the feed avatar."""
    source = (display_name or email or "").strip()
    initials = "".join(part[0] for part in source.split() if part)
    return initials.upper()[:2]


def voter_name(display_name: str | None, email: str | None) -> str:
    """Return the name shown in the feed."""
    if display_name and display_name.strip():
        return display_name.strip()
    if email and email.split("@", 1)[0]:
        return email.split("@", 1)[0]
    return "Anonymous"


class ActivityService:
    """Append to and read the voter activity feed."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def append(self, voter: CurrentUser, election: dict[str, Any]) -> dict[str, Any] | None:
        """Record that ``voter`` voted in ``election``.

        Failures are logged and swallowed; the vote this follows must stand.
        """
        try:
            return self.db.insert_one(
                "voter_activity",
                {
                    "voter_id": voter.id,
                    "voter_name": voter_name(voter.display_name, voter.email),
                    "voter_initials": voter_initials(voter.display_name, voter.email),
                    "election_id": str(election["id"]),
                    "election_title": election["title"],
                    "created_at": now_utc().isoformat(),
                },
            )
        except Exception:
            logger.warning(
                "Voter activity append failed for election %s",
                election.get("id"),
                exc_info=True,
            )
            return None

    def recent(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return the most recent events, newest first."""
        bounded = max(1, min(limit or settings.activity_feed_limit, 100))
        rows = self.db.select_many(
            "voter_activity",
            order_by="created_at",
            descending=True,
            limit=bounded,
        )
        now = now_utc()
        feed = []
        for row in rows:
            payload = dict(row)
            payload["relative_time"] = humanize_relative_time(row.get("created_at"), now)
            feed.append(payload)
        return feed

    def prune(self, older_than_hours: int | None = None) -> int:
        """Delete events older than the retention window; return how many."""
        hours = older_than_hours or settings.activity_retention_hours
        cutoff = hours_ago(hours).isoformat()
        removed = self.db.execute(
            self.db.client.table("voter_activity").delete().lt("created_at", cutoff),
            default=[],
        )
        return len(removed)


class VoterActivityFeed:
    """Restartable async stream of feed snapshots.

    Each ``async for`` starts a fresh polling loop that yields the current
    snapshot immediately and again whenever the newest event changes.
    ``stop()`` ends the loop that is currently running.
    """

    def __init__(
        self,
        service: ActivityService,
        limit: int | None = None,
        poll_interval_seconds: float | None = None,
    ) -> None:
        self.service = service
        self.limit = limit
        self.poll_interval_seconds = (
            settings.activity_poll_interval_seconds
            if poll_interval_seconds is None
            else poll_interval_seconds
        )
        self._stop = asyncio.Event()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def __aiter__(self) -> AsyncIterator[list[dict[str, Any]]]:
        self._stop = asyncio.Event()
        return self._snapshots()

    async def _snapshots(self) -> AsyncIterator[list[dict[str, Any]]]:
        last_marker: tuple[str, str] | None = None
        while not self._stop.is_set():
            snapshot = await asyncio.to_thread(self.service.recent, self.limit)
            marker = (
                (str(snapshot[0]["id"]), str(snapshot[0]["created_at"])) if snapshot else ("", "")
            )
            if marker != last_marker:
                last_marker = marker
                yield snapshot

            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.poll_interval_seconds)
            except TimeoutError:
                continue
