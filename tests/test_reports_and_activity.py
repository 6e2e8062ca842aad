"""Results, dashboard summary, store error mapping and live feed tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from app.services.activity_service import (
    ActivityService,
    VoterActivityFeed,
    voter_initials,
    voter_name,
)
from app.services.common import SupabaseService
from app.services.report_service import ReportService
from app.services.vote_service import VoteService
from app.utils.errors import DuplicateRecordError, ForbiddenError, StoreUnavailableError

JAN_3 = datetime(2024, 1, 3, tzinfo=UTC)


def test_results_rank_candidates_and_total_votes(store, student, election, candidates):
    VoteService(store).cast_vote(student, election["id"], candidates[1]["id"], now=JAN_3)

    report = ReportService(store).results(election["id"])

    assert report["total_votes"] == 1
    assert [row["id"] for row in report["results"]] == [candidates[1]["id"], candidates[0]["id"]]
    assert [row["vote_count"] for row in report["results"]] == [1, 0]
    assert report["results"][0]["percentage"] == 100.0
    assert report["election"]["phase"] == "completed"


def test_summary_counts_and_requires_admin(store, admin, student, election, candidates):
    VoteService(store).cast_vote(student, election["id"], candidates[0]["id"], now=JAN_3)
    service = ReportService(store)

    summary = service.summary(admin)

    assert summary == {
        "total_elections": 1,
        "active_elections": 0,
        "upcoming_elections": 0,
        "completed_elections": 1,
        "total_candidates": 2,
        "total_students": 1,
        "total_votes": 1,
    }
    with pytest.raises(ForbiddenError):
        service.summary(student)


def test_execute_maps_store_failures(store) -> None:
    db = SupabaseService(store)
    db.insert_one("users", {"email": "dup@paterostechnologicalcollege.edu.ph"})

    with pytest.raises(DuplicateRecordError):
        db.insert_one("users", {"email": "dup@paterostechnologicalcollege.edu.ph"})

    store.unavailable.add("users")
    with pytest.raises(StoreUnavailableError):
        db.select_many("users")


@pytest.mark.parametrize(
    ("display_name", "email", "initials", "name"),
    [
        ("Maria Santos", "maria@x.edu", "MS", "Maria Santos"),
        ("Jose Protasio Rizal", None, "JP", "Jose Protasio Rizal"),
        (None, "juan.cruz@x.edu", "J", "juan.cruz"),
        (None, None, "", "Anonymous"),
    ],
)
def test_feed_identity(display_name, email, initials, name) -> None:
    assert voter_initials(display_name, email) == initials
    assert voter_name(display_name, email) == name


def test_recent_activity_is_newest_first_and_bounded(store) -> None:
    base = datetime.now(tz=UTC)
    for minute in range(30):
        store.seed(
            "voter_activity",
            voter_id=f"v{minute}",
            voter_name=f"Voter {minute}",
            voter_initials="V",
            election_id="e1",
            election_title="Student Council 2024",
            created_at=(base - timedelta(minutes=minute)).isoformat(),
        )

    feed = ActivityService(store).recent()

    assert len(feed) == 20
    assert feed[0]["voter_id"] == "v0"
    assert feed[-1]["voter_id"] == "v19"
    assert feed[5]["relative_time"] == "5m"


def test_prune_removes_expired_events(store) -> None:
    now = datetime.now(tz=UTC)
    store.seed("voter_activity", voter_id="old", created_at=(now - timedelta(hours=48)).isoformat())
    store.seed("voter_activity", voter_id="new", created_at=(now - timedelta(hours=1)).isoformat())

    removed = ActivityService(store).prune(older_than_hours=24)

    assert removed == 1
    assert [row["voter_id"] for row in store.rows("voter_activity")] == ["new"]


def test_feed_stream_is_restartable(store, student, election) -> None:
    service = ActivityService(store)
    service.append(student, election)
    feed = VoterActivityFeed(service, limit=5, poll_interval_seconds=0.01)

    async def first_snapshot() -> list[dict]:
        async for snapshot in feed:
            feed.stop()
            return snapshot
        return []

    first = asyncio.run(first_snapshot())
    second = asyncio.run(first_snapshot())

    assert [event["voter_id"] for event in first] == [student.id]
    assert second == first
    assert feed.stopped is True
