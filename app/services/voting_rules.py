"""Pure voting rules: election phase, eligibility and tallying.

Nothing in this module touches the record store. Phase is always derived
from the election window at the moment of evaluation and is never stored.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import datetime
from enum import StrEnum
from typing import Any

from app.utils.errors import AlreadyVotedError, AppError, OutsideVotingWindowError
from app.utils.time import now_utc, parse_timestamp


class ElectionPhase(StrEnum):
    """Where an election sits relative to its voting window."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        """Position in the Upcoming < Active < Completed ordering."""
        return _PHASE_RANK[self]


_PHASE_RANK = {
    ElectionPhase.UPCOMING: 0,
    ElectionPhase.ACTIVE: 1,
    ElectionPhase.COMPLETED: 2,
}


def phase(now: datetime, start_date: datetime, end_date: datetime) -> ElectionPhase:
    """Classify ``now`` against an election window (inclusive on both ends)."""
    if now < start_date:
        return ElectionPhase.UPCOMING
    if now > end_date:
        return ElectionPhase.COMPLETED
    return ElectionPhase.ACTIVE


def election_phase(election: Mapping[str, Any], now: datetime | None = None) -> ElectionPhase:
    """Return the phase of a stored election row."""
    return phase(
        now or now_utc(),
        parse_timestamp(election["start_date"]),
        parse_timestamp(election["end_date"]),
    )


def has_voted_in(voter_id: str, election_id: str, votes: Iterable[Mapping[str, Any]]) -> bool:
    """Return True when ``votes`` holds a vote by ``voter_id`` in the election."""
    return any(
        str(vote["election_id"]) == str(election_id)
        and str(vote.get("voter_id", voter_id)) == str(voter_id)
        for vote in votes
    )


def eligibility_failure(
    voter_id: str,
    election: Mapping[str, Any],
    now: datetime,
    existing_votes: Iterable[Mapping[str, Any]],
) -> AppError | None:
    """Return why ``voter_id`` may not vote in ``election`` at ``now``, or None."""
    if has_voted_in(voter_id, str(election["id"]), existing_votes):
        return AlreadyVotedError()

    current = election_phase(election, now)
    if current == ElectionPhase.UPCOMING:
        return OutsideVotingWindowError("Election has not started yet")
    if current == ElectionPhase.COMPLETED:
        return OutsideVotingWindowError("Election has already ended")
    return None


def can_vote(
    voter_id: str,
    election: Mapping[str, Any],
    now: datetime,
    existing_votes: Iterable[Mapping[str, Any]],
) -> bool:
    """Return True when the voter may cast a vote in the election right now."""
    return eligibility_failure(voter_id, election, now, existing_votes) is None


def tally(
    candidates: Iterable[Mapping[str, Any]],
    votes: Iterable[Mapping[str, Any]],
    election_id: str | None = None,
) -> list[tuple[Mapping[str, Any], int]]:
    """Count votes per candidate and rank them.

    Ordering is by count descending, then candidate id ascending so that ties
    come out the same way every time. When ``election_id`` is given, votes
    for other elections are ignored.
    """
    counts = Counter(
        str(vote["candidate_id"])
        for vote in votes
        if election_id is None or str(vote["election_id"]) == str(election_id)
    )
    ranked = [(candidate, counts.get(str(candidate["id"]), 0)) for candidate in candidates]
    ranked.sort(key=lambda item: (-item[1], str(item[0]["id"])))
    return ranked


def vote_share(count: int, total: int) -> float:
    """Return ``count`` as a percentage of ``total`` rounded to one decimal."""
    if total <= 0:
        return 0.0
    return round(count * 100 / total, 1)
