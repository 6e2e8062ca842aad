"""Vote casting and voting history."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.schemas.user import CurrentUser
from app.services.activity_service import ActivityService
from app.services.common import SupabaseService, index_by_id
from app.services.election_service import with_phase
from app.services.voting_rules import eligibility_failure
from app.utils.errors import AlreadyVotedError, DuplicateRecordError, NotFoundError
from app.utils.time import now_utc
from supabase import Client

logger = logging.getLogger(__name__)


class VoteService:
    """Record votes and read them back.

    Votes are immutable: there is no update or delete path. The store's
    unique constraint on ``(election_id, voter_id)`` is what ultimately
    guarantees one vote per voter per election; the in-process checks only
    give a friendlier answer before the write.
    """

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)
        self.activity = ActivityService(client)

    def list_votes(
        self,
        election_id: str | None = None,
        voter_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return votes filtered by election and/or voter, oldest first."""
        filters: dict[str, Any] = {}
        if election_id:
            filters["election_id"] = election_id
        if voter_id:
            filters["voter_id"] = voter_id
        return self.db.select_many("votes", filters=filters or None, order_by="created_at")

    def has_voted(self, voter_id: str, election_id: str) -> bool:
        """Return True when ``voter_id`` already voted in the election."""
        return bool(
            self.db.select_many(
                "votes",
                filters={"election_id": election_id, "voter_id": voter_id},
                columns="id",
                limit=1,
            )
        )

    def cast_vote(
        self,
        voter: CurrentUser,
        election_id: str,
        candidate_id: str,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Cast ``voter``'s single vote in an election and return the vote row."""
        current = now or now_utc()

        election = self.db.select_one("elections", {"id": election_id}, not_found_label="Election")

        candidate = self.db.find_one("candidates", {"id": candidate_id})
        if candidate is None or str(candidate["election_id"]) != str(election_id):
            raise NotFoundError("Candidate")

        existing = self.list_votes(election_id=election_id, voter_id=voter.id)
        failure = eligibility_failure(voter.id, election, current, existing)
        if failure is not None:
            raise failure

        try:
            vote = self.db.insert_one(
                "votes",
                {
                    "election_id": election_id,
                    "candidate_id": candidate_id,
                    "voter_id": voter.id,
                    "created_at": current.isoformat(),
                },
            )
        except DuplicateRecordError as exc:
            raise AlreadyVotedError() from exc

        logger.info("Vote %s recorded in election %s", vote["id"], election_id)
        self.activity.append(voter, election)
        return vote

    def history(self, voter_id: str) -> list[dict[str, Any]]:
        """Return the voter's votes with their election and candidate, newest first.

        Entries whose election or candidate no longer exists are left out.
        """
        votes = self.db.select_many(
            "votes",
            filters={"voter_id": voter_id},
            order_by="created_at",
            descending=True,
        )
        if not votes:
            return []

        elections = index_by_id(
            self.db.select_in("elections", "id", [vote["election_id"] for vote in votes])
        )
        candidates = index_by_id(
            self.db.select_in("candidates", "id", [vote["candidate_id"] for vote in votes])
        )

        now = now_utc()
        entries: list[dict[str, Any]] = []
        for vote in votes:
            election = elections.get(str(vote["election_id"]))
            candidate = candidates.get(str(vote["candidate_id"]))
            if election is None or candidate is None:
                continue
            entries.append(
                {
                    "vote": vote,
                    "election": with_phase(election, now),
                    "candidate": candidate,
                }
            )
        return entries
