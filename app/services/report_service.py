"""Election results and admin reporting."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.schemas.user import CurrentUser, Role
from app.services.common import SupabaseService, require_role
from app.services.election_service import ElectionService
from app.services.voting_rules import ElectionPhase, tally, vote_share
from app.utils.time import now_utc
from supabase import Client


class ReportService:
    """Tally elections and aggregate dashboard counters."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)
        self.elections = ElectionService(client)

    def results(self, election_id: str, now: datetime | None = None) -> dict[str, Any]:
        """Return ranked candidates with vote counts and shares for one election."""
        election = self.elections.get_election(election_id, now)
        candidates = self.db.select_many(
            "candidates",
            filters={"election_id": election_id},
            order_by="created_at",
        )
        votes = self.db.select_many(
            "votes",
            filters={"election_id": election_id},
            columns="id,election_id,candidate_id",
        )

        ranked = tally(candidates, votes, election_id=election_id)
        total = sum(count for _, count in ranked)
        results = []
        for candidate, count in ranked:
            payload = dict(candidate)
            payload["vote_count"] = count
            payload["percentage"] = vote_share(count, total)
            results.append(payload)

        return {"election": election, "results": results, "total_votes": total}

    def summary(self, actor: CurrentUser, now: datetime | None = None) -> dict[str, int]:
        """Return counters for the admin dashboard."""
        require_role(actor, {Role.ADMIN}, "Only administrators can view reports")

        elections = self.elections.list_elections(now=now or now_utc())
        by_phase = {phase: 0 for phase in ElectionPhase}
        for election in elections:
            by_phase[election["phase"]] += 1

        return {
            "total_elections": len(elections),
            "active_elections": by_phase[ElectionPhase.ACTIVE],
            "upcoming_elections": by_phase[ElectionPhase.UPCOMING],
            "completed_elections": by_phase[ElectionPhase.COMPLETED],
            "total_candidates": self.db.count("candidates"),
            "total_students": self.db.count("users", {"role": Role.STUDENT.value}),
            "total_votes": self.db.count("votes"),
        }
