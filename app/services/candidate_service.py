"""Candidate management service."""

from __future__ import annotations

import logging
from typing import Any

from app.schemas.election import CandidateCreate, CandidateUpdate
from app.schemas.user import CurrentUser, Role
from app.services.common import SupabaseService, require_role
from app.utils.errors import ConflictError, NotFoundError
from app.utils.time import now_utc
from supabase import Client

logger = logging.getLogger(__name__)


class CandidateService:
    """Add, edit and remove the candidates standing in an election."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def list_candidates(self, election_id: str | None = None) -> list[dict[str, Any]]:
        """Return candidates newest first, optionally for one election."""
        filters = {"election_id": election_id} if election_id else None
        return self.db.select_many(
            "candidates",
            filters=filters,
            order_by="created_at",
            descending=True,
        )

    def get_candidate(self, candidate_id: str) -> dict[str, Any]:
        """Return one candidate."""
        return self.db.select_one("candidates", {"id": candidate_id}, not_found_label="Candidate")

    def create(self, actor: CurrentUser, payload: CandidateCreate) -> dict[str, Any]:
        """Add a candidate to an existing election (admin only)."""
        require_role(actor, {Role.ADMIN}, "Only administrators can add candidates")
        self.db.select_one("elections", {"id": payload.election_id}, not_found_label="Election")

        row = self.db.insert_one(
            "candidates",
            {
                "name": payload.name,
                "department": payload.department,
                "manifesto": payload.manifesto,
                "photo_url": payload.photo_url or None,
                "election_id": payload.election_id,
                "created_at": now_utc().isoformat(),
            },
        )
        logger.info("Candidate %s added to election %s", row["id"], payload.election_id)
        return row

    def update(
        self,
        actor: CurrentUser,
        candidate_id: str,
        payload: CandidateUpdate,
    ) -> dict[str, Any]:
        """Apply a partial update to a candidate (admin only)."""
        require_role(actor, {Role.ADMIN}, "Only administrators can edit candidates")

        changes = {
            key: (value or None) if key == "photo_url" else value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key == "photo_url"
        }
        if not changes:
            return self.get_candidate(candidate_id)

        rows = self.db.update("candidates", {"id": candidate_id}, changes)
        if not rows:
            raise NotFoundError("Candidate")
        return rows[0]

    def delete(self, actor: CurrentUser, candidate_id: str) -> None:
        """Remove a candidate that has not received any votes (admin only)."""
        require_role(actor, {Role.ADMIN}, "Only administrators can delete candidates")
        self.get_candidate(candidate_id)

        if self.db.count("votes", {"candidate_id": candidate_id}):
            raise ConflictError(
                "Candidate already has votes and cannot be removed",
                code="CANDIDATE_HAS_VOTES",
            )
        self.db.delete("candidates", {"id": candidate_id})
        logger.info("Candidate %s deleted by %s", candidate_id, actor.id)
