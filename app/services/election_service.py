"""Election administration and read-time phase derivation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.schemas.election import ElectionCreate, ElectionType, ElectionUpdate
from app.schemas.user import CurrentUser, Role
from app.services.common import SupabaseService, require_role
from app.services.voting_rules import ElectionPhase, election_phase
from app.utils.errors import InvalidInputError, NotFoundError
from app.utils.time import now_utc, parse_timestamp
from supabase import Client

logger = logging.getLogger(__name__)


def with_phase(election: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Return a copy of an election row carrying its current phase."""
    payload = dict(election)
    payload["phase"] = election_phase(election, now)
    return payload


class ElectionService:
    """Create, edit and remove elections; list them with derived phases."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def list_elections(
        self,
        phase: ElectionPhase | None = None,
        now: datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Return elections newest first, optionally only those in ``phase``."""
        current = now or now_utc()
        rows = self.db.select_many("elections", order_by="created_at", descending=True)
        elections = [with_phase(row, current) for row in rows]
        if phase is not None:
            elections = [election for election in elections if election["phase"] == phase]
        return elections

    def get_election(self, election_id: str, now: datetime | None = None) -> dict[str, Any]:
        """Return one election with its phase."""
        row = self.db.select_one("elections", {"id": election_id}, not_found_label="Election")
        return with_phase(row, now)

    def create(self, actor: CurrentUser, payload: ElectionCreate) -> dict[str, Any]:
        """Create an election (admin only)."""
        require_role(actor, {Role.ADMIN}, "Only administrators can create elections")

        timestamp = now_utc().isoformat()
        row = self.db.insert_one(
            "elections",
            {
                "title": payload.title,
                "description": payload.description,
                "department": payload.department or None,
                "start_date": parse_timestamp(payload.start_date).isoformat(),
                "end_date": parse_timestamp(payload.end_date).isoformat(),
                "type": payload.type.value,
                "created_by": actor.id,
                "created_at": timestamp,
                "updated_at": timestamp,
            },
        )
        logger.info("Election %s created by %s", row["id"], actor.id)
        return with_phase(row)

    def update(
        self,
        actor: CurrentUser,
        election_id: str,
        payload: ElectionUpdate,
    ) -> dict[str, Any]:
        """Apply a partial update after validating the merged election."""
        require_role(actor, {Role.ADMIN}, "Only administrators can edit elections")

        current = self.db.select_one("elections", {"id": election_id}, not_found_label="Election")
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            return with_phase(current)

        start = parse_timestamp(changes.get("start_date") or current["start_date"])
        end = parse_timestamp(changes.get("end_date") or current["end_date"])
        if end <= start:
            raise InvalidInputError("End date must be after start date")

        election_type = changes.get("type") or ElectionType(current["type"])
        department = changes["department"] if "department" in changes else current.get("department")
        if election_type == ElectionType.DEPARTMENT and not department:
            raise InvalidInputError("Department is required for department elections")

        update: dict[str, Any] = {}
        for key, value in changes.items():
            if value is None and key != "department":
                continue
            if isinstance(value, datetime):
                update[key] = parse_timestamp(value).isoformat()
            elif isinstance(value, ElectionType):
                update[key] = value.value
            elif key == "department":
                update[key] = value or None
            else:
                update[key] = value
        update["updated_at"] = now_utc().isoformat()

        rows = self.db.update("elections", {"id": election_id}, update)
        if not rows:
            raise NotFoundError("Election")
        logger.info("Election %s updated by %s", election_id, actor.id)
        return with_phase(rows[0])

    def delete(self, actor: CurrentUser, election_id: str) -> dict[str, int]:
        """Delete an election together with its votes and candidates.

        Candidates and votes go with the election row through the store's
        ``on delete cascade`` foreign keys, in the same statement.
        """
        require_role(actor, {Role.ADMIN}, "Only administrators can delete elections")
        self.db.select_one("elections", {"id": election_id}, not_found_label="Election")

        candidates = self.db.count("candidates", {"election_id": election_id})
        votes = self.db.count("votes", {"election_id": election_id})
        if not self.db.delete("elections", {"id": election_id}):
            raise NotFoundError("Election")

        logger.info(
            "Election %s deleted by %s (%s candidates, %s votes)",
            election_id,
            actor.id,
            candidates,
            votes,
        )
        return {"candidates_deleted": candidates, "votes_deleted": votes}
