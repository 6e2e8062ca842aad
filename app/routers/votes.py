"""Vote endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_current_user, get_db_client
from app.schemas.user import CurrentUser, Role
from app.schemas.vote import VoteCreate, VoteResponse, VotingHistoryEntry
from app.services.vote_service import VoteService
from supabase import Client

router = APIRouter()


@router.post("", status_code=201)
def cast_vote(
    payload: VoteCreate,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Cast the caller's vote in an election."""
    service = VoteService(client)
    vote = service.cast_vote(user, payload.election_id, payload.candidate_id)
    return {"vote": VoteResponse.model_validate(vote)}


@router.get("")
def list_votes(
    election_id: str | None = Query(default=None),
    voter_id: str | None = Query(default=None),
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """List votes. Students only ever see their own."""
    if user.role != Role.ADMIN:
        voter_id = user.id
    service = VoteService(client)
    votes = service.list_votes(election_id=election_id, voter_id=voter_id)
    return {"votes": [VoteResponse.model_validate(row) for row in votes]}


@router.get("/me")
def voting_history(
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the caller's voting history."""
    service = VoteService(client)
    history = service.history(user.id)
    return {"history": [VotingHistoryEntry.model_validate(entry) for entry in history]}
