"""Election endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_current_user, get_db_client
from app.schemas.election import (
    CandidateResponse,
    ElectionCreate,
    ElectionResponse,
    ElectionResults,
    ElectionUpdate,
)
from app.schemas.user import CurrentUser
from app.services.candidate_service import CandidateService
from app.services.election_service import ElectionService
from app.services.report_service import ReportService
from app.services.vote_service import VoteService
from app.services.voting_rules import ElectionPhase
from supabase import Client

router = APIRouter()


@router.get("")
def list_elections(
    phase: ElectionPhase | None = Query(default=None),
    _: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """List elections newest first with their current phase."""
    service = ElectionService(client)
    elections = service.list_elections(phase=phase)
    return {"elections": [ElectionResponse.model_validate(row) for row in elections]}


@router.post("", status_code=201)
def create_election(
    payload: ElectionCreate,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create a new election."""
    service = ElectionService(client)
    return {"election": ElectionResponse.model_validate(service.create(user, payload))}


@router.get("/{election_id}")
def get_election(
    election_id: str,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return one election, its candidates and whether the caller has voted."""
    election = ElectionService(client).get_election(election_id)
    candidates = CandidateService(client).list_candidates(election_id)
    has_voted = VoteService(client).has_voted(user.id, election_id)
    return {
        "election": ElectionResponse.model_validate(election),
        "candidates": [CandidateResponse.model_validate(row) for row in candidates],
        "has_voted": has_voted,
    }


@router.patch("/{election_id}")
def update_election(
    election_id: str,
    payload: ElectionUpdate,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Edit an election."""
    service = ElectionService(client)
    election = service.update(user, election_id, payload)
    return {"election": ElectionResponse.model_validate(election)}


@router.delete("/{election_id}")
def delete_election(
    election_id: str,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete an election with its candidates and votes."""
    service = ElectionService(client)
    return service.delete(user, election_id)


@router.get("/{election_id}/candidates")
def list_election_candidates(
    election_id: str,
    _: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """List the candidates standing in an election."""
    service = CandidateService(client)
    candidates = service.list_candidates(election_id)
    return {"candidates": [CandidateResponse.model_validate(row) for row in candidates]}


@router.get("/{election_id}/results", response_model=ElectionResults)
def election_results(
    election_id: str,
    _: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return ranked results for an election."""
    service = ReportService(client)
    return service.results(election_id)
