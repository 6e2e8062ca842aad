"""Candidate endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_current_user, get_db_client
from app.schemas.election import CandidateCreate, CandidateResponse, CandidateUpdate
from app.schemas.user import CurrentUser
from app.services.candidate_service import CandidateService
from supabase import Client

router = APIRouter()


@router.get("")
def list_candidates(
    election_id: str | None = Query(default=None),
    _: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """List candidates, optionally for one election."""
    service = CandidateService(client)
    candidates = service.list_candidates(election_id)
    return {"candidates": [CandidateResponse.model_validate(row) for row in candidates]}


@router.post("", status_code=201)
def create_candidate(
    payload: CandidateCreate,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Add a candidate to an election."""
    service = CandidateService(client)
    return {"candidate": CandidateResponse.model_validate(service.create(user, payload))}


@router.get("/{candidate_id}")
def get_candidate(
    candidate_id: str,
    _: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return one candidate."""
    service = CandidateService(client)
    return {"candidate": CandidateResponse.model_validate(service.get_candidate(candidate_id))}


@router.patch("/{candidate_id}")
def update_candidate(
    candidate_id: str,
    payload: CandidateUpdate,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Edit a candidate."""
    service = CandidateService(client)
    candidate = service.update(user, candidate_id, payload)
    return {"candidate": CandidateResponse.model_validate(candidate)}


@router.delete("/{candidate_id}")
def delete_candidate(
    candidate_id: str,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Remove a candidate that has no votes."""
    service = CandidateService(client)
    service.delete(user, candidate_id)
    return {"success": True}
