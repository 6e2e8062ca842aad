"""Account endpoints: own profile and admin student management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_current_user, get_db_client
from app.schemas.user import CurrentUser, ProfileUpdate, Role, RoleUpdate, UserResponse
from app.services.user_service import UserService
from supabase import Client

router = APIRouter()


@router.get("/me")
def get_profile(
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the caller's profile row."""
    service = UserService(client)
    return {"user": UserResponse.model_validate(service.get_user(user.id))}


@router.patch("/me")
def update_profile(
    payload: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Update the caller's display name or student id."""
    service = UserService(client)
    return {"user": UserResponse.model_validate(service.update_profile(user, payload))}


@router.get("")
def list_users(
    role: Role | None = Query(default=None),
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """List accounts, optionally filtered by role."""
    service = UserService(client)
    users = service.list_users(user, role)
    return {"users": [UserResponse.model_validate(row) for row in users]}


@router.put("/{user_id}/role")
def update_role(
    user_id: str,
    payload: RoleUpdate,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Promote or demote an account."""
    service = UserService(client)
    updated = service.update_role(user, user_id, payload.role)
    return {"user": UserResponse.model_validate(updated)}


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete an account profile."""
    service = UserService(client)
    service.delete_user(user, user_id)
    return {"success": True}
