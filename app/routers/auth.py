"""Authentication endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_auth_client, get_current_user, get_db_client
from app.schemas.user import CurrentUser, LoginRequest, RegisterRequest
from app.services.auth_service import AuthService
from supabase import Client

router = APIRouter()


@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest,
    auth_client: Client = Depends(get_auth_client),
    client: Client = Depends(get_db_client),
) -> dict:
    """Register a student account with a college email address."""
    service = AuthService(auth_client, client)
    return service.register(payload)


@router.post("/login")
def login(
    payload: LoginRequest,
    auth_client: Client = Depends(get_auth_client),
    client: Client = Depends(get_db_client),
) -> dict:
    """Exchange email and password for Supabase session tokens."""
    service = AuthService(auth_client, client)
    return {"session": service.login(payload)}


@router.get("/session")
def auth_session(user: CurrentUser = Depends(get_current_user)) -> dict:
    """Return the currently authenticated user and role."""
    return {"user": user}


@router.post("/signout")
def auth_signout() -> dict:
    """Return success for stateless sign-out handling."""
    return {"success": True}
