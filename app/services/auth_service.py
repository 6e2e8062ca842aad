"""Registration and sign-in against Supabase Auth."""

from __future__ import annotations

import logging
from typing import Any

from app.config import settings
from app.schemas.user import LoginRequest, RegisterRequest, Role
from app.services.common import SupabaseService
from app.utils.errors import (
    AppError,
    ConflictError,
    DuplicateRecordError,
    InvalidInputError,
    UnauthorizedError,
)
from app.utils.time import now_utc
from supabase import Client

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_allowed_email(email: str, domain: str | None = None) -> bool:
    """Return True when ``email`` belongs to the configured college domain."""
    allowed = (settings.allowed_email_domain if domain is None else domain).strip().lower()
    if not allowed:
        return True
    return normalize_email(email).endswith("@" + allowed.lstrip("@"))


def _auth_message(exc: Exception, fallback: str) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return str(message) if message else fallback


class AuthService:
    """Create accounts and exchange credentials for sessions."""

    def __init__(self, auth_client: Client, db_client: Client) -> None:
        self.auth_client = auth_client
        self.db = SupabaseService(db_client)

    def register(self, payload: RegisterRequest) -> dict[str, Any]:
        """Sign up a student and create their profile row."""
        email = normalize_email(payload.email)
        if not is_allowed_email(email):
            raise InvalidInputError("Please use your official college email address")

        student_id = payload.student_id
        if self.db.find_one("users", {"student_id": student_id}, columns="id"):
            raise ConflictError("Student ID is already registered", code="STUDENT_ID_TAKEN")

        try:
            response = self.auth_client.auth.sign_up(
                {
                    "email": email,
                    "password": payload.password,
                    "options": {"data": {"display_name": payload.display_name}},
                }
            )
        except Exception as exc:
            message = _auth_message(exc, "Registration failed")
            if "already" in message.lower():
                raise ConflictError("Email is already registered", code="EMAIL_TAKEN") from exc
            raise InvalidInputError(message) from exc

        if not response or not response.user:
            raise InvalidInputError("Registration failed")

        try:
            profile = self.db.insert_one(
                "users",
                {
                    "id": str(response.user.id),
                    "email": email,
                    "display_name": payload.display_name,
                    "student_id": student_id,
                    "role": Role.STUDENT.value,
                    "created_at": now_utc().isoformat(),
                },
            )
        except AppError as exc:
            logger.warning(
                "Auth user %s (%s) was created but its profile row was not",
                response.user.id,
                email,
            )
            if isinstance(exc, DuplicateRecordError):
                raise ConflictError("Account is already registered", code="EMAIL_TAKEN") from exc
            raise

        logger.info("Registered student account %s", profile["id"])
        return {"user": profile, "session": response.session}

    def login(self, payload: LoginRequest) -> dict[str, Any]:
        """Sign in with email and password and return the session tokens."""
        try:
            response = self.auth_client.auth.sign_in_with_password(
                {"email": normalize_email(payload.email), "password": payload.password}
            )
        except Exception as exc:
            raise UnauthorizedError("Invalid email or password") from exc

        if not response or not response.session or not response.user:
            raise UnauthorizedError("Invalid email or password")

        session = response.session
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_at": session.expires_at,
            "user_id": str(response.user.id),
        }
