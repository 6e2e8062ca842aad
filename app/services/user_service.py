"""Student account administration and profile settings."""

from __future__ import annotations

import logging
from typing import Any

from app.schemas.user import CurrentUser, ProfileUpdate, Role
from app.services.common import SupabaseService, invalidate_user_cache, require_role
from app.utils.errors import ConflictError, DuplicateRecordError, ForbiddenError, NotFoundError
from supabase import Client

logger = logging.getLogger(__name__)


class UserService:
    """Read and administer user profile rows."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def get_user(self, user_id: str) -> dict[str, Any]:
        """Return one user profile."""
        return self.db.get_user(user_id)

    def list_users(self, actor: CurrentUser, role: Role | None = None) -> list[dict[str, Any]]:
        """Return accounts newest first, optionally only one role (admin only)."""
        require_role(actor, {Role.ADMIN}, "Only administrators can list accounts")
        filters = {"role": role.value} if role else None
        return self.db.select_many(
            "users",
            filters=filters,
            order_by="created_at",
            descending=True,
        )

    def update_role(self, actor: CurrentUser, user_id: str, role: Role) -> dict[str, Any]:
        """Promote or demote an account (admin only)."""
        require_role(actor, {Role.ADMIN}, "Only administrators can change roles")
        if str(user_id) == actor.id:
            raise ForbiddenError("You cannot change your own role")

        rows = self.db.update("users", {"id": user_id}, {"role": role.value})
        if not rows:
            raise NotFoundError("User")
        invalidate_user_cache(user_id)
        logger.info("User %s set to role %s by %s", user_id, role.value, actor.id)
        return rows[0]

    def delete_user(self, actor: CurrentUser, user_id: str) -> None:
        """Delete an account profile (admin only). Recorded votes are kept."""
        require_role(actor, {Role.ADMIN}, "Only administrators can delete accounts")
        if str(user_id) == actor.id:
            raise ForbiddenError("You cannot delete your own account")

        removed = self.db.delete("users", {"id": user_id})
        if not removed:
            raise NotFoundError("User")
        invalidate_user_cache(user_id)
        logger.info("User %s deleted by %s", user_id, actor.id)

    def update_profile(self, user: CurrentUser, payload: ProfileUpdate) -> dict[str, Any]:
        """Update the caller's own display name and student id."""
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not changes:
            return self.get_user(user.id)

        try:
            rows = self.db.update("users", {"id": user.id}, changes)
        except DuplicateRecordError as exc:
            raise ConflictError("Student ID is already registered", code="STUDENT_ID_TAKEN") from exc
        if not rows:
            raise NotFoundError("User")
        invalidate_user_cache(user.id)
        return rows[0]
