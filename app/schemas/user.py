"""User, role and authentication schemas."""

from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints


class Role(StrEnum):
    """Account roles."""

    STUDENT = "student"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    """Request-scoped identity of the caller."""

    id: str
    email: str
    role: Role = Role.STUDENT
    display_name: str | None = None
    student_id: str | None = None


class UserResponse(BaseModel):
    """Public user representation."""

    id: str
    email: str
    display_name: str | None = None
    student_id: str | None = None
    role: Role
    created_at: datetime | None = None


class RegisterRequest(BaseModel):
    """Request body for student self-registration."""

    email: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
    password: str = Field(..., min_length=8)
    display_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
    student_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=5)]


class LoginRequest(BaseModel):
    """Request body for email/password sign-in."""

    email: str
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    model_config = ConfigDict(str_strip_whitespace=True)

    display_name: str | None = Field(None, min_length=3)
    student_id: str | None = Field(None, min_length=5)


class RoleUpdate(BaseModel):
    """Request body for promoting or demoting an account."""

    role: Role
