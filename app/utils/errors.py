"""Custom exception hierarchy for the Campus Vote API."""

from __future__ import annotations


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        """Serialize the error in the API standard shape."""
        return {"error": self.message, "code": self.code}


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class ForbiddenError(AppError):
    """Raised when the user lacks permission for the action."""

    def __init__(self, reason: str = "You don't have permission") -> None:
        super().__init__(message=reason, code="FORBIDDEN", status_code=403)


class ConflictError(AppError):
    """Raised on duplicate/conflicting operations."""

    def __init__(self, reason: str, code: str = "CONFLICT") -> None:
        super().__init__(message=reason, code=code, status_code=409)


class DuplicateRecordError(ConflictError):
    """Raised when the store rejects a write on a unique constraint."""

    def __init__(self, reason: str = "Record already exists") -> None:
        super().__init__(reason, code="DUPLICATE")


class AlreadyVotedError(ConflictError):
    """Raised when a voter already has a vote recorded for the election."""

    def __init__(self) -> None:
        super().__init__("You have already voted in this election", code="ALREADY_VOTED")


class OutsideVotingWindowError(ConflictError):
    """Raised when a vote arrives before the election starts or after it ends."""

    def __init__(self, reason: str = "Election is not open for voting") -> None:
        super().__init__(reason, code="OUTSIDE_VOTING_WINDOW")


class UnauthorizedError(AppError):
    """Raised when the caller is not authenticated."""

    def __init__(self, reason: str = "Unauthorized") -> None:
        super().__init__(message=reason, code="UNAUTHORIZED", status_code=401)


class InvalidInputError(AppError):
    """Raised for request payload or parameter validation issues."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_INPUT", status_code=422)


class StoreUnavailableError(AppError):
    """Raised when Supabase cannot be reached or times out."""

    def __init__(self, reason: str = "Record store is unavailable") -> None:
        super().__init__(message=reason, code="STORE_UNAVAILABLE", status_code=503)
