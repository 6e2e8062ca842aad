"""API router package."""

from app.routers import activity, auth, candidates, elections, reports, users, votes

__all__ = [
    "activity",
    "auth",
    "candidates",
    "elections",
    "reports",
    "users",
    "votes",
]
