"""Background job modules for periodic maintenance tasks."""

from app.jobs.prune_activity import prune_voter_activity

__all__ = ["prune_voter_activity"]
