"""APScheduler setup and job registration."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import settings
from app.jobs.prune_activity import prune_voter_activity

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def register_jobs() -> None:
    """Register all periodic jobs if not already present."""
    if scheduler.get_job("prune_voter_activity") is None:
        scheduler.add_job(
            prune_voter_activity,
            IntervalTrigger(
                minutes=max(1, settings.activity_prune_interval_minutes),
                timezone=settings.timezone,
            ),
            id="prune_voter_activity",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
