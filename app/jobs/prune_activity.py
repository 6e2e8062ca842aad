"""Voter activity retention job."""

from __future__ import annotations

import logging

from app.services.activity_service import ActivityService
from app.utils.supabase_client import get_service_client

logger = logging.getLogger(__name__)


async def prune_voter_activity() -> None:
    """Delete live feed events older than the retention window."""
    service = ActivityService(get_service_client())
    removed = service.prune()
    logger.info("prune_voter_activity removed %s events", removed)
