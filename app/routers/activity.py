"""Live voter feed endpoints."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from app.dependencies import get_current_user, get_db_client
from app.schemas.user import CurrentUser, Role
from app.schemas.vote import VoterActivityResponse
from app.services.activity_service import ActivityService, VoterActivityFeed
from supabase import Client

router = APIRouter()


def _visible(events: list[dict], user: CurrentUser) -> list[dict]:
    """Serialize feed events, hiding voter ids from non-admins."""
    hidden = None if user.role == Role.ADMIN else {"voter_id"}
    return [
        VoterActivityResponse.model_validate(event).model_dump(mode="json", exclude=hidden)
        for event in events
    ]


@router.get("")
def recent_activity(
    limit: int = Query(default=20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the most recent voter activity, newest first."""
    service = ActivityService(client)
    return {"activity": _visible(service.recent(limit), user)}


@router.get("/stream")
async def stream_activity(
    request: Request,
    limit: int = Query(default=20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> StreamingResponse:
    """Stream feed snapshots as server-sent events until the client leaves."""
    feed = VoterActivityFeed(ActivityService(client), limit=limit)

    async def events():
        try:
            async for snapshot in feed:
                if await request.is_disconnected():
                    break
                data = json.dumps(_visible(snapshot, user))
                yield f"event: activity\ndata: {data}\n\n"
        finally:
            feed.stop()

    return StreamingResponse(events(), media_type="text/event-stream")
