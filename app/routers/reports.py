"""Admin report endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_user, get_db_client
from app.schemas.election import DashboardSummary
from app.schemas.user import CurrentUser
from app.services.report_service import ReportService
from supabase import Client

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    user: CurrentUser = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return election, candidate, student and vote counters."""
    service = ReportService(client)
    return service.summary(user)

