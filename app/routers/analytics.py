# =============================================================================
# app/routers/analytics.py - Analytics & Dashboard Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth import require_admin, require_requester
from app.dependencies import AnalyticsServiceDep, DashboardServiceDep
from core.access import Requester
from core.models.analytics import (
    AnalyticsEventCreate,
    AnalyticsEventResponse,
    DashboardStats,
)

router = APIRouter()


@router.post("/analytics/events", response_model=AnalyticsEventResponse, status_code=status.HTTP_201_CREATED)
async def record_event(
    request: AnalyticsEventCreate,
    analytics: AnalyticsServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Record an analytics event (admin)."""
    return analytics.record_event(requester, request)


@router.get("/analytics/events", response_model=list[AnalyticsEventResponse])
async def list_events(
    analytics: AnalyticsServiceDep,
    requester: Requester = Depends(require_requester),
    event_type: Annotated[str | None, Query(description="Filter by event type")] = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    """Most recent analytics events. Non-admins get an empty list."""
    return analytics.list_events(requester, event_type=event_type, limit=limit)


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    dashboard: DashboardServiceDep,
    requester: Requester = Depends(require_admin),
):
    """Summary counts for the admin dashboard."""
    return dashboard.stats(requester)
