# =============================================================================
# core/models/analytics.py - Analytics Event Schemas
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class AnalyticsEventCreate(BaseModel):
    """
    Example:
        {"event_type": "module_viewed", "payload": {"module_id": "..."}}
    """

    event_type: str = Field(..., min_length=1, max_length=100)
    payload: dict[str, Any] | None = None


class AnalyticsEventResponse(BaseModel):
    id: int
    user_id: UUID | None = None
    event_type: str
    payload: dict[str, Any] | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class DashboardStats(BaseModel):
    """Admin dashboard summary counts."""

    active_modules: int = 0
    published_modules: int = 0
    products_live: int = 0
    orders: int = 0
    pending_orders: int = 0
    revenue: float = 0
