# =============================================================================
# core/services/analytics_service.py - Analytics Events & Dashboard Stats
# =============================================================================
# Both are admin-only. Non-admin requesters get nothing back rather than an
# error, the same way the access rules hide any other row.
# =============================================================================

import logging
from decimal import Decimal
from typing import Any

from app.exceptions import NoRowsAffectedError
from core.access import Requester
from core.models.analytics import AnalyticsEventCreate, DashboardStats
from core.models.order import OrderStatus
from core.services.gateway import DataGateway
from core.store.schema import ANALYTICS_EVENTS, CURRICULUM_MODULES, ORDERS, PRODUCTS
from lib.utils import round_amount

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def record_event(self, requester: Requester, data: AnalyticsEventCreate) -> dict[str, Any]:
        row = {
            "user_id": requester.id,
            "event_type": data.event_type,
            "payload": data.payload,
        }
        created = self.gateway.insert(requester, ANALYTICS_EVENTS, row)
        if created is None:
            raise NoRowsAffectedError(ANALYTICS_EVENTS)
        return created

    def list_events(
        self,
        requester: Requester,
        event_type: str | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        filters = {"event_type": event_type} if event_type else None
        return self.gateway.select(
            requester, ANALYTICS_EVENTS, filters, order_by="created_at", descending=True, limit=limit
        )


class DashboardService:
    """Counts behind the admin dashboard header."""

    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def stats(self, requester: Requester) -> DashboardStats:
        """
        Summary numbers as seen by the requester.

        Computed through the gateway, so a customer calling this only sees
        published modules and their own orders.
        """
        modules = self.gateway.select(requester, CURRICULUM_MODULES)
        orders = self.gateway.select(requester, ORDERS)
        revenue = sum((Decimal(str(o.get("total") or 0)) for o in orders), Decimal("0"))

        return DashboardStats(
            active_modules=len(modules),
            published_modules=sum(1 for m in modules if m.get("published") is True),
            products_live=self.gateway.count(requester, PRODUCTS),
            orders=len(orders),
            pending_orders=sum(1 for o in orders if o.get("status") == OrderStatus.PENDING.value),
            revenue=float(round_amount(revenue)),
        )
