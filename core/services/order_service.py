# =============================================================================
# core/services/order_service.py - Orders
# =============================================================================
# Placing an order writes one orders row (owned by the requester) and one
# order_items row per line. Items are visible exactly when their order is.
#
# Status may be set to any OrderStatus in any order; fulfilment owns the
# progression and this service does not enforce a sequence.
# =============================================================================

import logging
from decimal import Decimal
from typing import Any

from app.exceptions import NoRowsAffectedError, RowNotFoundError
from core.access import Requester
from core.models.order import OrderCreate, OrderStatus
from core.services.gateway import DataGateway
from core.store.schema import ORDER_ITEMS, ORDERS, PRODUCTS
from lib.utils import round_amount

logger = logging.getLogger(__name__)


class OrderService:
    """Order placement and lookup for a requester."""

    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def place_order(self, requester: Requester, data: OrderCreate) -> dict[str, Any]:
        """
        Create an order for the requester.

        Returns:
            The order row with an "items" list

        Raises:
            RowNotFoundError: If a product does not exist
            NoRowsAffectedError: If the requester may not place orders
            RowStoreError: If a line item cannot be written (the order is
                removed again)
        """
        lines = []
        total = Decimal("0")
        for item in data.items:
            product = self.gateway.get(requester, PRODUCTS, item.product_id)
            if product is None:
                raise RowNotFoundError(PRODUCTS, str(item.product_id))
            unit_price = round_amount(product["price"])
            total += unit_price * item.qty
            lines.append((item, unit_price))

        order = self.gateway.insert(
            requester,
            ORDERS,
            {
                "user_id": requester.id,
                "status": OrderStatus.PENDING.value,
                "total": float(round_amount(total)),
            },
        )
        if order is None:
            raise NoRowsAffectedError(ORDERS)

        items = []
        try:
            for item, unit_price in lines:
                created = self.gateway.insert(
                    requester,
                    ORDER_ITEMS,
                    {
                        "order_id": order["id"],
                        "product_id": str(item.product_id),
                        "qty": item.qty,
                        "price": float(unit_price),
                    },
                )
                if created is None:
                    raise NoRowsAffectedError(ORDER_ITEMS)
                items.append(created)
        except Exception:
            # No half-written orders: removing the order cascades to its items
            logger.warning(f"Rolling back order {order['id']} after item insert failed")
            self.gateway.store.delete(ORDERS, order["id"])
            raise

        logger.info(f"Order {order['id']} placed by {requester.id}: {len(items)} items, total {order['total']}")
        return {**order, "items": items}

    def _items(self, requester: Requester, order_id: Any) -> list[dict[str, Any]]:
        return self.gateway.select(requester, ORDER_ITEMS, {"order_id": order_id}, order_by="id")

    def list_orders(self, requester: Requester, status: OrderStatus | None = None) -> list[dict[str, Any]]:
        filters = {"status": status.value} if status else None
        orders = self.gateway.select(requester, ORDERS, filters, order_by="created_at", descending=True)
        return [{**order, "items": self._items(requester, order["id"])} for order in orders]

    def get_order(self, requester: Requester, order_id: Any) -> dict[str, Any]:
        order = self.gateway.get(requester, ORDERS, order_id)
        if order is None:
            raise RowNotFoundError(ORDERS, str(order_id))
        return {**order, "items": self._items(requester, order_id)}

    def update_status(self, requester: Requester, order_id: Any, status: OrderStatus) -> dict[str, Any]:
        updated = self.gateway.update(requester, ORDERS, order_id, {"status": status.value})
        if updated is None:
            raise NoRowsAffectedError(ORDERS, str(order_id))
        logger.info(f"Order {order_id} status -> {status.value}")
        return {**updated, "items": self._items(requester, order_id)}

    def delete_order(self, requester: Requester, order_id: Any) -> None:
        if not self.gateway.delete(requester, ORDERS, order_id):
            raise NoRowsAffectedError(ORDERS, str(order_id))
