# =============================================================================
# core/models/order.py - Order Schemas
# =============================================================================
# Orders belong to the principal who placed them (user_id, nulled if the
# account is deleted). Status is a free-form progression managed by
# fulfilment: any listed status may follow any other.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class OrderItemCreate(BaseModel):
    product_id: UUID
    qty: int = Field(default=1, ge=1)


class OrderCreate(BaseModel):
    """
    Schema for placing an order.

    The owner is never read from the body; it is the authenticated caller.
    Unit prices are read from the products table at order time.

    Example:
        {"items": [{"product_id": "660e8400-...", "qty": 2}]}
    """

    items: list[OrderItemCreate] = Field(..., min_length=1)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    id: int
    order_id: UUID
    product_id: UUID | None = None
    qty: int
    price: float

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "OrderItemResponse":
        return cls(
            id=row["id"],
            order_id=row["order_id"],
            product_id=row.get("product_id"),
            qty=row.get("qty") or 1,
            price=row["price"],
        )


class OrderResponse(BaseModel):
    """
    Order with its line items.

    Items are only included when the caller can see them, which is exactly
    when the caller can see the order.
    """

    id: UUID
    user_id: UUID | None = None
    status: OrderStatus = OrderStatus.PENDING
    total: float = 0
    created_at: datetime | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict[str, Any], items: list[dict[str, Any]] | None = None) -> "OrderResponse":
        return cls(
            id=row["id"],
            user_id=row.get("user_id"),
            status=row.get("status") or OrderStatus.PENDING,
            total=row.get("total") or 0,
            created_at=row.get("created_at"),
            items=[OrderItemResponse.from_row(i) for i in items or []],
        )
