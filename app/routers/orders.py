# =============================================================================
# app/routers/orders.py - Order Endpoints
# =============================================================================
# Customers place and read their own orders. Admins read all orders, move
# them through fulfilment statuses, and delete them.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import require_requester
from app.dependencies import OrderServiceDep
from core.access import Requester
from core.models.order import OrderCreate, OrderResponse, OrderStatus, OrderStatusUpdate

router = APIRouter()


def _to_response(order: dict) -> OrderResponse:
    return OrderResponse.from_row(order, order.get("items"))


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    request: OrderCreate,
    orders: OrderServiceDep,
    requester: Requester = Depends(require_requester),
):
    """
    Place an order for the caller.

    Prices are taken from the products at order time; the order starts
    as "pending".
    """
    return _to_response(orders.place_order(requester, request))


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    orders: OrderServiceDep,
    requester: Requester = Depends(require_requester),
    order_status: Annotated[
        OrderStatus | None, Query(alias="status", description="Filter by status")
    ] = None,
):
    """List orders visible to the caller, newest first."""
    return [_to_response(order) for order in orders.list_orders(requester, order_status)]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    orders: OrderServiceDep,
    requester: Requester = Depends(require_requester),
):
    return _to_response(orders.get_order(requester, order_id))


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    request: OrderStatusUpdate,
    orders: OrderServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Set an order's fulfilment status (admin)."""
    return _to_response(orders.update_status(requester, order_id, request.status))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    orders: OrderServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Delete an order and its line items (admin)."""
    orders.delete_order(requester, order_id)
