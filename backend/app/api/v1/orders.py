"""
Order endpoints.
The bot creates orders; the operator lists them and changes their status.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_order_service
from app.core.exceptions import ApiError
from app.core.logging import get_logger
from app.schemas.order import OrderCreate, OrderResponse, OrderStatusUpdate
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = get_logger("orders")


def _parse_id(raw: str, error: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise ApiError(400, error)


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    status_filter: str | None = Query(None, alias="status"),
    service: OrderService = Depends(get_order_service),
):
    """List all orders, newest first."""
    try:
        return await service.list_orders(status=status_filter)
    except SQLAlchemyError as e:
        logger.error("Failed to fetch orders: %s", str(e))
        raise ApiError(500, "Failed to fetch orders")


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    service: OrderService = Depends(get_order_service),
):
    """Record an order placed through the bot."""
    try:
        return await service.create_order(data)
    except ValueError as e:
        raise ApiError(400, str(e))
    except SQLAlchemyError as e:
        logger.error("Failed to create order: %s", str(e))
        raise ApiError(500, "Failed to create order")


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
):
    order_uuid = _parse_id(order_id, "Invalid order ID")
    try:
        order = await service.get_order(order_uuid)
    except SQLAlchemyError as e:
        logger.error("Failed to fetch order %s: %s", order_id, str(e))
        raise ApiError(500, "Failed to fetch order")
    if order is None:
        raise ApiError(404, "Order not found")
    return order


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    """Move an order to a new status (received, preparing, ready, ...)."""
    new_status = (data.status or "").strip()
    if not new_status:
        raise ApiError(400, "Invalid status or order ID")
    order_uuid = _parse_id(order_id, "Invalid status or order ID")

    try:
        order = await service.update_status(order_uuid, new_status)
    except SQLAlchemyError as e:
        logger.error("Failed to update order %s: %s", order_id, str(e))
        raise ApiError(500, "Failed to update order status")
    if order is None:
        raise ApiError(404, "Order not found")
    return order
