"""
Order service — listing orders and moving them through fulfilment statuses.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.order import Order
from app.schemas.order import OrderCreate

logger = get_logger("order_service")


def initials_for(name: str) -> str:
    """'John Doe' -> 'JD'; at most two letters."""
    parts = [part for part in name.split() if part]
    return "".join(part[0] for part in parts[:2]).upper() or "?"


class OrderService:
    """Reads and updates bot orders."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_orders(self, status: str | None = None) -> list[Order]:
        """All orders, newest first. `status` matches order or payment status."""
        query = select(Order).order_by(Order.created_at.desc())
        if status:
            query = query.where(
                (Order.order_status == status) | (Order.payment_status == status)
            )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_order(self, order_id: uuid.UUID) -> Order | None:
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        return result.scalar_one_or_none()

    async def create_order(self, data: OrderCreate) -> Order:
        existing = await self.db.execute(select(Order.id).where(Order.order_no == data.order_no))
        if existing.scalar_one_or_none() is not None:
            raise ValueError(f"Order {data.order_no} already exists")

        order = Order(
            order_no=data.order_no,
            customer_name=data.customer_name,
            customer_initials=data.customer_initials or initials_for(data.customer_name),
            items=data.items,
            delivery_info=data.delivery_info,
            payment_status=data.payment_status,
            order_status=data.order_status,
            amount=data.amount,
            total=data.total,
        )
        self.db.add(order)
        await self.db.flush()
        await self.db.refresh(order)

        logger.info("Order created: %s (%s)", order.order_no, order.customer_name)
        return order

    async def update_status(self, order_id: uuid.UUID, status: str) -> Order | None:
        """Set the order status. Returns None when the order does not exist."""
        order = await self.get_order(order_id)
        if order is None:
            return None

        previous = order.order_status
        order.order_status = status
        await self.db.flush()

        logger.info("Order %s status: %s → %s", order.order_no, previous, status)
        return order
