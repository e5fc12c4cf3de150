"""
Order model.
Orders are placed through the messaging bot; the dashboard only reads them
and moves them through their fulfilment status.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Order(Base):
    """A customer order captured by the bot."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    order_no: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )

    # Customer (as seen by the bot)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_initials: Mapped[str] = mapped_column(String(8), nullable=False)

    # Either a free-text line ("iPhone 14 Pro, AirPods") or a list of
    # strings / item objects, depending on the bot version that wrote it.
    items: Mapped[Any] = mapped_column(JSONB, nullable=False, default=list)
    delivery_info: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Status (free text, set by the bot and the operator)
    payment_status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
    order_status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="received", index=True
    )

    # Pricing: legacy records carry a decimal string in `amount`, newer ones
    # a number in `total`. `total` wins when both are set.
    amount: Mapped[str | None] = mapped_column(String(32), nullable=True)
    total: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
        nullable=False, index=True,
    )

    def __repr__(self) -> str:
        return f"<Order {self.order_no} ({self.order_status})>"
