"""
Pydantic schemas for orders.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import Field, computed_field

from app.schemas.base import CamelModel
from app.services.dashboard_service import CENT, resolve_amount


class OrderCreate(CamelModel):
    """Order as submitted by the bot."""
    order_no: str = Field(..., min_length=1, max_length=50)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_initials: str | None = Field(None, max_length=8)
    items: str | list[Any] = Field(default_factory=list)
    delivery_info: str | None = None
    payment_status: str = Field("pending", max_length=50)
    order_status: str = Field("received", max_length=50)
    amount: str | None = Field(None, max_length=32)
    total: Decimal | None = None


class OrderStatusUpdate(CamelModel):
    status: str | None = None


class OrderResponse(CamelModel):
    id: uuid.UUID
    order_no: str
    customer_name: str
    customer_initials: str
    items: Any
    delivery_info: str | None
    payment_status: str
    order_status: str
    amount: str | None
    total: Decimal | None
    created_at: datetime

    @computed_field(alias="resolvedAmount")
    @property
    def resolved_amount(self) -> str:
        """`total`/`amount` collapsed into one two-decimal string."""
        return str(resolve_amount(self).quantize(CENT))
