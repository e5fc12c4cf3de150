"""
Pydantic schemas for the payment gateway page (balance, withdrawals, ledger).
"""

import uuid
from datetime import datetime

from app.schemas.base import CamelModel


class BalanceResponse(CamelModel):
    balance: str
    pending: str
    monthly_volume: str


class WithdrawRequest(CamelModel):
    # Coerced by the service; the client sends whatever the input box holds.
    amount: str | float | int | None = None


class WithdrawResponse(CamelModel):
    success: bool = True
    message: str
    amount: str
    transaction_id: str


class TransactionResponse(CamelModel):
    id: uuid.UUID
    transaction_id: str
    description: str
    amount: str
    type: str
    time: str
    created_at: datetime
