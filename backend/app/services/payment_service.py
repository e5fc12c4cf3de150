"""
Payment service — gateway balance, simulated withdrawals and the ledger.

There is no live gateway integration: the balance is fixed and withdrawals
only hand back a reference number.
"""

import time
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.transaction import Transaction

logger = get_logger("payment_service")

# Withdrawals must stay below 10**16.
MAX_WITHDRAWAL_EXPONENT = 15

GATEWAY_BALANCE = {
    "balance": "$47,832.50",
    "pending": "$3,245.00",
    "monthly_volume": "$124,560",
}


def parse_withdrawal_amount(value: str | float | int | None) -> Decimal:
    """Coerce the requested amount; ValueError when missing, non-numeric or not positive."""
    if value is None or isinstance(value, bool):
        raise ValueError("Invalid withdrawal amount")
    try:
        amount = Decimal(str(value).strip().lstrip("$").replace(",", ""))
    except InvalidOperation:
        raise ValueError("Invalid withdrawal amount")
    if not amount.is_finite() or amount <= 0 or amount.adjusted() > MAX_WITHDRAWAL_EXPONENT:
        raise ValueError("Invalid withdrawal amount")
    return amount.quantize(Decimal("0.01"))


class PaymentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def get_balance() -> dict:
        return dict(GATEWAY_BALANCE)

    @staticmethod
    def withdraw(amount: str | float | int | None) -> dict:
        value = parse_withdrawal_amount(amount)
        transaction_id = f"WD-{int(time.time() * 1000)}"
        logger.info("Withdrawal of %s initiated (%s)", value, transaction_id)
        return {
            "success": True,
            "message": "Withdrawal initiated successfully",
            "amount": f"${value:,.2f}",
            "transaction_id": transaction_id,
        }

    async def list_transactions(self) -> list[Transaction]:
        result = await self.db.execute(
            select(Transaction).order_by(Transaction.created_at.desc())
        )
        return list(result.scalars().all())
