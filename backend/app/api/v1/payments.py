"""
Payment gateway endpoints — balance, simulated withdrawal, transaction ledger.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_payment_service
from app.core.exceptions import ApiError
from app.core.logging import get_logger
from app.core.rate_limiter import rate_limit_withdraw
from app.schemas.payment import (
    BalanceResponse,
    TransactionResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from app.services.payment_service import PaymentService

router = APIRouter(tags=["Payments"])
logger = get_logger("payments")


@router.get("/xendit/balance", response_model=BalanceResponse)
async def get_balance():
    return PaymentService.get_balance()


@router.post(
    "/xendit/withdraw",
    response_model=WithdrawResponse,
    dependencies=[Depends(rate_limit_withdraw)],
)
async def withdraw(data: WithdrawRequest):
    """Simulated payout — returns a reference number, moves no money."""
    try:
        return PaymentService.withdraw(data.amount)
    except ValueError as e:
        raise ApiError(400, str(e))


@router.get("/transactions", response_model=list[TransactionResponse])
async def list_transactions(
    service: PaymentService = Depends(get_payment_service),
):
    try:
        return await service.list_transactions()
    except SQLAlchemyError as e:
        logger.error("Failed to fetch transactions: %s", str(e))
        raise ApiError(500, "Failed to fetch transactions")
