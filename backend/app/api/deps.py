"""
FastAPI dependencies — one provider per service so routes never build
services by hand (and tests can override them).
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.services.conversation_service import ConversationService
from app.services.dashboard_service import DashboardService
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService
from app.services.system_service import SystemService


async def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


async def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(db)


async def get_conversation_service(db: AsyncSession = Depends(get_db)) -> ConversationService:
    return ConversationService(db)


async def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(db)


async def get_system_service(db: AsyncSession = Depends(get_db)) -> SystemService:
    return SystemService(db)
