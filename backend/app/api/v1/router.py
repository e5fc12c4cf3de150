"""
API router — aggregates all route modules.
"""

from fastapi import APIRouter

from app.api.v1.conversations import router as conversations_router
from app.api.v1.dashboard import router as dashboard_router
from app.api.v1.health import router as health_router
from app.api.v1.orders import router as orders_router
from app.api.v1.payments import router as payments_router
from app.api.v1.system import router as system_router

api_v1_router = APIRouter()

api_v1_router.include_router(health_router)
api_v1_router.include_router(dashboard_router)
api_v1_router.include_router(orders_router)
api_v1_router.include_router(conversations_router)
api_v1_router.include_router(payments_router)
api_v1_router.include_router(system_router)
