"""
System endpoints — status record, simulated bot lifecycle, diagnostics.
"""

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_system_service
from app.core.exceptions import ApiError
from app.core.logging import get_logger
from app.core.rate_limiter import rate_limit_lifecycle
from app.schemas.base import ActionResponse
from app.schemas.system import DiagnosticsRequest, DiagnosticsResponse, SystemStatusResponse
from app.services.system_service import SystemService, complete_restart

router = APIRouter(tags=["System"])
logger = get_logger("system")


@router.get("/system/status", response_model=SystemStatusResponse)
async def get_system_status(
    service: SystemService = Depends(get_system_service),
):
    try:
        status = await service.get_status()
    except SQLAlchemyError as e:
        logger.error("Failed to fetch system status: %s", str(e))
        raise ApiError(500, "Failed to fetch system status")
    if status is None:
        raise ApiError(404, "System status not found")
    return status


@router.post(
    "/bot/restart",
    response_model=ActionResponse,
    dependencies=[Depends(rate_limit_lifecycle)],
)
async def restart_bot(
    background_tasks: BackgroundTasks,
    service: SystemService = Depends(get_system_service),
):
    """Acknowledge now; the restarting snapshot is written after a short delay."""
    try:
        expected_revision = await service.request_restart()
    except SQLAlchemyError as e:
        logger.error("Failed to restart bot: %s", str(e))
        raise ApiError(500, "Failed to restart bot")
    background_tasks.add_task(complete_restart, expected_revision)
    return ActionResponse(message="Bot restart initiated")


@router.post(
    "/bot/stop",
    response_model=ActionResponse,
    dependencies=[Depends(rate_limit_lifecycle)],
)
async def stop_bot(
    service: SystemService = Depends(get_system_service),
):
    try:
        await service.stop_bot()
    except SQLAlchemyError as e:
        logger.error("Failed to stop bot: %s", str(e))
        raise ApiError(500, "Failed to stop bot")
    return ActionResponse(message="Bot stopped successfully")


@router.post(
    "/webhook/update",
    response_model=ActionResponse,
    dependencies=[Depends(rate_limit_lifecycle)],
)
async def update_webhook(
    service: SystemService = Depends(get_system_service),
):
    if not await service.update_webhook():
        raise ApiError(502, "Failed to update webhook")
    return ActionResponse(message="Webhook updated successfully")


@router.post("/system/diagnostics", response_model=DiagnosticsResponse)
async def run_diagnostics(
    data: DiagnosticsRequest,
    service: SystemService = Depends(get_system_service),
):
    try:
        output = await service.run_diagnostics(data.command)
    except SQLAlchemyError as e:
        logger.error("Diagnostics '%s' failed: %s", data.command, str(e))
        raise ApiError(500, "Failed to run diagnostics")
    return DiagnosticsResponse(output=output)
