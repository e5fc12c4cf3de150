"""
Pydantic schemas for the System page: status record, lifecycle actions and
diagnostics.
"""

import uuid
from datetime import datetime

from pydantic import computed_field

from app.schemas.base import CamelModel
from app.services.status_service import color_for


class StatusColorResponse(CamelModel):
    text_color_class: str
    dot_color_class: str


class SystemStatusResponse(CamelModel):
    id: uuid.UUID
    bot_status: str
    webhook_status: str
    db_status: str
    api_status: str
    uptime: str
    version: str
    build: str
    environment: str
    server: str
    region: str
    last_deploy: str
    cpu_usage: int
    memory_usage: int
    disk_usage: int
    revision: int
    updated_at: datetime

    @computed_field
    @property
    def colors(self) -> dict[str, StatusColorResponse]:
        statuses = {
            "bot": self.bot_status,
            "webhook": self.webhook_status,
            "db": self.db_status,
            "api": self.api_status,
        }
        return {
            component: StatusColorResponse(**color_for(value)._asdict())
            for component, value in statuses.items()
        }


class DiagnosticsRequest(CamelModel):
    command: str | None = None


class DiagnosticsResponse(CamelModel):
    success: bool = True
    output: str
