"""
Telegram Bot API client used by the System page (webhook + bot checks).
"""

from typing import Any

import httpx

from app.core.config import get_settings
from app.core.logging import get_logger

settings = get_settings()
logger = get_logger("telegram_service")


class TelegramService:
    """Lightweight async Telegram Bot API client."""

    def __init__(self, bot_token: str | None = None):
        token = (bot_token if bot_token is not None else settings.TELEGRAM_BOT_TOKEN).strip()
        self.api_base = f"https://api.telegram.org/bot{token}" if token else ""

    def is_configured(self) -> bool:
        return bool(self.api_base)

    async def get_me(self) -> dict[str, Any] | None:
        """Bot identity, or None when the token is missing or rejected."""
        body = await self._call("getMe", {})
        return body.get("result") if body else None

    async def set_webhook(self, url: str, secret_token: str = "") -> bool:
        payload: dict[str, Any] = {"url": url, "drop_pending_updates": False}
        if secret_token:
            payload["secret_token"] = secret_token
        return await self._call("setWebhook", payload) is not None

    async def get_webhook_info(self) -> dict[str, Any] | None:
        body = await self._call("getWebhookInfo", {})
        return body.get("result") if body else None

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        if not self.api_base:
            logger.warning("Telegram bot token is not configured")
            return None

        url = f"{self.api_base}/{method}"
        try:
            async with httpx.AsyncClient(timeout=15.0) as client:
                response = await client.post(url, json=payload)
            response.raise_for_status()
            body = response.json()
            if not body.get("ok"):
                logger.warning("Telegram API %s failed: %s", method, body)
                return None
            return body
        except Exception as exc:
            logger.warning("Telegram API %s request failed: %s", method, str(exc))
            return None
