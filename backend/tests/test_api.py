import uuid
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from app.api import deps
from app.api.v1 import health as health_routes
from app.api.v1 import system as system_routes
from app.core.rate_limiter import (
    rate_limit_lifecycle,
    rate_limit_reply,
    rate_limit_withdraw,
)
from app.main import app
from app.services.conversation_service import ConversationService
from app.services.dashboard_service import compute_stats
from app.services.system_service import INITIAL_SNAPSHOT, SystemService

NOW = datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)


async def _no_rate_limit():
    return None


@pytest.fixture(autouse=True)
def _overrides():
    for limiter in (rate_limit_lifecycle, rate_limit_reply, rate_limit_withdraw):
        app.dependency_overrides[limiter] = _no_rate_limit
    yield app.dependency_overrides
    app.dependency_overrides.clear()


def _client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def _order(**overrides):
    values = {
        "id": uuid.uuid4(),
        "order_no": "ORD-001",
        "customer_name": "John Doe",
        "customer_initials": "JD",
        "items": "iPhone 14 Pro, AirPods",
        "delivery_info": "123 Main St",
        "payment_status": "paid",
        "order_status": "preparing",
        "amount": "1299.00",
        "total": None,
        "created_at": NOW,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class _FakeDashboardService:
    def __init__(self, error=None):
        self.error = error

    async def get_stats(self):
        if self.error:
            raise self.error
        return compute_stats([{"createdAt": NOW, "total": 25, "items": "Shirt"}], 1, 2, NOW)


class _FakeOrderService:
    def __init__(self, order=None):
        self.order = order
        self.updates = []

    async def update_status(self, order_id, status):
        self.updates.append((order_id, status))
        if self.order is None:
            return None
        self.order.order_status = status
        return self.order


class _FakeSystemService:
    def __init__(self, status=None, revision=1):
        self.status = status
        self.revision = revision

    async def get_status(self):
        return self.status

    async def request_restart(self):
        return self.revision


# ── Health ───────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_health_degraded_when_redis_is_down(monkeypatch):
    async def _db_ok():
        return 2

    async def _redis_down():
        raise ConnectionError("Connection refused")

    monkeypatch.setattr(health_routes, "ping_database", _db_ok)
    monkeypatch.setattr(health_routes, "ping_redis", _redis_down)

    async with _client() as client:
        response = await client.get("/api/health")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "degraded"
    assert body["database"] == "connected (2ms)"
    assert body["redis"] == "error: Connection refused"


@pytest.mark.asyncio
async def test_ping():
    async with _client() as client:
        response = await client.get("/api/ping")

    assert response.status_code == 200
    assert response.json() == {"ping": "pong"}


# ── Dashboard ────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_dashboard_stats_uses_camel_case(_overrides):
    _overrides[deps.get_dashboard_service] = lambda: _FakeDashboardService()

    async with _client() as client:
        response = await client.get("/api/dashboard/stats")

    assert response.status_code == 200
    body = response.json()
    assert body["totalOrders"] == 1
    assert body["revenue"] == "$25.00"
    assert body["pendingUsers"] == 1
    assert body["pendingOrders"] == 2
    assert body["todayOrders"] == 1
    assert len(body["ordersPerDay"]) == 7
    assert len(body["salesTrend"]) == 6
    assert body["topCategories"] == [{"name": "Clothing", "percentage": 100, "color": "#6366F1"}]


@pytest.mark.asyncio
async def test_dashboard_stats_store_failure(_overrides):
    _overrides[deps.get_dashboard_service] = lambda: _FakeDashboardService(
        error=SQLAlchemyError("connection refused")
    )

    async with _client() as client:
        response = await client.get("/api/dashboard/stats")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch dashboard stats"}


# ── Orders ───────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_update_order_status_rejects_blank_status(_overrides):
    service = _FakeOrderService(order=_order())
    _overrides[deps.get_order_service] = lambda: service

    async with _client() as client:
        response = await client.patch(f"/api/orders/{uuid.uuid4()}/status", json={"status": "  "})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status or order ID"}
    assert service.updates == []


@pytest.mark.asyncio
async def test_update_order_status_rejects_malformed_id(_overrides):
    _overrides[deps.get_order_service] = lambda: _FakeOrderService(order=_order())

    async with _client() as client:
        response = await client.patch("/api/orders/not-an-id/status", json={"status": "ready"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status or order ID"}


@pytest.mark.asyncio
async def test_update_order_status_unknown_order(_overrides):
    _overrides[deps.get_order_service] = lambda: _FakeOrderService(order=None)

    async with _client() as client:
        response = await client.patch(f"/api/orders/{uuid.uuid4()}/status", json={"status": "ready"})

    assert response.status_code == 404
    assert response.json() == {"error": "Order not found"}


@pytest.mark.asyncio
async def test_update_order_status(_overrides):
    order = _order(total=Decimal("1250.5"))
    _overrides[deps.get_order_service] = lambda: _FakeOrderService(order=order)

    async with _client() as client:
        response = await client.patch(f"/api/orders/{order.id}/status", json={"status": "ready"})

    assert response.status_code == 200
    body = response.json()
    assert body["orderStatus"] == "ready"
    assert body["orderNo"] == "ORD-001"
    assert body["resolvedAmount"] == "1250.50"


# ── Conversations ────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_quick_replies():
    async with _client() as client:
        response = await client.get("/api/conversations/quick-replies")

    assert response.status_code == 200
    assert len(response.json()) == 5


@pytest.mark.asyncio
async def test_blank_message_is_rejected(_overrides):
    _overrides[deps.get_conversation_service] = lambda: ConversationService(db=None)

    async with _client() as client:
        response = await client.post(
            f"/api/conversations/{uuid.uuid4()}/messages", json={"content": "   "}
        )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid message data"
    assert body["details"]


@pytest.mark.asyncio
async def test_message_to_unknown_conversation(_overrides):
    class _Missing:
        async def send_message(self, conversation_id, data):
            return None

    _overrides[deps.get_conversation_service] = lambda: _Missing()

    async with _client() as client:
        response = await client.post(
            f"/api/conversations/{uuid.uuid4()}/messages", json={"content": "Hello"}
        )

    assert response.status_code == 404
    assert response.json() == {"error": "Conversation not found"}


# ── Payments ─────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_balance():
    async with _client() as client:
        response = await client.get("/api/xendit/balance")

    assert response.status_code == 200
    assert response.json() == {
        "balance": "$47,832.50",
        "pending": "$3,245.00",
        "monthlyVolume": "$124,560",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["abc", "-10", "0", None])
async def test_withdraw_rejects_invalid_amount(amount):
    async with _client() as client:
        response = await client.post("/api/xendit/withdraw", json={"amount": amount})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid withdrawal amount"}


@pytest.mark.asyncio
async def test_withdraw():
    async with _client() as client:
        response = await client.post("/api/xendit/withdraw", json={"amount": "1,000"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["amount"] == "$1,000.00"
    assert body["transactionId"].startswith("WD-")


# ── System ───────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_system_status_missing(_overrides):
    _overrides[deps.get_system_service] = lambda: _FakeSystemService(status=None)

    async with _client() as client:
        response = await client.get("/api/system/status")

    assert response.status_code == 404
    assert response.json() == {"error": "System status not found"}


@pytest.mark.asyncio
async def test_system_status_includes_colors(_overrides):
    status = SimpleNamespace(id=uuid.uuid4(), revision=1, updated_at=NOW, **INITIAL_SNAPSHOT)
    _overrides[deps.get_system_service] = lambda: _FakeSystemService(status=status)

    async with _client() as client:
        response = await client.get("/api/system/status")

    assert response.status_code == 200
    body = response.json()
    assert body["botStatus"] == "online"
    assert body["cpuUsage"] == 34
    assert body["colors"]["bot"] == {
        "textColorClass": "text-green-400",
        "dotColorClass": "bg-green-500",
    }
    assert body["colors"]["api"]["textColorClass"] == "text-yellow-400"


@pytest.mark.asyncio
async def test_restart_schedules_delayed_write(_overrides, monkeypatch):
    scheduled = []

    async def _fake_complete_restart(expected_revision, delay=None):
        scheduled.append(expected_revision)
        return True

    monkeypatch.setattr(system_routes, "complete_restart", _fake_complete_restart)
    _overrides[deps.get_system_service] = lambda: _FakeSystemService(revision=4)

    async with _client() as client:
        response = await client.post("/api/bot/restart")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Bot restart initiated"}
    assert scheduled == [4]


@pytest.mark.asyncio
async def test_unknown_diagnostics_command(_overrides):
    telegram = SimpleNamespace(is_configured=lambda: False)
    _overrides[deps.get_system_service] = lambda: SystemService(db=None, telegram=telegram)

    async with _client() as client:
        response = await client.post("/api/system/diagnostics", json={"command": "reboot"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "output": "Unknown diagnostic command"}
