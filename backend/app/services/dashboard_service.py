"""
Dashboard service — statistics for the admin home page.

`compute_stats` is a pure function over a snapshot of order records: totals,
revenue, a 7-day order histogram, a 6-month revenue trend and a keyword-based
category breakdown. `DashboardService` only fetches the snapshot and the two
approval-queue counts from the database.
"""

import json
from bisect import bisect_right
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import get_logger
from app.models.approval import PendingOrderApproval, PendingUserApproval
from app.models.order import Order
from app.schemas.dashboard import CategoryShare, DashboardStats

logger = get_logger("dashboard_service")
settings = get_settings()

# First match wins; keywords are matched as lowercase substrings.
CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Electronics", ("phone", "electronic")),
    ("Food", ("food", "drink")),
    ("Clothing", ("cloth", "shirt")),
)
FALLBACK_CATEGORY = "Other"
CATEGORY_COLORS = ("#6366F1", "#8B5CF6", "#00D4FF", "#22C55E")
EMPTY_CATEGORY_NAME = "No categories yet"

HISTOGRAM_DAYS = 7
TREND_MONTHS = 6

CENT = Decimal("0.01")
ZERO = Decimal("0")
# Amounts of 10**16 or more read as unreadable, like any other bad value.
MAX_AMOUNT_EXPONENT = 15


def business_timezone() -> tzinfo:
    """Zone used for day/month boundaries; UTC when misconfigured."""
    tz_name = (settings.BUSINESS_TIMEZONE or "UTC").strip()
    try:
        return ZoneInfo(tz_name)
    except Exception:
        logger.warning("Invalid BUSINESS_TIMEZONE '%s'. Falling back to UTC.", tz_name)
        return timezone.utc


# ── Ingestion ────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class OrderSnapshot:
    """An order reduced to what the statistics need."""
    id: str | None
    created_at: datetime | None  # aware, UTC; None when missing or unreadable
    amount: Decimal
    items: tuple[str, ...]


def _field(record: Any, *names: str) -> Any:
    """Read the first present field from a mapping or an object."""
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return None


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    if result.adjusted() > MAX_AMOUNT_EXPONENT:
        return None
    return result


def resolve_amount(record: Any) -> Decimal:
    """
    Canonical order amount: a numeric `total` wins, then `amount` parsed as
    a decimal, then zero. Never raises.
    """
    total = _field(record, "total")
    if not isinstance(total, str):
        resolved = _to_decimal(total)
        if resolved is not None:
            return resolved
    resolved = _to_decimal(_field(record, "amount"))
    return resolved if resolved is not None else ZERO


def _to_utc(value: Any) -> datetime | None:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        # The store writes UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _serialize_item(item: Any) -> str:
    try:
        return json.dumps(item, default=str, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return str(item)


def flatten_items(items: Any) -> tuple[str, ...]:
    """A single string is one item; sequence elements that aren't strings are serialized."""
    if items is None:
        return ()
    if isinstance(items, str):
        return (items,)
    if isinstance(items, (list, tuple)):
        return tuple(item if isinstance(item, str) else _serialize_item(item) for item in items)
    return (_serialize_item(items),)


def normalize_order(record: Any) -> OrderSnapshot:
    raw_id = _field(record, "id", "_id")
    return OrderSnapshot(
        id=str(raw_id) if raw_id is not None else None,
        created_at=_to_utc(_field(record, "created_at", "createdAt")),
        amount=resolve_amount(record),
        items=flatten_items(_field(record, "items")),
    )


# ── Classification ───────────────────────────────────────────────────────────
def classify_item(text: str) -> str:
    lowered = text.lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return FALLBACK_CATEGORY


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def category_breakdown(snapshots: Iterable[OrderSnapshot]) -> list[CategoryShare]:
    counts: dict[str, int] = {}
    for snapshot in snapshots:
        for item in snapshot.items:
            category = classify_item(item)
            counts[category] = counts.get(category, 0) + 1

    total_items = sum(counts.values())
    if total_items == 0:
        return [CategoryShare(name=EMPTY_CATEGORY_NAME, percentage=100, color=CATEGORY_COLORS[0])]

    return [
        CategoryShare(
            name=name,
            percentage=_round_half_up(Decimal(count) * 100 / Decimal(total_items)),
            color=CATEGORY_COLORS[index % len(CATEGORY_COLORS)],
        )
        for index, (name, count) in enumerate(counts.items())
    ]


# ── Calendar buckets ─────────────────────────────────────────────────────────
def _local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def day_boundaries(now: datetime, days: int = HISTOGRAM_DAYS) -> list[datetime]:
    """`days + 1` UTC instants: local midnight of today-(days-1) … tomorrow."""
    today = now.date()
    return [
        _local_midnight(today - timedelta(days=offset), now.tzinfo)
        for offset in range(days - 1, -2, -1)
    ]


def month_boundaries(now: datetime, months: int = TREND_MONTHS) -> list[datetime]:
    """`months + 1` UTC instants: day-1 00:00 of thisMonth-(months-1) … nextMonth."""
    boundaries = []
    for delta in range(-(months - 1), 2):
        year, month = _shift_month(now.year, now.month, delta)
        boundaries.append(_local_midnight(date(year, month, 1), now.tzinfo))
    return boundaries


def _bucket_index(moment: datetime | None, boundaries: list[datetime]) -> int | None:
    if moment is None or moment < boundaries[0] or moment >= boundaries[-1]:
        return None
    return bisect_right(boundaries, moment) - 1


# ── Engine ───────────────────────────────────────────────────────────────────
def compute_stats(
    orders: Iterable[Any],
    pending_user_count: int,
    pending_order_count: int,
    now: datetime,
) -> DashboardStats:
    """
    Build the dashboard statistics for `orders` as seen at `now`.

    Day and month boundaries are local to `now`'s timezone (a naive `now`
    is read as UTC). Malformed records degrade field by field: zero amount,
    "Other" category, left out of the time buckets.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    snapshots = [normalize_order(record) for record in orders]

    revenue = sum((snapshot.amount for snapshot in snapshots), ZERO)

    days = day_boundaries(now)
    orders_per_day = [0] * HISTOGRAM_DAYS
    months = month_boundaries(now)
    monthly_revenue = [ZERO] * TREND_MONTHS

    for snapshot in snapshots:
        day_index = _bucket_index(snapshot.created_at, days)
        if day_index is not None:
            orders_per_day[day_index] += 1
        month_index = _bucket_index(snapshot.created_at, months)
        if month_index is not None:
            monthly_revenue[month_index] += snapshot.amount

    return DashboardStats(
        total_orders=len(snapshots),
        revenue=f"${revenue.quantize(CENT, rounding=ROUND_HALF_UP)}",
        pending_users=pending_user_count,
        pending_orders=pending_order_count,
        today_orders=orders_per_day[-1],
        orders_per_day=orders_per_day,
        sales_trend=[_round_half_up(total) for total in monthly_revenue],
        top_categories=category_breakdown(snapshots),
    )


class DashboardService:
    """Loads the current order snapshot and runs the statistics engine."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, model) -> int:
        result = await self.db.execute(select(func.count()).select_from(model))
        return result.scalar() or 0

    async def get_stats(self, now: datetime | None = None) -> DashboardStats:
        result = await self.db.execute(select(Order))
        orders = result.scalars().all()

        pending_users = await self._count(PendingUserApproval)
        pending_orders = await self._count(PendingOrderApproval)

        if now is None:
            now = datetime.now(business_timezone())

        stats = compute_stats(orders, pending_users, pending_orders, now)
        logger.debug(
            "Dashboard stats computed: %d orders, revenue %s", stats.total_orders, stats.revenue
        )
        return stats
