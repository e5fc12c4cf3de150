import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

from app.services import dashboard_service
from app.services.dashboard_service import (
    DashboardService,
    compute_stats,
    day_boundaries,
    flatten_items,
    month_boundaries,
    resolve_amount,
)

SGT = ZoneInfo("Asia/Singapore")
NOW = datetime(2026, 10, 18, 15, 0, tzinfo=SGT)


def _categories(stats):
    return [(c.name, c.percentage, c.color) for c in stats.top_categories]


# ── Revenue ──────────────────────────────────────────────────────────────────
def test_revenue_sums_total_and_amount_regardless_of_order():
    orders = [
        {"createdAt": NOW, "total": 100},
        {"createdAt": NOW, "amount": "50.00"},
        {"createdAt": NOW, "total": 12.345},
    ]

    forward = compute_stats(orders, 0, 0, NOW)
    backward = compute_stats(list(reversed(orders)), 0, 0, NOW)

    assert forward.revenue == "$162.35"
    assert backward.revenue == forward.revenue


def test_revenue_does_not_accumulate_float_error():
    orders = [{"total": 0.1}, {"total": 0.2}]

    assert compute_stats(orders, 0, 0, NOW).revenue == "$0.30"


def test_unparseable_amount_counts_as_zero_but_order_is_kept():
    orders = [
        {"createdAt": NOW, "amount": "not-a-number"},
        {"createdAt": NOW, "amount": "12.00"},
    ]

    stats = compute_stats(orders, 0, 0, NOW)

    assert stats.total_orders == 2
    assert stats.revenue == "$12.00"


def test_resolve_amount_precedence():
    assert resolve_amount({"total": 5, "amount": "9"}) == Decimal("5")
    # zero is still a numeric total
    assert resolve_amount({"total": 0, "amount": "9"}) == Decimal("0")
    # a string total is not numeric
    assert resolve_amount({"total": "5", "amount": "9"}) == Decimal("9")
    assert resolve_amount({"total": True, "amount": "3"}) == Decimal("3")
    assert resolve_amount({"total": float("inf")}) == Decimal("0")
    assert resolve_amount({"amount": "NaN"}) == Decimal("0")
    assert resolve_amount({}) == Decimal("0")
    assert resolve_amount(SimpleNamespace(total=Decimal("7.50"), amount=None)) == Decimal("7.50")


def test_resolve_amount_treats_huge_values_as_unreadable():
    assert resolve_amount({"amount": "1e40"}) == Decimal("0")
    assert resolve_amount({"amount": "9" * 30}) == Decimal("0")
    assert resolve_amount({"total": 1e300}) == Decimal("0")
    # an oversized total falls back to the amount string
    assert resolve_amount({"total": 1e300, "amount": "4.25"}) == Decimal("4.25")
    assert resolve_amount({"amount": "10000000000000000"}) == Decimal("0")
    assert resolve_amount({"amount": "9999999999999999.99"}) == Decimal("9999999999999999.99")


def test_extreme_amounts_do_not_break_stats():
    orders = [
        {"createdAt": NOW, "amount": "9" * 30},
        {"createdAt": NOW, "amount": "1e40"},
        {"createdAt": NOW, "total": 1e300},
        {"createdAt": NOW, "total": Decimal("-1E+50")},
        {"createdAt": NOW, "total": 5},
    ]

    stats = compute_stats(orders, 0, 0, NOW)

    assert stats.total_orders == 5
    assert stats.today_orders == 5
    assert stats.revenue == "$5.00"
    assert stats.sales_trend[-1] == 5


# ── Day histogram ────────────────────────────────────────────────────────────
def test_orders_per_day_covers_trailing_seven_local_days():
    orders = [
        {"createdAt": NOW},
        {"createdAt": datetime(2026, 10, 18, 0, 0, tzinfo=SGT)},  # today's midnight
        {"createdAt": datetime(2026, 10, 17, 23, 59, 59, tzinfo=SGT)},
        {"createdAt": datetime(2026, 10, 12, 0, 0, tzinfo=SGT)},  # oldest bucket
        {"createdAt": datetime(2026, 10, 11, 23, 59, tzinfo=SGT)},  # just outside
        {"createdAt": NOW + timedelta(days=1)},  # future
    ]

    stats = compute_stats(orders, 0, 0, NOW)

    assert stats.orders_per_day == [1, 0, 0, 0, 0, 1, 2]
    assert stats.today_orders == 2
    assert stats.total_orders == 6


def test_orders_per_day_reads_iso_strings_and_naive_utc():
    orders = [
        {"createdAt": "2026-10-18T01:00:00Z"},  # 09:00 SGT
        {"created_at": datetime(2026, 10, 17, 17, 0)},  # 01:00 SGT on the 18th
        {"created_at": datetime(2026, 10, 17, 15, 0)},  # 23:00 SGT on the 17th
        {"createdAt": "garbage"},
        {"amount": "3.00"},
    ]

    stats = compute_stats(orders, 0, 0, NOW)

    assert stats.orders_per_day == [0, 0, 0, 0, 0, 1, 2]
    assert stats.total_orders == 5
    assert stats.revenue == "$3.00"


def test_today_and_eight_days_ago():
    orders = [
        {"createdAt": NOW, "total": 100},
        {"createdAt": NOW - timedelta(days=8), "amount": "50.00"},
    ]

    stats = compute_stats(orders, 0, 0, NOW)

    assert stats.total_orders == 2
    assert stats.revenue == "$150.00"
    assert stats.today_orders == 1
    assert sum(stats.orders_per_day) == 1


def test_naive_now_is_treated_as_utc():
    now = datetime(2026, 10, 18, 12, 0)
    orders = [{"createdAt": datetime(2026, 10, 18, 1, 0, tzinfo=timezone.utc)}]

    stats = compute_stats(orders, 0, 0, now)

    assert stats.today_orders == 1


def test_day_bucket_spans_25_hours_when_dst_ends():
    new_york = ZoneInfo("America/New_York")
    now = datetime(2026, 11, 1, 12, 0, tzinfo=new_york)

    bounds = day_boundaries(now)

    assert len(bounds) == 8
    assert bounds[-1] - bounds[-2] == timedelta(hours=25)
    assert bounds[-2] == datetime(2026, 11, 1, 4, 0, tzinfo=timezone.utc)


# ── Month trend ──────────────────────────────────────────────────────────────
def test_sales_trend_buckets_calendar_months_and_rounds_once():
    orders = [
        {"createdAt": datetime(2026, 10, 1, 0, 0, tzinfo=SGT), "total": 10.5},
        {"createdAt": datetime(2026, 9, 30, 23, 0, tzinfo=SGT), "amount": "20.25"},
        {"createdAt": datetime(2026, 8, 5, tzinfo=SGT), "amount": "0.40"},
        {"createdAt": datetime(2026, 8, 6, tzinfo=SGT), "amount": "0.40"},
        {"createdAt": datetime(2026, 5, 1, 0, 0, tzinfo=SGT), "total": 5},
        {"createdAt": datetime(2026, 4, 30, 23, 59, tzinfo=SGT), "total": 1000},
    ]

    stats = compute_stats(orders, 0, 0, NOW)

    assert stats.sales_trend == [5, 0, 0, 1, 20, 11]
    # revenue is not windowed
    assert stats.revenue == "$1036.55"


def test_month_boundaries_cross_year_end():
    now = datetime(2026, 2, 10, tzinfo=timezone.utc)

    bounds = month_boundaries(now)

    assert len(bounds) == 7
    assert bounds[0] == datetime(2025, 9, 1, tzinfo=timezone.utc)
    assert bounds[-1] == datetime(2026, 3, 1, tzinfo=timezone.utc)

    stats = compute_stats(
        [{"createdAt": datetime(2025, 12, 24, tzinfo=timezone.utc), "total": 7}], 0, 0, now
    )
    assert stats.sales_trend == [0, 0, 0, 7, 0, 0]


# ── Categories ───────────────────────────────────────────────────────────────
def test_empty_input_yields_zeroes_and_sentinel_category():
    stats = compute_stats([], 0, 0, NOW)

    assert stats.total_orders == 0
    assert stats.revenue == "$0.00"
    assert stats.today_orders == 0
    assert stats.orders_per_day == [0] * 7
    assert stats.sales_trend == [0] * 6
    assert _categories(stats) == [("No categories yet", 100, "#6366F1")]


def test_categories_follow_keyword_rules_in_first_seen_order():
    orders = [{"items": ["iPhone case", "orange juice", "t-shirt", "random widget"]}]

    stats = compute_stats(orders, 0, 0, NOW)

    # "orange juice" has neither "food" nor "drink" in it
    assert _categories(stats) == [
        ("Electronics", 25, "#6366F1"),
        ("Other", 50, "#8B5CF6"),
        ("Clothing", 25, "#00D4FF"),
    ]


def test_food_keywords():
    stats = compute_stats([{"items": ["Orange drink", "Street FOOD box"]}], 0, 0, NOW)

    assert _categories(stats) == [("Food", 100, "#6366F1")]


def test_single_string_items_is_one_item():
    stats = compute_stats([{"items": "iPhone 14 Pro, AirPods"}], 0, 0, NOW)

    assert _categories(stats) == [("Electronics", 100, "#6366F1")]


def test_structured_items_are_serialized_before_matching():
    orders = [{"items": [{"name": "Phone charger", "qty": 2}, {"name": "Bread"}]}]

    stats = compute_stats(orders, 0, 0, NOW)

    assert _categories(stats) == [("Electronics", 50, "#6366F1"), ("Other", 50, "#8B5CF6")]


def test_percentages_round_half_up_without_correction():
    stats = compute_stats([{"items": ["phone", "phone", "shirt"]}], 0, 0, NOW)

    assert _categories(stats) == [("Electronics", 67, "#6366F1"), ("Clothing", 33, "#8B5CF6")]


def test_flatten_items_shapes():
    assert flatten_items(None) == ()
    assert flatten_items("Shirt") == ("Shirt",)
    assert flatten_items(["a", {"b": 1}]) == ("a", '{"b":1}')
    assert flatten_items(42) == ("42",)


# ── Output shape ─────────────────────────────────────────────────────────────
def test_stats_serialize_with_camel_case_keys():
    stats = compute_stats([{"createdAt": NOW, "total": 1}], 3, 4, NOW)

    payload = stats.model_dump(by_alias=True)

    assert set(payload) == {
        "totalOrders", "revenue", "pendingUsers", "pendingOrders",
        "todayOrders", "ordersPerDay", "salesTrend", "topCategories",
    }
    assert payload["pendingUsers"] == 3
    assert payload["pendingOrders"] == 4


# ── Service ──────────────────────────────────────────────────────────────────
class _FakeResult:
    def __init__(self, rows=None, scalar=None):
        self._rows = list(rows or [])
        self._scalar = scalar

    def scalars(self):
        return self

    def all(self):
        return self._rows

    def scalar(self):
        return self._scalar


class _FakeDB:
    def __init__(self, results):
        self._results = list(results)
        self.calls = 0

    async def execute(self, _query):
        self.calls += 1
        return self._results.pop(0)


@pytest.mark.asyncio
async def test_dashboard_service_reads_orders_and_approval_counts():
    order = SimpleNamespace(
        id=uuid.uuid4(),
        created_at=NOW.astimezone(timezone.utc),
        total=Decimal("10.00"),
        amount=None,
        items="Cotton shirt",
    )
    db = _FakeDB([
        _FakeResult(rows=[order]),
        _FakeResult(scalar=2),  # pending users
        _FakeResult(scalar=None),  # pending orders
    ])

    stats = await DashboardService(db).get_stats(now=NOW)

    assert db.calls == 3
    assert stats.total_orders == 1
    assert stats.revenue == "$10.00"
    assert stats.pending_users == 2
    assert stats.pending_orders == 0
    assert stats.today_orders == 1
    assert _categories(stats) == [("Clothing", 100, "#6366F1")]


def test_invalid_business_timezone_falls_back_to_utc(monkeypatch):
    monkeypatch.setattr(dashboard_service.settings, "BUSINESS_TIMEZONE", "Mars/Olympus_Mons")

    assert dashboard_service.business_timezone() is timezone.utc
