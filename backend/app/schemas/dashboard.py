"""
Pydantic schemas for the dashboard statistics widget.
"""

from pydantic import Field

from app.schemas.base import CamelModel


class CategoryShare(CamelModel):
    """One slice of the category donut chart."""
    name: str
    percentage: int
    color: str


class DashboardStats(CamelModel):
    """Fixed-shape statistics summary for the dashboard home page."""
    total_orders: int
    revenue: str  # "$1234.50"
    pending_users: int
    pending_orders: int
    today_orders: int
    orders_per_day: list[int] = Field(..., min_length=7, max_length=7)
    sales_trend: list[int] = Field(..., min_length=6, max_length=6)
    top_categories: list[CategoryShare]
