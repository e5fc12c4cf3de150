"""
Status derivation — maps a component status string to display classes.
"""

from typing import NamedTuple


class StatusColor(NamedTuple):
    text_color_class: str
    dot_color_class: str


GREEN = StatusColor("text-green-400", "bg-green-500")
YELLOW = StatusColor("text-yellow-400", "bg-yellow-500")
RED = StatusColor("text-red-400", "bg-red-500")
GRAY = StatusColor("text-gray-400", "bg-gray-500")

_STATUS_COLORS: dict[str, StatusColor] = {
    "online": GREEN,
    "active": GREEN,
    "connected": GREEN,
    "monitoring": YELLOW,
    "offline": RED,
    "inactive": RED,
}


def color_for(status_text: str | None) -> StatusColor:
    """Case-insensitive lookup; unknown or empty statuses are gray."""
    return _STATUS_COLORS.get((status_text or "").strip().lower(), GRAY)
