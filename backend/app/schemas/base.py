"""
Shared schema base — the dashboard client speaks camelCase JSON.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (both accepted on input)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ActionResponse(CamelModel):
    """Generic `{success, message}` reply for dashboard actions."""
    success: bool = True
    message: str
