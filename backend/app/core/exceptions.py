"""
API error type rendered as the `{"error": ...}` body the dashboard expects.
"""

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class ApiError(HTTPException):
    """HTTPException whose detail is the user-facing error message."""

    def __init__(
        self,
        status_code: int,
        error: str,
        details: Any = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=error, headers=headers)
        self.details = details


async def api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
    content: dict[str, Any] = {"error": exc.detail}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)
