"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


# Error responses shared by every authenticated route
AUTH_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    409: {"model": ErrorResponse, "description": "Identity already bound to another profile"},
    503: {"model": ErrorResponse, "description": "Profile store unavailable"},
}
