"""Pydantic request/response schemas."""

from app.schemas.health import HealthResponse
from app.schemas.user import UserPayload, UserResponse

__all__ = [
    "HealthResponse",
    "UserPayload",
    "UserResponse",
]
