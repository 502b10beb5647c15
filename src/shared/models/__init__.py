# src/shared/models/__init__.py
"""
Общие DTO и Pydantic-модели сервиса.
"""

from src.shared.models.user_dto import UserDTO, UserRequest
from src.shared.models.common import (
    PaginationParams,
    UserPage,
    ErrorResponse,
    MessageResponse,
    HealthStatus,
)

__all__ = [
    # User
    "UserDTO",
    "UserRequest",
    # Common
    "PaginationParams",
    "UserPage",
    "ErrorResponse",
    "MessageResponse",
    "HealthStatus",
]
