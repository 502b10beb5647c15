# src/shared/models/common.py
"""
Общие модели ответов сервиса.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.shared.models.user_dto import UserDTO


class PaginationParams(BaseModel):
    """Параметры пагинации (страницы нумеруются с нуля)."""

    page: int = Field(default=0, ge=0, description="Номер страницы")
    page_size: int = Field(default=10, ge=1, description="Размер страницы")

    @property
    def offset(self) -> int:
        """Смещение для SQL-запроса."""
        return self.page * self.page_size

    @property
    def limit(self) -> int:
        """Лимит для SQL-запроса."""
        return self.page_size


class UserPage(BaseModel):
    """Страница пользователей с метаданными."""

    users: list[UserDTO]
    current_page: int
    total_pages: int
    total_elements: int

    @classmethod
    def create(
        cls,
        users: list[UserDTO],
        total: int,
        pagination: PaginationParams,
    ) -> "UserPage":
        """Создаёт страницу; для пустой выборки total_pages равен 0."""
        total_pages = (total + pagination.page_size - 1) // pagination.page_size
        return cls(
            users=users,
            current_page=pagination.page,
            total_pages=total_pages,
            total_elements=total,
        )

    def to_response(self) -> dict[str, Any]:
        """Тело ответа API (camelCase)."""
        return {
            "users": [user.model_dump(mode="json", by_alias=True) for user in self.users],
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalElements": self.total_elements,
        }


class ErrorResponse(BaseModel):
    """Тело ответа с ошибкой."""

    error: str


class MessageResponse(BaseModel):
    """Тело ответа с сообщением."""

    message: str


class HealthStatus(BaseModel):
    """Статус живости сервиса."""

    status: str = "UP"
    service: str
