# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "комментарий",
        "PROJECT_NAME": "user_directory_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "USERS_SERVICE_HOST": "127.0.0.1",
        "USERS_SERVICE_PORT": 9084,
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "colored",
        "DB_HOST": "db.test",
        "DB_PORT": 5433,
        "DB_NAME": "user_directory_test",
        "DB_USER": "tester",
        "DB_PASSWORD": "test_password",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "DB_RETRY_ATTEMPTS": 2,
        "DB_RETRY_DELAY": 0.5,
        "DEFAULT_PAGE_SIZE": 10,
        "MAX_PAGE_SIZE": 50,
    }


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_conn() -> AsyncMock:
    """Мок соединения asyncpg."""
    conn = AsyncMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.execute = AsyncMock(return_value="DELETE 0")
    conn.fetchval = AsyncMock(return_value=None)
    return conn


@pytest.fixture
def mock_db(mock_conn: AsyncMock) -> MagicMock:
    """Мок DatabaseManager: acquire() отдаёт mock_conn."""
    db = MagicMock()
    db.acquire.return_value.__aenter__.return_value = mock_conn
    db.acquire.return_value.__aexit__.return_value = None
    return db


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def sample_user_data() -> dict[str, Any]:
    """Пример строки пользователя из БД."""
    return {
        "id": 1,
        "username": "alice",
        "email": "a@x.com",
        "first_name": "A",
        "last_name": "L",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


# =============================================================================
# IN-MEMORY ХРАНИЛИЩЕ
# =============================================================================

class InMemoryUserRepository:
    """
    Репозиторий в памяти с тем же интерфейсом, что и UserRepository.
    Эмулирует BIGSERIAL (ID не переиспользуются) и UNIQUE-ограничения.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1

    def _dto(self, row: dict[str, Any]):
        from src.shared.models.user_dto import UserDTO
        return UserDTO(**row)

    def _check_unique(self, username: str, email: str, exclude_id: Optional[int] = None) -> None:
        from src.services.users_service.exceptions import UserConflictError
        for row_id, row in self.rows.items():
            if row_id == exclude_id:
                continue
            if row["username"] == username:
                raise UserConflictError.username_taken()
            if row["email"] == email:
                raise UserConflictError.email_taken()

    async def get_user_by_id(self, user_id: int):
        row = self.rows.get(user_id)
        return self._dto(row) if row else None

    async def get_user_by_username(self, username: str):
        for row in self.rows.values():
            if row["username"] == username:
                return self._dto(row)
        return None

    async def exists_by_username(self, username: str) -> bool:
        return any(row["username"] == username for row in self.rows.values())

    async def exists_by_email(self, email: str) -> bool:
        return any(row["email"] == email for row in self.rows.values())

    async def create_user(self, user):
        self._check_unique(user.username, user.email)
        now = datetime.now(timezone.utc)
        row = {
            "id": self._next_id,
            "username": user.username,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "created_at": now,
            "updated_at": now,
        }
        self.rows[self._next_id] = row
        self._next_id += 1
        return self._dto(row)

    async def update_user(self, user_id: int, user):
        row = self.rows.get(user_id)
        if row is None:
            return None
        self._check_unique(user.username, user.email, exclude_id=user_id)
        row.update(
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            updated_at=datetime.now(timezone.utc),
        )
        return self._dto(row)

    async def delete_user(self, user_id: int) -> bool:
        return self.rows.pop(user_id, None) is not None

    async def get_all_users(self, limit: int, offset: int):
        ordered = [self.rows[key] for key in sorted(self.rows)]
        return [self._dto(row) for row in ordered[offset:offset + limit]]

    async def count_users(self) -> int:
        return len(self.rows)


@pytest.fixture
def memory_repo() -> InMemoryUserRepository:
    """Пустое in-memory хранилище пользователей."""
    return InMemoryUserRepository()
