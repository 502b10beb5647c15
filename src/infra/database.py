# src/infra/database.py
"""
Менеджер базы данных PostgreSQL.
Реализует пул соединений, повтор подключения при старте и применение схемы.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import wraps
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, TypeVar

import asyncpg
from asyncpg import Connection, Pool

from src.common.logger import log_error, log_info, log_warning
from src.common.constants import TypeMsg
from src.config.loader import DatabaseSettings, get_project_root

T = TypeVar("T")

# Произвольный ID advisory-лока для миграций
SCHEMA_LOCK_ID = 723401


def retry_on_connection_error(
    max_attempts: int = 3,
    delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Декоратор для автоматического ретрая при ошибках подключения.

    Args:
        max_attempts: Максимальное количество попыток
        delay: Базовая задержка между попытками (секунды), растёт линейно
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            last_error: Exception | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except (
                    asyncpg.PostgresConnectionError,
                    asyncpg.InterfaceError,
                    ConnectionRefusedError,
                    OSError,
                ) as e:
                    last_error = e
                    if attempt < max_attempts:
                        await log_info(
                            f"Ошибка подключения к БД (попытка {attempt}/{max_attempts}): {e}",
                            type_msg=TypeMsg.WARNING,
                        )
                        await asyncio.sleep(delay * attempt)
                    else:
                        await log_error(f"Не удалось подключиться к БД после {max_attempts} попыток: {e}")

            raise last_error  # type: ignore

        return wrapper  # type: ignore

    return decorator


class DatabaseManager:
    """
    Менеджер подключений к PostgreSQL.
    Создаётся явно при старте приложения и передаётся репозиториям.
    """

    def __init__(
        self,
        dsn: str,
        min_size: int = 5,
        max_size: int = 20,
        command_timeout: int = 60,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay
        self._pool: Pool | None = None

    @classmethod
    def from_settings(cls, db_settings: DatabaseSettings) -> DatabaseManager:
        """Создаёт менеджер из секции database конфигурации."""
        return cls(
            dsn=db_settings.dsn,
            min_size=db_settings.DB_MIN_POOL_SIZE,
            max_size=db_settings.DB_MAX_POOL_SIZE,
            command_timeout=db_settings.DB_COMMAND_TIMEOUT,
            retry_attempts=db_settings.DB_RETRY_ATTEMPTS,
            retry_delay=db_settings.DB_RETRY_DELAY,
        )

    @property
    def pool(self) -> Pool:
        """Возвращает пул соединений."""
        if self._pool is None:
            raise RuntimeError("Пул соединений не инициализирован. Вызовите connect() сначала.")
        return self._pool

    async def connect(self) -> None:
        """Создаёт пул соединений к PostgreSQL (с повтором при ошибках подключения)."""
        if self._pool is not None:
            return

        await log_info("Подключение к PostgreSQL...", type_msg=TypeMsg.INFO)

        create_pool = retry_on_connection_error(
            max_attempts=self._retry_attempts,
            delay=self._retry_delay,
        )(self._create_pool)
        self._pool = await create_pool()

        await log_info("Подключение к PostgreSQL установлено", type_msg=TypeMsg.INFO)

    async def _create_pool(self) -> Pool:
        return await asyncpg.create_pool(
            dsn=self._dsn,
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )

    async def disconnect(self) -> None:
        """Закрывает пул соединений."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            await log_info("Соединение с PostgreSQL закрыто", type_msg=TypeMsg.INFO)

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[Connection, None]:
        """
        Контекстный менеджер для получения соединения из пула.

        Example:
            async with db.acquire() as conn:
                row = await conn.fetchrow("SELECT * FROM users_schema.users WHERE id = $1", 1)
        """
        async with self.pool.acquire() as connection:
            yield connection


# =============================================================================
# СХЕМА
# =============================================================================

def get_schema_path() -> Path:
    """Возвращает путь к SQL-файлу схемы."""
    return get_project_root() / "migrations" / "init.sql"


async def init_schema(db: DatabaseManager, schema_path: Path | None = None) -> None:
    """
    Применяет начальную миграцию БД.
    Скрипт идемпотентен; одновременный старт нескольких инстансов
    сериализуется advisory-локом.
    """
    schema_path = schema_path or get_schema_path()
    if not schema_path.exists():
        await log_error(f"Файл схемы БД не найден: {schema_path}")
        return

    schema_sql = schema_path.read_text(encoding="utf-8")

    try:
        await log_info("Применение схемы БД...", type_msg=TypeMsg.INFO)

        async with db.acquire() as conn:
            async with conn.transaction():
                await conn.execute("SELECT pg_advisory_xact_lock($1)", SCHEMA_LOCK_ID)
                await conn.execute(schema_sql)

        await log_info("Схема БД успешно применена", type_msg=TypeMsg.INFO)
    except Exception as e:
        # Гонка процессов при старте не фатальна
        if "deadlock detected" in str(e) or "already exists" in str(e):
            await log_warning(f"Игнорируем ошибку инициализации (гонка процессов): {e}")
        else:
            await log_error(f"Ошибка при инициализации схемы БД: {e}", exc_info=True)
            raise
