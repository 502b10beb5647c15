from typing import Optional, List
import asyncpg
from src.infra.database import DatabaseManager
from src.shared.models.user_dto import UserDTO, UserRequest
from src.services.users_service.exceptions import UserConflictError
from src.common.logger import log_warning

USER_COLUMNS = "id, username, email, first_name, last_name, created_at, updated_at"

EMAIL_CONSTRAINT = "users_email_key"


def conflict_from_violation(error: asyncpg.UniqueViolationError) -> UserConflictError:
    """Переводит нарушение UNIQUE-ограничения в ошибку конфликта."""
    constraint = getattr(error, "constraint_name", None) or ""
    if constraint == EMAIL_CONSTRAINT:
        return UserConflictError.email_taken()
    return UserConflictError.username_taken()


class UserRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def get_user_by_id(self, user_id: int) -> Optional[UserDTO]:
        """Получает пользователя по ID."""
        query = f"""
            SELECT {USER_COLUMNS}
            FROM users_schema.users
            WHERE id = $1
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, user_id)
            if record:
                return UserDTO(**dict(record))
            return None

    async def get_user_by_username(self, username: str) -> Optional[UserDTO]:
        """Получает пользователя по username."""
        query = f"""
            SELECT {USER_COLUMNS}
            FROM users_schema.users
            WHERE username = $1
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, username)
            if record:
                return UserDTO(**dict(record))
            return None

    async def exists_by_username(self, username: str) -> bool:
        query = "SELECT EXISTS(SELECT 1 FROM users_schema.users WHERE username = $1)"
        async with self.db.acquire() as conn:
            return bool(await conn.fetchval(query, username))

    async def exists_by_email(self, email: str) -> bool:
        query = "SELECT EXISTS(SELECT 1 FROM users_schema.users WHERE email = $1)"
        async with self.db.acquire() as conn:
            return bool(await conn.fetchval(query, email))

    async def create_user(self, user: UserRequest) -> UserDTO:
        """
        Создаёт пользователя; ID назначает БД.
        Нарушение UNIQUE при вставке превращается в UserConflictError.
        """
        query = f"""
            INSERT INTO users_schema.users (username, email, first_name, last_name)
            VALUES ($1, $2, $3, $4)
            RETURNING {USER_COLUMNS}
        """
        async with self.db.acquire() as conn:
            try:
                record = await conn.fetchrow(
                    query,
                    user.username,
                    user.email,
                    user.first_name,
                    user.last_name,
                )
            except asyncpg.UniqueViolationError as e:
                await log_warning(f"Конфликт уникальности при вставке {user.username}: {e.constraint_name}")
                raise conflict_from_violation(e) from e
            return UserDTO(**dict(record))

    async def update_user(self, user_id: int, user: UserRequest) -> Optional[UserDTO]:
        """Перезаписывает все изменяемые поля пользователя (полная замена)."""
        query = f"""
            UPDATE users_schema.users
            SET username = $2, email = $3, first_name = $4, last_name = $5, updated_at = NOW()
            WHERE id = $1
            RETURNING {USER_COLUMNS}
        """
        async with self.db.acquire() as conn:
            try:
                record = await conn.fetchrow(
                    query,
                    user_id,
                    user.username,
                    user.email,
                    user.first_name,
                    user.last_name,
                )
            except asyncpg.UniqueViolationError as e:
                await log_warning(f"Конфликт уникальности при обновлении {user_id}: {e.constraint_name}")
                raise conflict_from_violation(e) from e
            if record:
                return UserDTO(**dict(record))
            return None

    async def delete_user(self, user_id: int) -> bool:
        """Удаляет пользователя. Возвращает True, если строка была удалена."""
        query = "DELETE FROM users_schema.users WHERE id = $1"
        async with self.db.acquire() as conn:
            status = await conn.execute(query, user_id)
            return status.endswith(" 1")

    async def get_all_users(self, limit: int, offset: int) -> List[UserDTO]:
        """Получает список пользователей с пагинацией (в порядке ID)."""
        query = f"""
            SELECT {USER_COLUMNS}
            FROM users_schema.users
            ORDER BY id
            LIMIT $1 OFFSET $2
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, limit, offset)
            return [UserDTO(**dict(record)) for record in records]

    async def count_users(self) -> int:
        """Возвращает общее количество пользователей."""
        query = "SELECT COUNT(*) FROM users_schema.users"
        async with self.db.acquire() as conn:
            return await conn.fetchval(query)
