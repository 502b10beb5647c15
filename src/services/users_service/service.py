from typing import Optional
from src.services.users_service.repository import UserRepository
from src.services.users_service.exceptions import UserConflictError
from src.shared.models.user_dto import UserDTO, UserRequest
from src.shared.models.common import PaginationParams, UserPage
from src.common.logger import log_info, TypeMsg


class UserService:
    def __init__(self, repository: UserRepository, max_page_size: Optional[int] = None):
        self.repository = repository
        self.max_page_size = max_page_size

    async def get_all_users(self, page: int, size: int) -> UserPage:
        """Возвращает страницу пользователей с метаданными пагинации."""
        if self.max_page_size is not None and size > self.max_page_size:
            await log_info(
                f"Размер страницы {size} урезан до {self.max_page_size}",
                type_msg=TypeMsg.WARNING,
            )
            size = self.max_page_size

        pagination = PaginationParams(page=page, page_size=size)
        users = await self.repository.get_all_users(limit=pagination.limit, offset=pagination.offset)
        total = await self.repository.count_users()

        return UserPage.create(users, total, pagination)

    async def get_user(self, user_id: int) -> Optional[UserDTO]:
        return await self.repository.get_user_by_id(user_id)

    async def get_user_by_username(self, username: str) -> Optional[UserDTO]:
        return await self.repository.get_user_by_username(username)

    async def create_user(self, user_data: UserRequest) -> UserDTO:
        """
        Создаёт пользователя.
        Проверки уникальности выполняются до вставки и не атомарны с ней:
        окончательное решение за UNIQUE-ограничениями БД.
        """
        if await self.repository.exists_by_username(user_data.username):
            await log_info(f"Username {user_data.username} уже занят", type_msg=TypeMsg.WARNING)
            raise UserConflictError.username_taken()
        if await self.repository.exists_by_email(user_data.email):
            await log_info(f"Email {user_data.email} уже занят", type_msg=TypeMsg.WARNING)
            raise UserConflictError.email_taken()

        user = await self.repository.create_user(user_data)
        await log_info(f"Создан пользователь {user.id} ({user.username})", type_msg=TypeMsg.INFO)
        return user

    async def update_user(self, user_id: int, user_data: UserRequest) -> Optional[UserDTO]:
        """
        Полностью заменяет изменяемые поля пользователя.
        Пропущенные в запросе first_name/last_name перезаписываются пустыми значениями.
        """
        user = await self.repository.get_user_by_id(user_id)
        if not user:
            await log_info(f"Пользователь {user_id} не найден для обновления", type_msg=TypeMsg.DEBUG)
            return None

        if user.username != user_data.username and await self.repository.exists_by_username(user_data.username):
            await log_info(f"Username {user_data.username} уже занят", type_msg=TypeMsg.WARNING)
            raise UserConflictError.username_taken()
        if user.email != user_data.email and await self.repository.exists_by_email(user_data.email):
            await log_info(f"Email {user_data.email} уже занят", type_msg=TypeMsg.WARNING)
            raise UserConflictError.email_taken()

        updated_user = await self.repository.update_user(user_id, user_data)
        if updated_user:
            await log_info(f"Пользователь {user_id} обновлён", type_msg=TypeMsg.INFO)
        return updated_user

    async def delete_user(self, user_id: int) -> bool:
        """Удаляет пользователя. False, если такого нет."""
        user = await self.repository.get_user_by_id(user_id)
        if not user:
            await log_info(f"Пользователь {user_id} не найден для удаления", type_msg=TypeMsg.DEBUG)
            return False

        deleted = await self.repository.delete_user(user_id)
        if deleted:
            await log_info(f"Пользователь {user_id} удалён", type_msg=TypeMsg.INFO)
        return deleted
