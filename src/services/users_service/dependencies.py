from fastapi import Depends, Request
from src.infra.database import DatabaseManager
from src.services.users_service.repository import UserRepository
from src.services.users_service.service import UserService
from src.config import settings


def get_database(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_user_repository(db: DatabaseManager = Depends(get_database)) -> UserRepository:
    return UserRepository(db)


def get_user_service(repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repo, max_page_size=settings.pagination.MAX_PAGE_SIZE)
