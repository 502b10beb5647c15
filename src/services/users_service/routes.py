from fastapi import APIRouter, Depends, Path, Query, Response, status
from src.services.users_service.service import UserService
from src.services.users_service.dependencies import get_user_service
from src.shared.models.user_dto import UserDTO, UserRequest
from src.shared.models.common import ErrorResponse, HealthStatus, MessageResponse
from src.common.constants import MAX_BIGINT, SERVICE_NAME, MSG_USER_DELETED
from src.config import settings

router = APIRouter(prefix="/api/users", tags=["users"])

# Смещение page * size не должно выходить за BIGINT
MAX_PAGE = MAX_BIGINT // settings.pagination.MAX_PAGE_SIZE

CONFLICT_RESPONSE = {status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "Username или email уже заняты"}}
NOT_FOUND_RESPONSE = {status.HTTP_404_NOT_FOUND: {"description": "Пользователь не найден (пустое тело)"}}


def not_found() -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


# Должен быть объявлен раньше /{user_id}
@router.get("/health", response_model=HealthStatus)
async def health():
    """Живость сервиса. Зависимости не проверяются."""
    return HealthStatus(status="UP", service=SERVICE_NAME)


@router.get("", response_model=dict)
async def get_all_users(
    page: int = Query(0, ge=0, le=MAX_PAGE),
    size: int = Query(settings.pagination.DEFAULT_PAGE_SIZE, ge=1),
    service: UserService = Depends(get_user_service)
):
    user_page = await service.get_all_users(page, size)
    return user_page.to_response()


@router.get("/username/{username}", response_model=UserDTO, responses=NOT_FOUND_RESPONSE)
async def get_user_by_username(
    username: str,
    service: UserService = Depends(get_user_service)
):
    user = await service.get_user_by_username(username)
    if not user:
        return not_found()
    return user


@router.get("/{user_id}", response_model=UserDTO, responses=NOT_FOUND_RESPONSE)
async def get_user(
    user_id: int = Path(..., ge=1, le=MAX_BIGINT),
    service: UserService = Depends(get_user_service)
):
    user = await service.get_user(user_id)
    if not user:
        return not_found()
    return user


@router.post("", response_model=UserDTO, status_code=status.HTTP_201_CREATED, responses=CONFLICT_RESPONSE)
async def create_user(
    user_data: UserRequest,
    service: UserService = Depends(get_user_service)
):
    return await service.create_user(user_data)


@router.put("/{user_id}", response_model=UserDTO, responses={**NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE})
async def update_user(
    user_data: UserRequest,
    user_id: int = Path(..., ge=1, le=MAX_BIGINT),
    service: UserService = Depends(get_user_service)
):
    """Полная замена: поля, отсутствующие в запросе, будут затёрты."""
    user = await service.update_user(user_id, user_data)
    if not user:
        return not_found()
    return user


@router.delete("/{user_id}", response_model=MessageResponse, responses=NOT_FOUND_RESPONSE)
async def delete_user(
    user_id: int = Path(..., ge=1, le=MAX_BIGINT),
    service: UserService = Depends(get_user_service)
):
    if not await service.delete_user(user_id):
        return not_found()
    return MessageResponse(message=MSG_USER_DELETED)
