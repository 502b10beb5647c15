import pytest
from unittest.mock import AsyncMock, MagicMock
from src.services.users_service.service import UserService
from src.services.users_service.repository import UserRepository
from src.services.users_service.exceptions import UserConflictError
from src.shared.models.user_dto import UserRequest, UserDTO


def make_user(**overrides) -> UserDTO:
    data = {
        "id": 1,
        "username": "alice",
        "email": "a@x.com",
        "first_name": "A",
        "last_name": "L",
        "created_at": "2024-01-01T00:00:00",
        "updated_at": "2024-01-01T00:00:00",
    }
    data.update(overrides)
    return UserDTO(**data)


@pytest.fixture
def repo():
    repo = MagicMock(spec=UserRepository)
    repo.exists_by_username = AsyncMock(return_value=False)
    repo.exists_by_email = AsyncMock(return_value=False)
    repo.get_user_by_id = AsyncMock(return_value=None)
    return repo


@pytest.mark.asyncio
async def test_create_user(repo):
    expected_user = make_user()
    repo.create_user = AsyncMock(return_value=expected_user)
    service = UserService(repo)

    request = UserRequest(username="alice", email="a@x.com", first_name="A", last_name="L")
    result = await service.create_user(request)

    assert result == expected_user
    repo.exists_by_username.assert_called_once_with("alice")
    repo.exists_by_email.assert_called_once_with("a@x.com")
    repo.create_user.assert_called_once_with(request)


@pytest.mark.asyncio
async def test_create_user_username_taken(repo):
    repo.exists_by_username = AsyncMock(return_value=True)
    repo.create_user = AsyncMock()
    service = UserService(repo)

    with pytest.raises(UserConflictError) as exc_info:
        await service.create_user(UserRequest(username="alice", email="new@x.com"))

    assert exc_info.value.message == "Username already exists"
    # Email не проверяется, запись не выполняется
    repo.exists_by_email.assert_not_called()
    repo.create_user.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_email_taken(repo):
    repo.exists_by_email = AsyncMock(return_value=True)
    repo.create_user = AsyncMock()
    service = UserService(repo)

    with pytest.raises(UserConflictError) as exc_info:
        await service.create_user(UserRequest(username="bob", email="a@x.com"))

    assert exc_info.value.message == "Email already exists"
    repo.create_user.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_store_conflict_propagates(repo):
    repo.create_user = AsyncMock(side_effect=UserConflictError.username_taken())
    service = UserService(repo)

    with pytest.raises(UserConflictError):
        await service.create_user(UserRequest(username="alice", email="a@x.com"))


@pytest.mark.asyncio
async def test_get_user_not_found(repo):
    service = UserService(repo)

    assert await service.get_user(42) is None
    repo.get_user_by_id.assert_called_once_with(42)


@pytest.mark.asyncio
async def test_get_user_by_username(repo):
    repo.get_user_by_username = AsyncMock(return_value=make_user())
    service = UserService(repo)

    result = await service.get_user_by_username("alice")

    assert result.username == "alice"


@pytest.mark.asyncio
async def test_update_user_not_found(repo):
    repo.update_user = AsyncMock()
    service = UserService(repo)

    result = await service.update_user(1, UserRequest(username="alice", email="a@x.com"))

    assert result is None
    repo.update_user.assert_not_called()


@pytest.mark.asyncio
async def test_update_user_same_username_skips_check(repo):
    existing = make_user()
    repo.get_user_by_id = AsyncMock(return_value=existing)
    repo.update_user = AsyncMock(return_value=existing.model_copy(update={"first_name": "Alice"}))
    service = UserService(repo)

    request = UserRequest(username="alice", email="a@x.com", first_name="Alice", last_name="L")
    result = await service.update_user(1, request)

    assert result.first_name == "Alice"
    repo.exists_by_username.assert_not_called()
    repo.exists_by_email.assert_not_called()
    repo.update_user.assert_called_once_with(1, request)


@pytest.mark.asyncio
async def test_update_user_username_taken_by_other(repo):
    repo.get_user_by_id = AsyncMock(return_value=make_user())
    repo.exists_by_username = AsyncMock(return_value=True)
    repo.update_user = AsyncMock()
    service = UserService(repo)

    with pytest.raises(UserConflictError) as exc_info:
        await service.update_user(1, UserRequest(username="bob", email="a@x.com"))

    assert exc_info.value.message == "Username already exists"
    repo.update_user.assert_not_called()


@pytest.mark.asyncio
async def test_update_user_email_taken_by_other(repo):
    repo.get_user_by_id = AsyncMock(return_value=make_user())
    repo.exists_by_email = AsyncMock(return_value=True)
    repo.update_user = AsyncMock()
    service = UserService(repo)

    with pytest.raises(UserConflictError) as exc_info:
        await service.update_user(1, UserRequest(username="alice", email="b@x.com"))

    assert exc_info.value.message == "Email already exists"
    repo.update_user.assert_not_called()


@pytest.mark.asyncio
async def test_update_user_passes_omitted_fields_as_none(repo):
    repo.get_user_by_id = AsyncMock(return_value=make_user())
    repo.update_user = AsyncMock(return_value=make_user(first_name=None, last_name=None))
    service = UserService(repo)

    await service.update_user(1, UserRequest(username="alice", email="a@x.com"))

    sent = repo.update_user.call_args[0][1]
    assert sent.first_name is None
    assert sent.last_name is None


@pytest.mark.asyncio
async def test_delete_user(repo):
    repo.get_user_by_id = AsyncMock(return_value=make_user())
    repo.delete_user = AsyncMock(return_value=True)
    service = UserService(repo)

    assert await service.delete_user(1) is True
    repo.delete_user.assert_called_once_with(1)


@pytest.mark.asyncio
async def test_delete_user_not_found(repo):
    repo.delete_user = AsyncMock()
    service = UserService(repo)

    assert await service.delete_user(1) is False
    repo.delete_user.assert_not_called()


@pytest.mark.asyncio
async def test_get_all_users_pagination(repo):
    repo.get_all_users = AsyncMock(return_value=[make_user(id=i, username=f"u{i}", email=f"u{i}@x.com") for i in range(1, 11)])
    repo.count_users = AsyncMock(return_value=25)
    service = UserService(repo)

    page = await service.get_all_users(0, 10)

    assert len(page.users) == 10
    assert page.current_page == 0
    assert page.total_pages == 3
    assert page.total_elements == 25
    repo.get_all_users.assert_called_once_with(limit=10, offset=0)


@pytest.mark.asyncio
async def test_get_all_users_offset(repo):
    repo.get_all_users = AsyncMock(return_value=[])
    repo.count_users = AsyncMock(return_value=25)
    service = UserService(repo)

    await service.get_all_users(2, 10)

    repo.get_all_users.assert_called_once_with(limit=10, offset=20)


@pytest.mark.asyncio
async def test_get_all_users_empty(repo):
    repo.get_all_users = AsyncMock(return_value=[])
    repo.count_users = AsyncMock(return_value=0)
    service = UserService(repo)

    page = await service.get_all_users(0, 10)

    assert page.total_pages == 0
    assert page.total_elements == 0


@pytest.mark.asyncio
async def test_get_all_users_clamps_page_size(repo):
    repo.get_all_users = AsyncMock(return_value=[])
    repo.count_users = AsyncMock(return_value=250)
    service = UserService(repo, max_page_size=100)

    page = await service.get_all_users(0, 5000)

    repo.get_all_users.assert_called_once_with(limit=100, offset=0)
    assert page.total_pages == 3


@pytest.mark.asyncio
async def test_get_all_users_unbounded_without_limit(repo):
    repo.get_all_users = AsyncMock(return_value=[])
    repo.count_users = AsyncMock(return_value=0)
    service = UserService(repo)

    await service.get_all_users(0, 5000)

    repo.get_all_users.assert_called_once_with(limit=5000, offset=0)


@pytest.mark.asyncio
async def test_delete_user_row_vanished_before_delete(repo):
    repo.get_user_by_id = AsyncMock(return_value=make_user())
    repo.delete_user = AsyncMock(return_value=False)
    service = UserService(repo)

    assert await service.delete_user(1) is False
    repo.delete_user.assert_called_once_with(1)
