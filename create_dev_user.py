import asyncio
import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

from src.config import settings
from src.infra.database import DatabaseManager, init_schema
from src.services.users_service.repository import UserRepository
from src.services.users_service.service import UserService
from src.services.users_service.exceptions import UserConflictError
from src.shared.models.user_dto import UserRequest


async def main():
    db = DatabaseManager.from_settings(settings.database)
    await db.connect()
    await init_schema(db)

    print("Connected to DB")

    service = UserService(UserRepository(db))
    dev_user = UserRequest(username="devuser", email="dev@example.com", first_name="Dev", last_name="User")

    try:
        user = await service.create_user(dev_user)
        print(f"Dev user created: id={user.id}")
    except UserConflictError as e:
        print(f"Dev user not created: {e.message}")
    finally:
        await db.disconnect()

if __name__ == "__main__":
    asyncio.run(main())
