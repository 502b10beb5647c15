#!/usr/bin/env python3
# entrypoint_users_service.py
"""
Точка входа для Users Service.
Порт: 8084
"""

import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
sys.path.insert(0, str(Path(__file__).parent.parent.resolve()))

import uvicorn

from src.config import settings
from src.common.logger import setup_logging, log_info
from src.common.constants import TypeMsg


async def main() -> None:
    """Запуск Users Service."""
    setup_logging()
    await log_info(
        f"Запуск Users Service на {settings.deployment.USERS_SERVICE_HOST}:{settings.deployment.USERS_SERVICE_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.users_service.app:app",
        host=settings.deployment.USERS_SERVICE_HOST,
        port=settings.deployment.USERS_SERVICE_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info("Users Service: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
