# src/infra/__init__.py
"""
Инфраструктурный слой.
Работа с внешними сервисами: PostgreSQL.
"""

from src.infra.database import DatabaseManager, init_schema, retry_on_connection_error

__all__ = [
    "DatabaseManager",
    "init_schema",
    "retry_on_connection_error",
]
