# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Имя сервиса в ответе health-check
SERVICE_NAME = "user-microservice"

# Тексты ответов API
MSG_USERNAME_EXISTS = "Username already exists"
MSG_EMAIL_EXISTS = "Email already exists"
MSG_USER_DELETED = "User deleted successfully"
MSG_INTERNAL_ERROR = "Internal server error"

# Верхняя граница BIGINT в PostgreSQL
MAX_BIGINT = 2**63 - 1
