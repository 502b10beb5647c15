# src/services/users_service/exceptions.py
"""
Исключения Users Service.
"""

from src.common.constants import MSG_EMAIL_EXISTS, MSG_USERNAME_EXISTS


class UserConflictError(Exception):
    """Нарушение уникальности username или email."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @classmethod
    def username_taken(cls) -> "UserConflictError":
        return cls(MSG_USERNAME_EXISTS)

    @classmethod
    def email_taken(cls) -> "UserConflictError":
        return cls(MSG_EMAIL_EXISTS)
