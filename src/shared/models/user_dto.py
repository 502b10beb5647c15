from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class UserDTO(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class UserRequest(BaseModel):
    """
    Тело запроса на создание и полную замену пользователя.
    Имя и фамилия необязательны: при обновлении пропущенное поле затирается.
    """
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True

    @field_validator("email")
    @classmethod
    def check_email_length(cls, v: str) -> str:
        """Ограничение колонки users.email."""
        if len(v) > 100:
            raise ValueError("email must be at most 100 characters")
        return v
