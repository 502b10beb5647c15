# src/services/__init__.py
"""
Микросервисы приложения.

Архитектура:
- Каждый сервис — независимое FastAPI-приложение
- Собственная PostgreSQL-схема на сервис
- Синхронная коммуникация по HTTP через gateway

Сервисы:
- users_service: справочник пользователей (CRUD, уникальность username/email)
"""

__all__: list[str] = []
