#/services/base.py

"""
Базовый класс для всех сервисов.
Один сервис-вызов = одна транзакция; кто что может делать - тоже здесь.
"""

from contextlib import asynccontextmanager
from datetime import datetime
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import UnauthorizedAccess


class BaseService:
    """Общая работа с сессией и правами"""

    def __init__(self, db_session: AsyncSession):
        """
        Args:
            db_session: Асинхронная сессия SQLAlchemy (одна на запрос)
        """
        self.db_session = db_session
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def now() -> datetime:
        return datetime.utcnow()

    # ========== ПРАВА ==========

    @staticmethod
    def is_privileged(user) -> bool:
        """Модераторы и админы: их карты одобряются сразу"""
        return any(perm in settings.PRIVILEGED_PERMISSIONS for perm in user.permissions_array)

    def require_privileged(self, user, action: str) -> None:
        if not self.is_privileged(user):
            self.logger.warning(f"User {user.id} tried to {action} without permission")
            raise UnauthorizedAccess(user.id, action)

    def require_owner_or_privileged(self, user, owner_id, action: str) -> None:
        if owner_id != user.id:
            self.require_privileged(user, action)

    # ========== ТРАНЗАКЦИИ ==========

    @asynccontextmanager
    async def unit_of_work(self, description: str):
        """
        Всё внутри блока попадает в БД одним commit.
        Любая ошибка (валидация, БД) - rollback и проброс дальше.

            async with self.unit_of_work(f"mod '{name}'"):
                self.db_session.add(mod)
        """
        try:
            yield
            await self.db_session.commit()
        except Exception as e:
            self.logger.warning(f"{description} rejected: {e}")
            await self.db_session.rollback()
            raise

    async def commit(self) -> None:
        """Сохранить изменения в БД, при ошибке - откат"""
        try:
            await self.db_session.commit()
        except Exception as e:
            self.logger.error(f"Commit failed: {e}", exc_info=True)
            await self.db_session.rollback()
            raise

    async def flush(self) -> None:
        try:
            await self.db_session.flush()
        except Exception as e:
            self.logger.error(f"Flush failed: {e}", exc_info=True)
            raise
