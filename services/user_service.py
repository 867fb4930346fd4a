# services/user_service.py

from sqlalchemy import select
from typing import Optional

from core.exceptions import UserNotFound
from models.user import User
from services.base import BaseService


class UserService(BaseService):

    async def get_user(self, user_id: int) -> Optional[User]:
        """Получить пользователя по ID"""
        result = await self.db_session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def require_user(self, user_id: int) -> User:
        """Получить пользователя или UserNotFound"""
        user = await self.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)
        return user

    async def create_user(
        self,
        display_name: str,
        permissions: str = "",
        discord_id: Optional[str] = None,
        discord_username: Optional[str] = None,
    ) -> User:
        """Создать пользователя (без commit)"""
        user = User(
            display_name=display_name,
            permissions=permissions,
            discord_id=discord_id,
            discord_username=discord_username,
        )
        self.db_session.add(user)
        await self.flush()
        return user

