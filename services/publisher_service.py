# services/publisher_service.py

from sqlalchemy import select, func
from typing import List, Optional

from core.exceptions import (
    AmbiguousPublisher,
    GamebananaMemberNotFound,
    InvalidRequest,
    NoPublisherForUser,
    PublisherNotFound,
)
from models.mod import ModDetails
from models.publisher import Publisher
from models.user import User
from schemas.publisher import PublisherUpdate
from services.base import BaseService
from services.gamebanana_service import GamebananaService
from services.user_service import UserService


class PublisherService(BaseService):
    def __init__(self, db_session, gamebanana: Optional[GamebananaService] = None):
        super().__init__(db_session)
        self.gamebanana = gamebanana or GamebananaService()

    # ========== ЧТЕНИЕ ==========

    async def get_all_publishers(self) -> List[Publisher]:
        result = await self.db_session.execute(select(Publisher).order_by(Publisher.name, Publisher.id))
        return list(result.scalars().all())

    async def search_publishers(self, name_prefix: str) -> List[Publisher]:
        """Поиск по началу имени"""
        result = await self.db_session.execute(
            select(Publisher)
            .where(Publisher.name.startswith(name_prefix, autoescape=True))
            .order_by(Publisher.name, Publisher.id)
        )
        return list(result.scalars().all())

    async def get_publisher(self, publisher_id: int) -> Publisher:
        result = await self.db_session.execute(select(Publisher).where(Publisher.id == publisher_id))
        publisher = result.scalar_one_or_none()
        if not publisher:
            raise PublisherNotFound(publisher_id)
        return publisher

    async def get_publisher_by_gamebanana_id(self, gamebanana_id: int) -> Optional[Publisher]:
        result = await self.db_session.execute(
            select(Publisher).where(Publisher.gamebanana_id == gamebanana_id)
        )
        return result.scalar_one_or_none()

    async def get_publishers_by_user(self, user_id: int) -> List[Publisher]:
        await UserService(self.db_session).require_user(user_id)
        result = await self.db_session.execute(
            select(Publisher).where(Publisher.user_id == user_id).order_by(Publisher.id)
        )
        return list(result.scalars().all())

    # ========== РАЗРЕШЕНИЕ ИЗДАТЕЛЯ ==========

    async def resolve_publisher(
        self,
        user_id: Optional[int] = None,
        publisher_gamebanana_id: Optional[int] = None,
        publisher_id: Optional[int] = None,
        publisher_name: Optional[str] = None,
    ) -> Publisher:
        """
        Найти издателя для мода или подготовить нового (без commit).
        Приоритет: userID > publisherGamebananaID > publisherID > publisherName.
        Новые издатели получают имя/ID с GameBanana.
        """
        if user_id is not None:
            user = await UserService(self.db_session).require_user(user_id)
            if not user.publishers:
                raise NoPublisherForUser(user_id)
            if len(user.publishers) > 1:
                raise AmbiguousPublisher([p.id for p in user.publishers])
            return user.publishers[0]

        if publisher_gamebanana_id is not None:
            publisher = await self.get_publisher_by_gamebanana_id(publisher_gamebanana_id)
            if publisher:
                return publisher

            name = await self.gamebanana.get_username_by_id(publisher_gamebanana_id)
            if name is None:
                raise GamebananaMemberNotFound(publisher_gamebanana_id)
            return self._new_publisher(name, publisher_gamebanana_id)

        if publisher_id is not None:
            return await self.get_publisher(publisher_id)

        if publisher_name:
            result = await self.db_session.execute(select(Publisher).where(Publisher.name == publisher_name))
            matches = list(result.scalars().all())
            if len(matches) > 1:
                raise AmbiguousPublisher([p.id for p in matches])
            if matches:
                return matches[0]

            gamebanana_id = await self.gamebanana.get_id_by_username(publisher_name)
            if gamebanana_id is None:
                raise GamebananaMemberNotFound(publisher_name)

            # имя на сайте могло смениться, а ID уже известен
            publisher = await self.get_publisher_by_gamebanana_id(gamebanana_id)
            if publisher:
                return publisher
            return self._new_publisher(publisher_name, gamebanana_id)

        raise InvalidRequest("No publisher identifier supplied")

    def _new_publisher(self, name: str, gamebanana_id: int) -> Publisher:
        # в сессию попадёт каскадом вместе с модом
        publisher = Publisher(name=name, gamebanana_id=gamebanana_id)
        self.logger.info(f"Prepared new publisher '{name}' (gamebanana id {gamebanana_id})")
        return publisher

    # ========== ЗАПИСЬ ==========

    async def update_publisher(self, publisher_id: int, payload: PublisherUpdate, actor: User) -> Publisher:
        """Изменить издателя: владелец или модератор"""
        publisher = await self.get_publisher(publisher_id)
        self.require_owner_or_privileged(actor, publisher.user_id, f"update publisher {publisher_id}")

        if payload.name is not None:
            publisher.name = payload.name
        if payload.gamebanana_id is not None:
            publisher.gamebanana_id = payload.gamebanana_id
        if payload.user_id is not None:
            user = await UserService(self.db_session).require_user(payload.user_id)
            publisher.user_id = user.id

        await self.commit()
        self.logger.info(f"Updated publisher {publisher_id} by user {actor.id}")
        return publisher

    async def delete_publisher(self, publisher_id: int, actor: User) -> None:
        self.require_privileged(actor, f"delete publisher {publisher_id}")

        publisher = await self.get_publisher(publisher_id)
        result = await self.db_session.execute(
            select(func.count(ModDetails.id)).where(ModDetails.publisher_id == publisher_id)
        )
        if result.scalar_one():
            raise InvalidRequest(f"Publisher {publisher_id} still has mods")

        await self.db_session.delete(publisher)
        await self.commit()
        self.logger.info(f"Deleted publisher {publisher_id} by user {actor.id}")
