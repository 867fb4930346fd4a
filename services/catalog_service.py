# services/catalog_service.py

"""Справочники: длины карт и техники"""

from sqlalchemy import select
from typing import Dict, Iterable, List

from core.exceptions import MapLengthNotFound, TechNotFound
from models.map_length import MapLength
from models.tech import Tech
from services.base import BaseService


class CatalogService(BaseService):

    async def get_all_lengths(self) -> List[MapLength]:
        result = await self.db_session.execute(select(MapLength).order_by(MapLength.order))
        return list(result.scalars().all())

    async def get_length_by_name(self, name: str) -> MapLength:
        result = await self.db_session.execute(select(MapLength).where(MapLength.name == name))
        length = result.scalar_one_or_none()
        if not length:
            raise MapLengthNotFound(name)
        return length

    async def get_all_tech(self) -> List[Tech]:
        result = await self.db_session.execute(select(Tech).order_by(Tech.name))
        return list(result.scalars().all())

    async def get_tech_by_names(self, names: Iterable[str]) -> Dict[str, Tech]:
        """Техники по именам; неизвестное имя -> TechNotFound"""
        wanted = set(names)
        if not wanted:
            return {}
        result = await self.db_session.execute(select(Tech).where(Tech.name.in_(wanted)))
        found = {tech.name: tech for tech in result.scalars().all()}
        for name in sorted(wanted):
            if name not in found:
                raise TechNotFound(name)
        return found
