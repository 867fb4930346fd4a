# services/map_service.py

from datetime import datetime
from sqlalchemy import select, and_
from sqlalchemy.orm import selectinload
from typing import Dict, List, Optional

from core.exceptions import MapNotFound, ModNotFound
from models.difficulty import Difficulty
from models.map import Map, MapDetails
from models.mod import Mod, ModType
from models.tech import MapToTech, Tech
from models.user import User
from schemas.map import MapCreate
from services.base import BaseService
from services.catalog_service import CatalogService
from services.difficulty_service import DifficultyKey, DifficultyService
from services.user_service import UserService
from utils.difficulty_tree import DifficultyName, validate_map_difficulty

# родитель сложности карты нужен для ответа ['Parent', 'Child']
MAP_DIFFICULTY_PARENT = (
    selectinload(Map.details).selectinload(MapDetails.mod_difficulty).selectinload(Difficulty.parent)
)


class MapService(BaseService):
    def __init__(self, db_session):
        super().__init__(db_session)
        self.difficulties = DifficultyService(db_session)
        self.catalog = CatalogService(db_session)
        self.users = UserService(db_session)

    # ========== ЧТЕНИЕ (только одобренные) ==========

    async def _get_maps(self, *conditions) -> List[Map]:
        query = (
            select(Map)
            .where(Map.details.any(and_(MapDetails.time_approved.isnot(None), *conditions)))
            .options(MAP_DIFFICULTY_PARENT)
            .order_by(Map.id)
        )
        result = await self.db_session.execute(query)
        return list(result.scalars().all())

    async def get_all_maps(self) -> List[Map]:
        return await self._get_maps()

    async def get_map(self, map_id: int, approved_only: bool = True) -> Map:
        query = (
            select(Map)
            .where(Map.id == map_id)
            .options(MAP_DIFFICULTY_PARENT)
            .execution_options(populate_existing=True)
        )
        if approved_only:
            query = query.where(Map.details.any(MapDetails.time_approved.isnot(None)))
        result = await self.db_session.execute(query)
        map_ = result.scalar_one_or_none()
        if not map_:
            raise MapNotFound(map_id)
        return map_

    async def search_maps(self, name_prefix: str) -> List[Map]:
        return await self._get_maps(MapDetails.name.startswith(name_prefix, autoescape=True))

    async def get_maps_by_mapper(self, user_id: int) -> List[Map]:
        await self.users.require_user(user_id)
        return await self._get_maps(MapDetails.mapper_user_id == user_id)

    async def get_maps_by_submitter(self, user_id: int) -> List[Map]:
        await self.users.require_user(user_id)
        return await self._get_maps(MapDetails.submitted_by == user_id)

    async def get_maps_by_length(self, length_name: str) -> List[Map]:
        length = await self.catalog.get_length_by_name(length_name)
        return await self._get_maps(MapDetails.length_id == length.id)

    async def get_maps_by_tech(self, tech_name: str, full_clear_only: Optional[bool] = None) -> List[Map]:
        """
        Карты с техникой. full_clear_only: None - любая связь,
        False - нужна для прохождения (techAny), True - только для full clear (techFC).
        """
        await self.catalog.get_tech_by_names([tech_name])
        link_conditions = [MapToTech.tech.has(Tech.name == tech_name)]
        if full_clear_only is not None:
            link_conditions.append(MapToTech.full_clear_only == full_clear_only)
        return await self._get_maps(MapDetails.tech_links.any(and_(*link_conditions)))

    # ========== ПОСТРОЕНИЕ ==========

    async def build_map(
        self,
        payload: MapCreate,
        mod_type: ModType,
        tree: List[DifficultyName],
        index: Dict[DifficultyKey, Difficulty],
        submitter: User,
        now: Optional[datetime] = None,
    ) -> Map:
        """
        Проверить и собрать карту (без session.add).
        Для не-Normal модов modDifficulty проверяется по дереву мода до любой записи.
        """
        now = now or self.now()
        length = await self.catalog.get_length_by_name(payload.length)
        canonical = await self.difficulties.get_canonical_difficulty(
            payload.canonical_difficulty, payload.tech_any
        )

        details = MapDetails(
            revision=0,
            name=payload.name,
            canonical_difficulty=canonical,
            length=length,
            description=payload.description,
            notes=payload.notes,
            minimum_mod_version=payload.minimum_mod_version,
            map_removed_from_mod=payload.map_removed_from_mod,
            time_submitted=now,
            submitted_by=submitter.id,
        )

        if self.is_privileged(submitter):
            details.approve(submitter.id, now)

        if payload.mapper_user_id is not None:
            mapper = await self.users.require_user(payload.mapper_user_id)
            details.mapper_user_id = mapper.id
        else:
            details.mapper_name_string = payload.mapper_name_string

        if mod_type == ModType.NORMAL:
            details.chapter = payload.chapter
            details.side = payload.side
        else:
            if mod_type == ModType.CONTEST:
                details.overall_rank = payload.overall_rank
            key = validate_map_difficulty(tree, payload.mod_difficulty)
            details.mod_difficulty = index[key]

        tech_names = (payload.tech_any or []) + (payload.tech_fc or [])
        if tech_names:
            tech_by_name = await self.catalog.get_tech_by_names(tech_names)
            for name in payload.tech_any or []:
                details.tech_links.append(MapToTech(tech=tech_by_name[name], full_clear_only=False))
            for name in payload.tech_fc or []:
                details.tech_links.append(MapToTech(tech=tech_by_name[name], full_clear_only=True))

        return Map(details=[details])

    # ========== ЗАПИСЬ ==========

    async def add_map_to_mod(self, mod_id: int, payload: MapCreate, submitter: User) -> Map:
        """Добавить карту в существующий мод"""
        result = await self.db_session.execute(select(Mod).where(Mod.id == mod_id))
        mod = result.scalar_one_or_none()
        if not mod or not mod.details:
            raise ModNotFound(mod_id)

        mod_type = mod.details[-1].type
        tree, index = await self.difficulties.get_difficulty_context(mod)

        async with self.unit_of_work(f"Map '{payload.name}' for mod {mod_id}"):
            map_ = await self.build_map(payload, mod_type, tree, index, submitter)
            mod.maps.append(map_)

        self.logger.info(f"Added map {map_.id} to mod {mod_id} (submitted by user {submitter.id})")
        return await self.get_map(map_.id, approved_only=False)

    async def delete_map(self, map_id: int, actor: User) -> None:
        self.require_privileged(actor, f"delete map {map_id}")

        map_ = await self.get_map(map_id, approved_only=False)
        await self.db_session.delete(map_)
        await self.commit()
        self.logger.info(f"Deleted map {map_id} by user {actor.id}")
