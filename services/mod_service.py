# services/mod_service.py

from sqlalchemy import select, and_
from sqlalchemy.orm import selectinload
from typing import List, Optional, Tuple

from core.exceptions import (
    DuplicateGamebananaMod,
    InvalidMapDifficulty,
    InvalidRequest,
    ModNotFound,
)
from models.difficulty import Difficulty
from models.map import Map, MapDetails
from models.mod import Mod, ModDetails, ModType
from models.publisher import Publisher
from models.user import User
from schemas.mod import ModCreate, ModUpdate
from services.base import BaseService
from services.difficulty_service import DifficultyService
from services.gamebanana_service import GamebananaService
from services.map_service import MapService
from services.publisher_service import PublisherService
from services.user_service import UserService
from utils.difficulty_tree import creation_to_names, parse_difficulty_submission, validate_map_difficulty
from utils.formatting import difficulty_display

MOD_MAP_DIFFICULTY_PARENT = (
    selectinload(Mod.maps)
    .selectinload(Map.details)
    .selectinload(MapDetails.mod_difficulty)
    .selectinload(Difficulty.parent)
)


class ModService(BaseService):
    def __init__(self, db_session, gamebanana: Optional[GamebananaService] = None):
        super().__init__(db_session)
        self.publishers = PublisherService(db_session, gamebanana)
        self.difficulties = DifficultyService(db_session)
        self.maps = MapService(db_session)

    # ========== ЧТЕНИЕ (только одобренные) ==========

    async def _get_mods(self, *conditions) -> List[Mod]:
        """Моды, у которых есть одобренная ревизия, удовлетворяющая условиям"""
        query = (
            select(Mod)
            .where(Mod.details.any(and_(ModDetails.time_approved.isnot(None), *conditions)))
            .options(MOD_MAP_DIFFICULTY_PARENT)
            .order_by(Mod.id)
        )
        result = await self.db_session.execute(query)
        return list(result.scalars().all())

    async def get_all_mods(self) -> List[Mod]:
        return await self._get_mods()

    async def get_mod(self, mod_id: int, approved_only: bool = True) -> Mod:
        query = (
            select(Mod)
            .where(Mod.id == mod_id)
            .options(MOD_MAP_DIFFICULTY_PARENT)
            .execution_options(populate_existing=True)
        )
        if approved_only:
            query = query.where(Mod.details.any(ModDetails.time_approved.isnot(None)))
        result = await self.db_session.execute(query)
        mod = result.scalar_one_or_none()
        if not mod:
            raise ModNotFound(mod_id)
        return mod

    async def get_mod_by_gamebanana_id(self, gamebanana_mod_id: int) -> Mod:
        mods = await self._get_mods(ModDetails.gamebanana_mod_id == gamebanana_mod_id)
        if not mods:
            raise ModNotFound(gamebanana_mod_id)
        return mods[0]

    async def search_mods(self, name_prefix: str) -> List[Mod]:
        return await self._get_mods(ModDetails.name.startswith(name_prefix, autoescape=True))

    async def get_mods_by_type(self, mod_type: ModType) -> List[Mod]:
        return await self._get_mods(ModDetails.type == mod_type)

    async def get_mods_by_publisher(self, publisher_id: int) -> List[Mod]:
        return await self._get_mods(ModDetails.publisher_id == publisher_id)

    async def get_mods_by_publisher_gamebanana_id(self, gamebanana_id: int) -> List[Mod]:
        return await self._get_mods(ModDetails.publisher.has(Publisher.gamebanana_id == gamebanana_id))

    async def get_mods_by_user_publisher(self, user_id: int) -> List[Mod]:
        """Моды, опубликованные издателями пользователя"""
        await UserService(self.db_session).require_user(user_id)
        return await self._get_mods(ModDetails.publisher.has(Publisher.user_id == user_id))

    async def get_mods_by_submitter(self, user_id: int) -> List[Mod]:
        await UserService(self.db_session).require_user(user_id)
        return await self._get_mods(ModDetails.submitted_by == user_id)

    async def _find_by_gamebanana_id(self, gamebanana_mod_id: int) -> Optional[Mod]:
        """Любой мод (включая неодобренные) с таким gamebananaModID"""
        result = await self.db_session.execute(
            select(Mod)
            .where(Mod.details.any(ModDetails.gamebanana_mod_id == gamebanana_mod_id))
            .options(MOD_MAP_DIFFICULTY_PARENT)
            .order_by(Mod.id)
        )
        return result.scalars().first()

    # ========== СОЗДАНИЕ ==========

    async def create_mod(self, payload: ModCreate, submitter: User) -> Tuple[Mod, bool]:
        """
        Создать мод вместе с деревом сложностей и картами одной транзакцией.

        Returns: (мод, created). Если мод с таким gamebananaModID уже есть -
        возвращается он и created=False.
        """
        existing = await self._find_by_gamebanana_id(payload.gamebanana_mod_id)
        if existing:
            self.logger.info(
                f"Mod with gamebananaModID {payload.gamebanana_mod_id} already exists (id {existing.id})"
            )
            return existing, False

        submitter_id = submitter.id
        async with self.unit_of_work(f"Mod '{payload.name}'"):
            publisher = await self.publishers.resolve_publisher(
                user_id=payload.user_id,
                publisher_gamebanana_id=payload.publisher_gamebanana_id,
                publisher_id=payload.publisher_id,
                publisher_name=payload.publisher_name,
            )

            if payload.difficulties is not None:
                parsed = parse_difficulty_submission(payload.difficulties)
                difficulty_rows = DifficultyService.build_custom_difficulties(parsed)
                tree = creation_to_names(parsed.creation)
                index = DifficultyService.index_difficulties(difficulty_rows)
            else:
                difficulty_rows = []
                tree, index = await self.difficulties.get_difficulty_context()

            # Все карты проверяются до того, как что-либо попадёт в сессию
            now = self.now()
            maps = []
            for map_payload in payload.maps:
                maps.append(
                    await self.maps.build_map(map_payload, payload.type, tree, index, submitter, now)
                )

            details = ModDetails(
                revision=0,
                type=payload.type,
                name=payload.name,
                publisher=publisher,
                content_warning=payload.content_warning,
                notes=payload.notes,
                short_description=payload.short_description,
                long_description=payload.long_description,
                gamebanana_mod_id=payload.gamebanana_mod_id,
                time_submitted=now,
                submitted_by=submitter_id,
            )
            mod = Mod(details=[details], difficulties=difficulty_rows, maps=maps)
            self.db_session.add(mod)

        self.logger.info(
            f"Created mod {mod.id} '{payload.name}' with {len(maps)} maps "
            f"and {len(difficulty_rows)} custom difficulties (submitted by user {submitter_id})"
        )
        return await self.get_mod(mod.id, approved_only=False), True

    # ========== ИЗМЕНЕНИЕ ==========

    EDITABLE_FIELDS = (
        "type",
        "name",
        "content_warning",
        "notes",
        "short_description",
        "long_description",
        "gamebanana_mod_id",
    )

    async def update_mod(self, mod_id: int, payload: ModUpdate, editor: User) -> Mod:
        """
        Изменить мод. Одобренная ревизия не меняется: правка уходит в новую
        ревизию и ждёт модерации. Неодобренная ревизия правится на месте.

        Дерево сложностей можно заменить, только пока ни одной карте не назначена
        modDifficulty. При смене типа на не-Normal все карты должны иметь
        modDifficulty из дерева мода.
        """
        mod = await self.get_mod(mod_id, approved_only=False)
        current = mod.details[-1]
        # владелец мода - автор первой ревизии
        self.require_owner_or_privileged(editor, mod.details[0].submitted_by, f"update mod {mod_id}")

        if payload.gamebanana_mod_id is not None:
            other = await self._find_by_gamebanana_id(payload.gamebanana_mod_id)
            if other and other.id != mod_id:
                raise DuplicateGamebananaMod(payload.gamebanana_mod_id, other.id)

        new_difficulties = None
        if payload.difficulties is not None:
            self._check_difficulties_unassigned(mod)
            new_difficulties = DifficultyService.build_custom_difficulties(
                parse_difficulty_submission(payload.difficulties)
            )

        if payload.type is not None and payload.type != current.type:
            await self._check_maps_fit_type(mod, payload.type)

        editor_id = editor.id
        async with self.unit_of_work(f"Update of mod {mod_id}"):
            details = self._editable_revision(mod, editor_id)

            if payload.has_publisher:
                details.publisher = await self.publishers.resolve_publisher(
                    user_id=payload.user_id,
                    publisher_gamebanana_id=payload.publisher_gamebanana_id,
                    publisher_id=payload.publisher_id,
                    publisher_name=payload.publisher_name,
                )

            for attr in self.EDITABLE_FIELDS:
                value = getattr(payload, attr)
                if value is not None:
                    setattr(details, attr, value)

            if new_difficulties is not None:
                mod.difficulties = new_difficulties

        self.logger.info(f"Updated mod {mod_id} (revision {details.revision}) by user {editor_id}")
        return await self.get_mod(mod_id, approved_only=False)

    def _editable_revision(self, mod: Mod, editor_id: int) -> ModDetails:
        """Последняя ревизия, если она ещё не одобрена, иначе её копия с revision + 1"""
        current = mod.details[-1]
        if not current.is_approved:
            return current

        revision = ModDetails(
            revision=current.revision + 1,
            publisher_id=current.publisher_id,
            time_submitted=self.now(),
            submitted_by=editor_id,
        )
        for attr in self.EDITABLE_FIELDS:
            setattr(revision, attr, getattr(current, attr))
        mod.details.append(revision)
        return revision

    def _check_difficulties_unassigned(self, mod: Mod) -> None:
        """Дерево нельзя менять, пока карты ссылаются на его (или дефолтные) строки"""
        for map_ in mod.maps:
            for map_details in map_.details:
                if map_details.mod_difficulty_id is not None:
                    self.logger.warning(
                        f"Mod {mod.id} difficulties not replaced: map {map_.id} has a modDifficulty"
                    )
                    raise InvalidRequest(
                        f"Mod {mod.id} difficulties are used by map {map_.id} and cannot be replaced"
                    )

    async def _check_maps_fit_type(self, mod: Mod, mod_type: ModType) -> None:
        """Карты не-Normal мода должны иметь modDifficulty из дерева этого мода"""
        if mod_type == ModType.NORMAL:
            return

        tree, index = await self.difficulties.get_difficulty_context(mod)
        for map_ in mod.maps:
            map_details = map_.details[-1]
            claimed = difficulty_display(map_details.mod_difficulty)
            if claimed is None:
                self.logger.warning(f"Mod {mod.id} cannot become {mod_type.value}: map {map_.id} has no modDifficulty")
                raise InvalidMapDifficulty()
            key = validate_map_difficulty(tree, claimed)
            if index[key].id != map_details.mod_difficulty_id:
                raise InvalidMapDifficulty(claimed)

    # ========== МОДЕРАЦИЯ ==========

    async def approve_mod(self, mod_id: int, approver: User) -> Mod:
        """Одобрить последнюю ревизию мода и ожидающие ревизии его карт"""
        self.require_privileged(approver, f"approve mod {mod_id}")

        mod = await self.get_mod(mod_id, approved_only=False)
        now = self.now()
        pending = []
        if not mod.details[-1].is_approved:
            pending.append(mod.details[-1])
        for map_ in mod.maps:
            if map_.details and not map_.details[-1].is_approved:
                pending.append(map_.details[-1])

        for details in pending:
            details.approve(approver.id, now)

        await self.commit()
        self.logger.info(f"✅ Mod {mod_id} approved by user {approver.id} ({len(pending)} revisions)")
        return await self.get_mod(mod_id)

    async def delete_mod(self, mod_id: int, actor: User) -> None:
        self.require_privileged(actor, f"delete mod {mod_id}")

        mod = await self.get_mod(mod_id, approved_only=False)
        await self.db_session.delete(mod)
        await self.commit()
        self.logger.info(f"Deleted mod {mod_id} by user {actor.id}")
