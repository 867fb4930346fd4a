# services/difficulty_service.py

"""
Сложности: дерево по умолчанию, деревья модов и canonical difficulty карты.
"""

from sqlalchemy import inspect, select, and_
from typing import Dict, Iterable, List, Optional, Tuple

from core.exceptions import (
    CanonicalDifficultyNotFound,
    DefaultDifficultiesMissing,
    DuplicateDifficultyOrder,
)
from models.difficulty import Difficulty
from models.mod import Mod
from services.base import BaseService
from services.catalog_service import CatalogService
from utils.difficulty_tree import DifficultyName, ParsedDifficulties, sort_difficulty_names

DifficultyKey = Tuple[str, Optional[str]]


class DifficultyService(BaseService):

    # ========== ЧТЕНИЕ ==========

    async def get_default_difficulty_rows(self) -> List[Difficulty]:
        """Все строки дерева по умолчанию (родители и дети)"""
        result = await self.db_session.execute(
            select(Difficulty).where(Difficulty.parent_mod_id.is_(None))
        )
        return list(result.scalars().all())

    async def get_default_parent_difficulties(self) -> List[Difficulty]:
        result = await self.db_session.execute(
            select(Difficulty).where(
                and_(
                    Difficulty.parent_mod_id.is_(None),
                    Difficulty.parent_difficulty_id.is_(None),
                )
            )
        )
        return list(result.scalars().all())

    async def get_default_difficulty_tree(self) -> List[DifficultyName]:
        rows = await self.get_default_difficulty_rows()
        if not rows:
            raise DefaultDifficultiesMissing()
        return sort_difficulty_names(rows)

    async def get_mod_difficulty_rows(self, mod_id: int) -> List[Difficulty]:
        result = await self.db_session.execute(
            select(Difficulty).where(Difficulty.parent_mod_id == mod_id)
        )
        return list(result.scalars().all())

    async def get_mod_difficulty_names(self, mod_id: int) -> List[DifficultyName]:
        """Кастомное дерево мода в форме отображения ([] - мод на сложностях по умолчанию)"""
        rows = await self.get_mod_difficulty_rows(mod_id)
        return sort_difficulty_names(rows, mod_id)

    # ========== ПОСТРОЕНИЕ ==========

    @staticmethod
    def build_custom_difficulties(parsed: ParsedDifficulties) -> List[Difficulty]:
        """
        ORM-строки из разобранной отправки (без session.add).
        Дети связаны с родителем через relationship, id появятся при flush.
        """
        rows: List[Difficulty] = []
        for parent_create in parsed.creation:
            parent = Difficulty(name=parent_create.name, order=parent_create.order)
            rows.append(parent)
            for child_create in parent_create.children:
                child = Difficulty(name=child_create.name, order=child_create.order)
                child.parent = parent
                rows.append(child)
        return rows

    @staticmethod
    def index_difficulties(rows: Iterable[Difficulty]) -> Dict[DifficultyKey, Difficulty]:
        """
        (родитель, ребёнок|None) -> строка.
        Работает и для сохранённых строк, и для ещё не записанных (по relationship).
        """
        rows = list(rows)
        by_id = {row.id: row for row in rows if row.id is not None}
        index: Dict[DifficultyKey, Difficulty] = {}
        for row in rows:
            parent = None
            if row.parent_difficulty_id is not None:
                parent = by_id.get(row.parent_difficulty_id)
            elif "parent" not in inspect(row).unloaded:
                # relationship уже загружен или выставлен вручную
                parent = row.parent

            if parent is None:
                index[(row.name, None)] = row
            else:
                index[(parent.name, row.name)] = row
        return index

    # ========== CANONICAL DIFFICULTY ==========

    async def get_canonical_difficulty(
        self, name: Optional[str], tech_any: Optional[List[str]] = None
    ) -> Difficulty:
        """
        Canonical difficulty карты (всегда родитель из дерева по умолчанию):
        - по имени, если указано;
        - иначе самая сложная среди сложностей техник techAny;
        - иначе самая лёгкая родительская сложность.
        """
        parents = await self.get_default_parent_difficulties()
        if not parents:
            raise DefaultDifficultiesMissing()

        if name:
            for parent in parents:
                if parent.name == name:
                    return parent
            raise CanonicalDifficultyNotFound(name)

        if not tech_any:
            orders = [parent.order for parent in parents]
            duplicated = {order for order in orders if orders.count(order) > 1}
            if duplicated:
                raise DuplicateDifficultyOrder(min(duplicated))
            return min(parents, key=lambda parent: parent.order)

        # неизвестная техника -> TechNotFound
        tech_by_name = await CatalogService(self.db_session).get_tech_by_names(tech_any)
        # несколько техник одной сложности - нормально, разные сложности с одним order - нет
        candidates = {tech.difficulty.id: tech.difficulty for tech in tech_by_name.values()}
        hardest = max(candidates.values(), key=lambda difficulty: difficulty.order)
        if sum(1 for difficulty in candidates.values() if difficulty.order == hardest.order) > 1:
            raise DuplicateDifficultyOrder(hardest.order)
        return hardest

    # ========== КОНТЕКСТ МОДА ==========

    async def get_difficulty_context(
        self, mod: Optional[Mod] = None
    ) -> Tuple[List[DifficultyName], Dict[DifficultyKey, Difficulty]]:
        """Дерево и индекс сложностей, которыми пользуется мод: кастомные или по умолчанию"""
        if mod is not None and mod.difficulties:
            rows = list(mod.difficulties)
            tree = sort_difficulty_names(rows, mod.id)
        else:
            rows = await self.get_default_difficulty_rows()
            if not rows:
                raise DefaultDifficultiesMissing()
            tree = sort_difficulty_names(rows)
        return tree, self.index_difficulties(rows)
