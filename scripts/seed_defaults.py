# scripts/seed_defaults.py

"""
Загрузить сложности по умолчанию, длины карт и техники из JSON-файла.
Повторный запуск обновляет записи по имени, а не дублирует их.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from models.difficulty import Difficulty
from models.map_length import MapLength
from models.tech import Tech

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).parent.parent / "data" / "default_catalog.json"


def load_catalog(path: Path = CATALOG_PATH) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


async def _upsert_difficulties(session: AsyncSession, entries: list) -> dict:
    """Дерево по умолчанию; возвращает {имя родителя: строка}"""
    result = await session.execute(select(Difficulty).where(Difficulty.parent_mod_id.is_(None)))
    rows = list(result.scalars().all())
    parents = {row.name: row for row in rows if row.parent_difficulty_id is None}
    children = {(row.parent_difficulty_id, row.name): row for row in rows if row.parent_difficulty_id is not None}

    for order, entry in enumerate(entries, start=1):
        parent = parents.get(entry["name"])
        if parent is None:
            parent = Difficulty(name=entry["name"])
            session.add(parent)
            parents[entry["name"]] = parent
        parent.order = order
        parent.description = entry.get("description") or None
        await session.flush()

        for child_order, child_name in enumerate(entry.get("children", []), start=1):
            child = children.get((parent.id, child_name))
            if child is None:
                child = Difficulty(name=child_name, parent_difficulty_id=parent.id)
                session.add(child)
            child.order = child_order

    logger.info(f"✅ Default difficulties: {len(entries)} parents")
    return parents


async def _upsert_lengths(session: AsyncSession, entries: list) -> None:
    result = await session.execute(select(MapLength))
    existing = {length.name: length for length in result.scalars().all()}

    for order, entry in enumerate(entries, start=1):
        length = existing.get(entry["name"])
        if length is None:
            length = MapLength(name=entry["name"])
            session.add(length)
        length.order = order
        length.description = entry.get("description") or None

    logger.info(f"✅ Map lengths: {len(entries)}")


async def _upsert_tech(session: AsyncSession, entries: list, parents: dict) -> None:
    result = await session.execute(select(Tech))
    existing = {tech.name: tech for tech in result.scalars().all()}

    for entry in entries:
        difficulty = parents.get(entry["difficulty"])
        if difficulty is None:
            raise ValueError(f"Tech '{entry['name']}' references unknown difficulty '{entry['difficulty']}'")

        tech = existing.get(entry["name"])
        if tech is None:
            tech = Tech(name=entry["name"])
            session.add(tech)
        tech.description = entry.get("description") or None
        tech.default_difficulty_id = difficulty.id

    logger.info(f"✅ Tech: {len(entries)}")


async def seed_defaults(session: AsyncSession, catalog: dict) -> None:
    """Записать справочники одной транзакцией"""
    try:
        parents = await _upsert_difficulties(session, catalog["difficulties"])
        await _upsert_lengths(session, catalog["lengths"])
        await _upsert_tech(session, catalog["tech"], parents)
        await session.commit()
    except Exception:
        logger.error("❌ Seeding failed, rolling back", exc_info=True)
        await session.rollback()
        raise


async def main() -> None:
    from core.database import dispose_db, session_scope

    catalog = load_catalog()
    try:
        async with session_scope() as session:
            await seed_defaults(session, catalog)
    finally:
        await dispose_db()
    logger.info("🎉 Default catalog loaded")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(main())
