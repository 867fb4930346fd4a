"""Tests for scripts.seed_defaults."""

import pytest
from sqlalchemy import func, select

from models import Difficulty, MapLength, Tech
from scripts.seed_defaults import load_catalog, seed_defaults
from services.catalog_service import CatalogService


async def count(session, column) -> int:
    return (await session.execute(select(func.count(column)))).scalar_one()


class TestSeedDefaults:
    @pytest.mark.asyncio
    async def test_loads_catalog(self, db_session) -> None:
        catalog = load_catalog()

        await seed_defaults(db_session, catalog)

        lengths = await CatalogService(db_session).get_all_lengths()
        assert [length.name for length in lengths] == [entry["name"] for entry in catalog["lengths"]]
        assert [length.order for length in lengths] == list(range(1, len(lengths) + 1))
        tech = await CatalogService(db_session).get_tech_by_names(["Demodash"])
        expert = (
            await db_session.execute(
                select(Difficulty).where(Difficulty.name == "Expert", Difficulty.parent_difficulty_id.is_(None))
            )
        ).scalar_one()
        assert tech["Demodash"].default_difficulty_id == expert.id

    @pytest.mark.asyncio
    async def test_second_run_updates_in_place(self, db_session) -> None:
        catalog = load_catalog()
        await seed_defaults(db_session, catalog)
        totals = [await count(db_session, column) for column in (Difficulty.id, MapLength.id, Tech.id)]

        catalog["tech"][0]["description"] = "changed"
        await seed_defaults(db_session, catalog)

        assert [await count(db_session, column) for column in (Difficulty.id, MapLength.id, Tech.id)] == totals
        tech = await CatalogService(db_session).get_tech_by_names([catalog["tech"][0]["name"]])
        assert tech[catalog["tech"][0]["name"]].description == "changed"

    @pytest.mark.asyncio
    async def test_unknown_tech_difficulty_rolls_back(self, db_session) -> None:
        catalog = load_catalog()
        catalog["tech"].append({"name": "Moonwalk", "difficulty": "Impossible"})

        with pytest.raises(ValueError):
            await seed_defaults(db_session, catalog)

        assert await count(db_session, Difficulty.id) == 0
