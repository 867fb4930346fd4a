"""Tests for services.map_service: adding maps to existing mods and map queries."""

import pytest
from sqlalchemy import func, select

from core.exceptions import (
    DefaultDifficultiesMissing,
    DuplicateDifficultyOrder,
    InvalidMapDifficulty,
    MapLengthNotFound,
    MapNotFound,
    ModNotFound,
    TechNotFound,
    UnauthorizedAccess,
    UserNotFound,
)
from models import Map, User
from schemas.map import MapCreate
from services.difficulty_service import DifficultyService
from services.map_service import MapService
from services.mod_service import ModService
from utils.formatting import format_map


def map_payload(**fields) -> MapCreate:
    data = {"name": "Extra", "length": "Short", "mapperNameString": "someone"}
    data.update(fields)
    return MapCreate.model_validate(data)


async def create_collab(db_session, gamebanana, make_mod_payload, submitter):
    mod, _ = await ModService(db_session, gamebanana).create_mod(
        make_mod_payload(
            type="Collab",
            difficulties=[["Hard", "Low", "High"], "Harder"],
            maps=[{"name": "Opening", "length": "Short", "mapperNameString": "a", "modDifficulty": ["Hard", "Low"]}],
        ),
        submitter,
    )
    return mod


class TestAddMapToMod:
    @pytest.mark.asyncio
    async def test_adds_map_on_mod_tree(self, db_session, seed, gamebanana, make_mod_payload) -> None:
        admin = await db_session.get(User, seed.admin_id)
        mod = await create_collab(db_session, gamebanana, make_mod_payload, admin)

        map_ = await MapService(db_session).add_map_to_mod(
            mod.id, map_payload(modDifficulty=["Hard", "High"], techFC=["Wavedash"]), admin
        )

        data = format_map(map_)
        assert data["modID"] == mod.id
        assert data["modDifficulty"] == ["Hard", "High"]
        assert data["techFC"] == ["Wavedash"]
        assert "techAny" not in data

    @pytest.mark.asyncio
    async def test_rejected_map_is_not_written(self, db_session, seed, gamebanana, make_mod_payload) -> None:
        admin = await db_session.get(User, seed.admin_id)
        mod = await create_collab(db_session, gamebanana, make_mod_payload, admin)
        mod_id = mod.id

        with pytest.raises(InvalidMapDifficulty):
            await MapService(db_session).add_map_to_mod(mod_id, map_payload(modDifficulty="Harder"), admin)

        total = (await db_session.execute(select(func.count(Map.id)))).scalar_one()
        assert total == 1

    @pytest.mark.asyncio
    async def test_unknown_mod(self, db_session, seed) -> None:
        admin = await db_session.get(User, seed.admin_id)

        with pytest.raises(ModNotFound):
            await MapService(db_session).add_map_to_mod(999, map_payload(chapter=1, side="A"), admin)

    @pytest.mark.asyncio
    async def test_unknown_mapper(self, db_session, seed, gamebanana, make_mod_payload) -> None:
        admin = await db_session.get(User, seed.admin_id)
        mod = await create_collab(db_session, gamebanana, make_mod_payload, admin)

        with pytest.raises(UserNotFound):
            await MapService(db_session).add_map_to_mod(
                mod.id, map_payload(mapperUserID=999, modDifficulty=["Hard", "Low"]), admin
            )


class TestMapQueries:
    @pytest.mark.asyncio
    async def test_filters_only_return_approved_maps(self, db_session, seed, gamebanana, make_mod_payload) -> None:
        admin = await db_session.get(User, seed.admin_id)
        member = await db_session.get(User, seed.member_id)
        mod = await create_collab(db_session, gamebanana, make_mod_payload, admin)
        service = MapService(db_session)
        approved = mod.maps[0]
        pending = await service.add_map_to_mod(
            mod.id,
            map_payload(name="Pending", mapperUserID=seed.owner_id, modDifficulty=["Hard", "High"],
                        techAny=["Wavedash"], length="Long"),
            member,
        )

        assert [m.id for m in await service.get_all_maps()] == [approved.id]
        assert [m.id for m in await service.search_maps("Open")] == [approved.id]
        assert await service.search_maps("Pend") == []
        assert await service.get_maps_by_length("Long") == []
        assert await service.get_maps_by_mapper(seed.owner_id) == []
        assert [m.id for m in await service.get_maps_by_submitter(seed.admin_id)] == [approved.id]
        with pytest.raises(MapNotFound):
            await service.get_map(pending.id)
        assert (await service.get_map(pending.id, approved_only=False)).id == pending.id

    @pytest.mark.asyncio
    async def test_maps_by_tech(self, db_session, seed, gamebanana, make_mod_payload) -> None:
        admin = await db_session.get(User, seed.admin_id)
        mod = await create_collab(db_session, gamebanana, make_mod_payload, admin)
        service = MapService(db_session)
        any_map = await service.add_map_to_mod(
            mod.id, map_payload(name="Any", modDifficulty=["Hard", "Low"], techAny=["Hyperdash"]), admin
        )
        fc_map = await service.add_map_to_mod(
            mod.id, map_payload(name="FC", modDifficulty=["Hard", "Low"], techFC=["Hyperdash"]), admin
        )

        assert [m.id for m in await service.get_maps_by_tech("Hyperdash")] == [any_map.id, fc_map.id]
        assert [m.id for m in await service.get_maps_by_tech("Hyperdash", full_clear_only=False)] == [any_map.id]
        assert [m.id for m in await service.get_maps_by_tech("Hyperdash", full_clear_only=True)] == [fc_map.id]
        with pytest.raises(TechNotFound):
            await service.get_maps_by_tech("Teleport")
        with pytest.raises(MapLengthNotFound):
            await service.get_maps_by_length("Endless")

    @pytest.mark.asyncio
    async def test_delete_map_requires_privilege(self, db_session, seed, gamebanana, make_mod_payload) -> None:
        admin = await db_session.get(User, seed.admin_id)
        member = await db_session.get(User, seed.member_id)
        mod = await create_collab(db_session, gamebanana, make_mod_payload, admin)
        map_id = mod.maps[0].id
        service = MapService(db_session)

        with pytest.raises(UnauthorizedAccess):
            await service.delete_map(map_id, member)
        await service.delete_map(map_id, admin)

        with pytest.raises(MapNotFound):
            await service.get_map(map_id, approved_only=False)


class TestDifficultyService:
    @pytest.mark.asyncio
    async def test_default_tree(self, db_session, seed) -> None:
        tree = await DifficultyService(db_session).get_default_difficulty_tree()

        assert tree == [
            "Beginner",
            ["Intermediate", "Low", "Mid", "High"],
            ["Advanced", "Low", "Mid", "High"],
            ["Expert", "Low", "Mid", "High"],
            "Grandmaster",
        ]

    @pytest.mark.asyncio
    async def test_missing_default_tree(self, db_session) -> None:
        service = DifficultyService(db_session)

        with pytest.raises(DefaultDifficultiesMissing):
            await service.get_default_difficulty_tree()
        with pytest.raises(DefaultDifficultiesMissing):
            await service.get_canonical_difficulty(None)

    @pytest.mark.asyncio
    async def test_mod_tree_names(self, db_session, seed, gamebanana, make_mod_payload) -> None:
        admin = await db_session.get(User, seed.admin_id)
        mod = await create_collab(db_session, gamebanana, make_mod_payload, admin)

        names = await DifficultyService(db_session).get_mod_difficulty_names(mod.id)

        assert names == [["Hard", "Low", "High"], "Harder"]

    @pytest.mark.asyncio
    async def test_canonical_difficulty_rules(self, db_session, seed) -> None:
        service = DifficultyService(db_session)

        assert (await service.get_canonical_difficulty(None)).name == "Beginner"
        assert (await service.get_canonical_difficulty("Expert")).name == "Expert"
        # две техники одной сложности
        assert (await service.get_canonical_difficulty(None, ["Hyperdash", "Wavedash"])).name == "Intermediate"
        assert (await service.get_canonical_difficulty(None, ["Wavedash", "Grab Spam"])).name == "Grandmaster"

    @pytest.mark.asyncio
    async def test_equal_default_orders(self, db_session, seed) -> None:
        service = DifficultyService(db_session)
        parents = {row.name: row for row in await service.get_default_parent_difficulties()}
        parents["Advanced"].order = parents["Intermediate"].order
        parents["Beginner"].order = 2
        await db_session.commit()

        with pytest.raises(DuplicateDifficultyOrder):
            await service.get_canonical_difficulty(None, ["Hyperdash", "Cornerboost"])
        with pytest.raises(DuplicateDifficultyOrder):
            await service.get_canonical_difficulty(None)
