"""Tests for utils.formatting on plain objects (no database)."""

from datetime import datetime
from types import SimpleNamespace

import pytest

from core.exceptions import MapNotFound, ModNotFound
from models.map import MapSide
from models.mod import ModType
from utils.formatting import difficulty_display, format_map, format_mod, format_publisher, latest_details

APPROVED_AT = datetime(2023, 5, 1)


def revision(number, approved=True, **fields):
    return SimpleNamespace(
        revision=number,
        time_approved=APPROVED_AT if approved else None,
        is_approved=approved,
        **fields,
    )


def map_details(number, approved=True, **fields):
    values = dict(
        name="Map",
        canonical_difficulty=SimpleNamespace(name="Beginner"),
        length=SimpleNamespace(name="Short"),
        description=None,
        notes=None,
        minimum_mod_version=None,
        map_removed_from_mod=False,
        mapper_user_id=None,
        mapper_name_string="someone",
        chapter=None,
        side=None,
        mod_difficulty=None,
        overall_rank=None,
        tech_links=[],
    )
    values.update(fields)
    return revision(number, approved, **values)


class TestLatestDetails:
    def test_prefers_latest_approved(self) -> None:
        revisions = [revision(0), revision(1), revision(2, approved=False)]

        assert latest_details(revisions).revision == 1
        assert latest_details(revisions, approved_only=False).revision == 2

    def test_none_when_nothing_approved(self) -> None:
        assert latest_details([revision(0, approved=False)]) is None


class TestFormatMap:
    def test_normal_map(self) -> None:
        map_ = SimpleNamespace(
            id=3,
            mod_id=1,
            details=[map_details(0, chapter=2, side=MapSide.B, tech_links=[
                SimpleNamespace(tech=SimpleNamespace(name="Wavedash"), full_clear_only=False),
                SimpleNamespace(tech=SimpleNamespace(name="Cornerboost"), full_clear_only=True),
            ])],
        )

        data = format_map(map_)

        assert data == {
            "id": 3,
            "revision": 0,
            "modID": 1,
            "name": "Map",
            "canonicalDifficulty": "Beginner",
            "length": "Short",
            "mapRemovedFromModBool": False,
            "mapperNameString": "someone",
            "chapter": 2,
            "side": "B",
            "techAny": ["Wavedash"],
            "techFC": ["Cornerboost"],
            "approved": True,
        }

    def test_mod_difficulty_shapes(self) -> None:
        parent = SimpleNamespace(name="Hard", parent=None)
        child = SimpleNamespace(name="Hard+", parent=parent)

        assert difficulty_display(parent) == "Hard"
        assert difficulty_display(child) == ["Hard", "Hard+"]
        assert difficulty_display(None) is None

    def test_unapproved_map_hidden(self) -> None:
        map_ = SimpleNamespace(id=3, mod_id=1, details=[map_details(0, approved=False)])

        with pytest.raises(MapNotFound):
            format_map(map_)
        assert format_map(map_, approved_only=False)["approved"] is False


class TestFormatMod:
    def mod(self, maps, difficulties=()):
        details = revision(
            0,
            type=ModType.COLLAB,
            name="Collab",
            publisher_id=4,
            publisher=SimpleNamespace(gamebanana_id=1001),
            content_warning=False,
            notes=None,
            short_description="short",
            long_description=None,
            gamebanana_mod_id=5000,
        )
        return SimpleNamespace(id=1, details=[details], maps=maps, difficulties=list(difficulties))

    def test_skips_unapproved_maps_and_rebuilds_tree(self) -> None:
        maps = [
            SimpleNamespace(id=1, mod_id=1, details=[map_details(0)]),
            SimpleNamespace(id=2, mod_id=1, details=[map_details(0, approved=False)]),
        ]
        difficulties = [
            SimpleNamespace(id=11, name="Hard", order=2, parent_difficulty_id=None),
            SimpleNamespace(id=10, name="Easy", order=1, parent_difficulty_id=None),
            SimpleNamespace(id=12, name="Easy+", order=1, parent_difficulty_id=10),
        ]

        data = format_mod(self.mod(maps, difficulties))

        assert [m["id"] for m in data["maps"]] == [1]
        assert data["difficulties"] == [["Easy", "Easy+"], "Hard"]
        assert data["type"] == "Collab"
        assert data["publisherGamebananaID"] == 1001
        assert "notes" not in data

    def test_default_difficulties_not_listed(self) -> None:
        assert "difficulties" not in format_mod(self.mod([]))

    def test_unapproved_mod(self) -> None:
        mod = self.mod([])
        mod.details[0].time_approved = None

        with pytest.raises(ModNotFound):
            format_mod(mod)


def test_format_publisher() -> None:
    publisher = SimpleNamespace(id=4, name="Owner GB", gamebanana_id=None, user_id=7)

    assert format_publisher(publisher) == {"id": 4, "name": "Owner GB", "userID": 7}
