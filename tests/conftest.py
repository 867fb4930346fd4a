"""Shared fixtures: in-memory SQLite database seeded with the default catalog."""

import os

# Settings() требует пароль БД, в тестах он не используется
os.environ.setdefault("DATABASE_PASSWORD", "test")

from dataclasses import dataclass
from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from core.database import build_engine, build_session_factory
from models import Base, Publisher, User
from schemas.mod import ModCreate
from scripts.seed_defaults import load_catalog, seed_defaults


class FakeGamebanana:
    """Stand-in for GamebananaService backed by a dict of {member id: name}."""

    def __init__(self, members: Optional[Dict[int, str]] = None):
        self.members = dict(members or {})
        self.calls = []

    async def get_username_by_id(self, gamebanana_id: int) -> Optional[str]:
        self.calls.append(("id", gamebanana_id))
        return self.members.get(gamebanana_id)

    async def get_id_by_username(self, username: str) -> Optional[int]:
        self.calls.append(("name", username))
        for member_id, name in self.members.items():
            if name == username:
                return member_id
        return None


@dataclass
class Seed:
    admin_id: int
    member_id: int
    owner_id: int
    publisher_id: int
    publisher_gamebanana_id: int


@pytest_asyncio.fixture
async def db_session():
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with build_session_factory(engine)() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def seed(db_session) -> Seed:
    """Default difficulties, lengths and tech plus three users and one publisher."""
    await seed_defaults(db_session, load_catalog())

    admin = User(display_name="Admin", permissions="Admin")
    member = User(display_name="Member", permissions="")
    owner = User(display_name="Owner", permissions="")
    db_session.add_all([admin, member, owner])
    await db_session.flush()

    publisher = Publisher(name="Owner GB", gamebanana_id=1001, user_id=owner.id)
    db_session.add(publisher)
    await db_session.commit()

    result = Seed(
        admin_id=admin.id,
        member_id=member.id,
        owner_id=owner.id,
        publisher_id=publisher.id,
        publisher_gamebanana_id=1001,
    )
    # тесты читают всё заново, с загруженными relationship
    db_session.expunge_all()
    return result


@pytest.fixture
def gamebanana() -> FakeGamebanana:
    return FakeGamebanana({2002: "Newcomer", 3003: "Another Mapper"})


@pytest.fixture
def make_mod_payload():
    """Build a ModCreate from JSON-style (camelCase) fields."""

    def _make(**overrides: Any) -> ModCreate:
        data = {
            "type": "Normal",
            "name": "Spring Collab",
            "contentWarning": False,
            "shortDescription": "A test mod",
            "gamebananaModID": 5000,
            "publisherGamebananaID": 1001,
            "maps": [
                {
                    "name": "First Steps",
                    "length": "Short",
                    "mapperNameString": "someone",
                    "chapter": 1,
                    "side": "A",
                }
            ],
        }
        data.update(overrides)
        return ModCreate.model_validate(data)

    return _make
