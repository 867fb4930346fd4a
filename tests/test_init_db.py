"""Tests for scripts.init_db."""

import pytest

from models import Base
from scripts.init_db import init_db


@pytest.mark.asyncio
async def test_creates_every_table(tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'init.db'}"

    tables = await init_db(url)

    assert set(Base.metadata.tables) <= set(tables)
    assert "difficulties" in tables
