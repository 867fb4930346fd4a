#/core/database.py
"""
Движок и сессии БД. Таблицы берутся из единственного Base (models/base.py).

Сессия живёт один запрос; сервисы сами делают commit/rollback.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings
from models import Base  # импорт пакета регистрирует все модели в metadata

logger = logging.getLogger(__name__)


def build_engine(database_url: Optional[str] = None, **options) -> AsyncEngine:
    """Async engine; настройки пула по умолчанию только для Postgres"""
    url = database_url or settings.DATABASE_URL
    options.setdefault("echo", settings.DEBUG)
    if url.startswith("postgresql"):
        options.setdefault("pool_size", 20)
        options.setdefault("max_overflow", 0)
        options.setdefault("pool_pre_ping", True)
    return create_async_engine(url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # expire_on_commit=False: после commit ответ форматируется без ленивых загрузок
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


# ========== ENGINE / SESSION FACTORY ==========
engine = build_engine()
AsyncSessionLocal = build_session_factory(engine)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Сессия на один запрос.
    Использование:
        async for session in get_db_session():
            mods = await ModService(session).get_all_mods()
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """То же для скриптов: async with session_scope() as session"""
    async with AsyncSessionLocal() as session:
        yield session


# ========== INITIALIZATION ==========
async def init_db() -> None:
    """Создание всех таблиц (dev окружение; в prod - alembic)"""
    try:
        logger.info("Initializing database...")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"✅ Database initialized ({len(Base.metadata.tables)} tables)")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}", exc_info=True)
        raise


async def test_connection() -> bool:
    """SELECT 1; False вместо исключения - для health-check"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful")
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


async def dispose_db() -> None:
    await engine.dispose()
    logger.info("Database connections disposed")
