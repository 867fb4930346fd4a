# /scripts/init_db.py
"""
Создать таблицы (dev окружение). Postgres в docker поднимается не сразу,
поэтому несколько попыток.
"""

import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect

from core.config import settings
from core.database import build_engine
from models import Base  # Импортируем Base, чтобы загрузить все модели

logger = logging.getLogger(__name__)

MAX_RETRIES = 10
RETRY_DELAY = 2


async def init_db(database_url: str = None) -> list:
    engine = build_engine(database_url)

    try:
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                logger.info(f"Creating tables, attempt {attempt}/{MAX_RETRIES}")
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                    tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

                missing = set(Base.metadata.tables) - set(tables)
                if not missing:
                    logger.info(f"✅ Tables created: {sorted(tables)}")
                    return tables
                logger.error(f"❌ Tables missing after creation: {sorted(missing)}")

            except Exception as e:
                logger.warning(f"Database initialization attempt {attempt} failed: {e}")
                if attempt == MAX_RETRIES:
                    logger.error("Failed to initialize database after all attempts", exc_info=True)
                    raise

            await asyncio.sleep(RETRY_DELAY)

        raise RuntimeError("Tables were not created")
    finally:
        await engine.dispose()
        logger.info("Engine disposed")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(init_db())
