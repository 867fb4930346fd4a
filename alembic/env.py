# alembic/env.py

"""
Миграции через синхронный драйвер psycopg2.
URL берётся из DATABASE_URL (если задан) или из core.config.
"""

from logging.config import fileConfig
import os
import sys

from sqlalchemy import engine_from_config, pool
from alembic import context

# Корень проекта в sys.path, чтобы импортировать models и core
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import settings
from models import Base  # импорт пакета регистрирует все модели в Base.metadata

config = context.config


def get_sync_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        return settings.SYNC_DATABASE_URL
    return url.replace("postgresql+asyncpg://", "postgresql+psycopg2://")


config.set_main_option("sqlalchemy.url", get_sync_url())

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Enum-колонки (ModType, MapSide, AccountStatus) тоже сравниваются
COMPARE_OPTIONS = dict(
    target_metadata=target_metadata,
    compare_type=True,
    compare_server_default=True,
)


def run_migrations_offline() -> None:
    """SQL-скрипт без подключения к БД"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **COMPARE_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
