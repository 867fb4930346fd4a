#/core/config.py
"""
Конфигурация приложения через Pydantic.
Все переменные берутся из .env файла.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Настройки приложения"""

    # ========== DATABASE ==========
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str  # Обязательно из .env
    DATABASE_NAME: str = "celestemods"

    @property
    def DATABASE_URL(self) -> str:
        """Construct async PostgreSQL connection string"""
        return (
            f"postgresql+asyncpg://"
            f"{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@"
            f"{self.DATABASE_HOST}:{self.DATABASE_PORT}/"
            f"{self.DATABASE_NAME}"
        )

    @property
    def SYNC_DATABASE_URL(self) -> str:
        """Connection string for alembic (sync driver)"""
        return self.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql+psycopg2://")

    # ========== GAMEBANANA ==========
    GAMEBANANA_API_URL: str = "https://api.gamebanana.com"
    GAMEBANANA_TIMEOUT_SECONDS: float = 10.0  # одна попытка, без ретраев

    # ========== PERMISSIONS ==========
    # Роли, чьи карты одобряются сразу и кто может модерировать
    PRIVILEGED_PERMISSIONS: List[str] = ["Super_Admin", "Admin", "Map_Moderator"]

    # ========== LOGGING ==========
    LOG_LEVEL: str = "INFO"

    # ========== ENVIRONMENT ==========
    ENVIRONMENT: str = "development"  # development | production
    DEBUG: bool = False

    class Config:
        """Pydantic configuration"""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

        # Для документации
        json_schema_extra = {
            "example": {
                "DATABASE_PASSWORD": "secure_password_here",
                "GAMEBANANA_TIMEOUT_SECONDS": 5,
            }
        }


# Глобальный экземпляр конфигурации
settings = Settings()
