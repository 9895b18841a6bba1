"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from chatrelay.configs.base import BaseSettings
from chatrelay.configs.database import DatabaseSettings
from chatrelay.configs.relay import RelaySettings
from chatrelay.configs.storage import StorageSettings
from chatrelay.configs.translation import TranslationSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    relay: RelaySettings = RelaySettings()
    translation: TranslationSettings = TranslationSettings()
    storage: StorageSettings = StorageSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from chatrelay.configs import get_settings
        settings = get_settings()
    """
    return Settings()
