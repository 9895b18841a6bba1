"""Adapters binding core contracts to the persistence boundary."""

from chatrelay.application.adapters.translation_cache_adapter import DatabaseTranslationCache

__all__ = ["DatabaseTranslationCache"]
