"""
Translation gateway with multi-provider fallback and caching.

Exports:
  - TranslationGateway: ordered provider chain with read-through cache
  - TranslationProvider, ToneClassifier: provider capability protocols
  - ChatModelTranslationProvider, DeepLTranslationProvider: implementations
  - InMemoryTranslationCache, CachedTranslation, build_cache_key: cache pieces
"""

from chatrelay.core.translation.cache import (
    CachedTranslation,
    InMemoryTranslationCache,
    TranslationCache,
    build_cache_key,
)
from chatrelay.core.translation.gateway import TranslationGateway
from chatrelay.core.translation.providers import (
    ChatModelToneClassifier,
    ChatModelTranslationProvider,
    DeepLTranslationProvider,
    ToneClassifier,
    TranslationProvider,
)

__all__ = [
    "CachedTranslation",
    "ChatModelToneClassifier",
    "ChatModelTranslationProvider",
    "DeepLTranslationProvider",
    "InMemoryTranslationCache",
    "ToneClassifier",
    "TranslationCache",
    "TranslationGateway",
    "TranslationProvider",
    "build_cache_key",
]
