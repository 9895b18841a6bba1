"""
Translation cache contract and in-memory implementation.

Entries are keyed by (text, target language, tone mode) and expire on
their own horizon, independent of message TTL. Writers for the same key
compute the same value, so last write wins.

Dependencies: hashlib
System role: Read-through cache for the translation gateway
"""

import hashlib
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

SOURCE_PREFIX_LENGTH = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheKey:
    """Identity of a cached translation."""

    digest: str
    source_text_prefix: str
    target_lang: str
    tone_mode: bool


@dataclass(frozen=True)
class CachedTranslation:
    """Cached translation value."""

    translation: str
    provider: str
    tone: str | None = None


def build_cache_key(text: str, target_lang: str, tone_mode: bool) -> CacheKey:
    """
    Build the cache key for a translation request.

    The digest covers the full text; the prefix is kept for inspection only.
    """
    raw = f"{target_lang}\x1f{int(tone_mode)}\x1f{text}".encode("utf-8")
    return CacheKey(
        digest=hashlib.sha256(raw).hexdigest(),
        source_text_prefix=text[:SOURCE_PREFIX_LENGTH],
        target_lang=target_lang,
        tone_mode=tone_mode,
    )


class TranslationCache(Protocol):
    """Storage used by the gateway for read-through caching."""

    async def get(self, key: CacheKey) -> CachedTranslation | None:
        ...

    async def set(self, key: CacheKey, value: CachedTranslation) -> None:
        ...

    async def clear(self) -> None:
        ...

    async def purge_expired(self) -> int:
        ...


class InMemoryTranslationCache:
    """Process-local translation cache with per-entry expiry."""

    def __init__(
        self,
        ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[CachedTranslation, datetime]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: CacheKey) -> CachedTranslation | None:
        entry = self._entries.get(key.digest)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            self._entries.pop(key.digest, None)
            return None
        return value

    async def set(self, key: CacheKey, value: CachedTranslation) -> None:
        now = self._clock()
        self._evict_expired(now)
        self._entries[key.digest] = (value, now + self._ttl)

    async def clear(self) -> None:
        self._entries.clear()

    async def purge_expired(self) -> int:
        return self._evict_expired(self._clock())

    def _evict_expired(self, now: datetime) -> int:
        expired = [digest for digest, (_, expires_at) in self._entries.items() if expires_at <= now]
        for digest in expired:
            del self._entries[digest]
        return len(expired)
