"""
Translation gateway.

Returns a translation for text and a target language by trying providers
in a fixed priority order, with optional tone-aware prompting and a
read-through cache. Translation is advisory: callers display the original
text when every provider fails.

Dependencies: asyncio, chatrelay.core.translation
System role: Optimistic translation pipeline with multi-provider fallback
"""

import asyncio
import logging
import time
from collections.abc import Sequence

from chatrelay.core.exceptions import AllProvidersFailedError, ProviderError
from chatrelay.core.translation.cache import (
    CachedTranslation,
    TranslationCache,
    build_cache_key,
)
from chatrelay.core.translation.cleaning import strip_translation_wrapping
from chatrelay.core.translation.languages import normalize_language
from chatrelay.core.translation.providers import ToneClassifier, TranslationProvider
from chatrelay.models.translation import TranslationResult

logger = logging.getLogger(__name__)


class TranslationGateway:
    """
    Ordered provider chain with per-attempt timeout and caching.

    Args:
        providers: Providers in priority order; the first success wins
        cache: Read-through cache shared by all requests
        tone_classifier: Optional tone-capable provider
        timeout_seconds: Upper bound for each provider or tone attempt
    """

    def __init__(
        self,
        providers: Sequence[TranslationProvider],
        cache: TranslationCache,
        tone_classifier: ToneClassifier | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._providers = list(providers)
        self._cache = cache
        self._tone_classifier = tone_classifier
        self._timeout = timeout_seconds

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self._providers]

    async def translate(
        self,
        text: str,
        target_lang: str,
        tone_understanding: bool = False,
    ) -> TranslationResult:
        """
        Translate text, consulting the cache first.

        Args:
            text: Source text
            target_lang: Target language code in any case ("es", "ES-mx")
            tone_understanding: Classify tone first and ask providers to keep it

        Returns:
            TranslationResult: translation, winning provider and detected tone

        Raises:
            AllProvidersFailedError: Every provider failed
        """
        if not text or not text.strip() or not target_lang or not target_lang.strip():
            return TranslationResult(translation=text, source=None)

        lang = normalize_language(target_lang)
        key = build_cache_key(text, lang, tone_understanding)

        cached = await self._cache_get(key)
        if cached is not None:
            logger.debug(
                "Translation cache hit",
                extra={"target_lang": lang, "provider": cached.provider},
            )
            return TranslationResult(
                translation=cached.translation,
                source=cached.provider,
                tone=cached.tone,
                cached=True,
            )

        tone = None
        if tone_understanding:
            tone = await self._detect_tone(text)

        failures: dict[str, str] = {}
        for provider in self._providers:
            started = time.monotonic()
            try:
                raw = await asyncio.wait_for(
                    provider.translate(text, lang, tone),
                    timeout=self._timeout,
                )
                translation = strip_translation_wrapping(raw)
                if not translation:
                    raise ProviderError("translation empty after cleanup", provider=provider.name)
            except asyncio.TimeoutError:
                failures[provider.name] = f"timed out after {self._timeout}s"
                logger.warning(
                    "Translation provider timed out",
                    extra={"provider": provider.name, "target_lang": lang},
                )
                continue
            except ProviderError as e:
                failures[provider.name] = e.message
                logger.warning(
                    "Translation provider failed, falling through",
                    extra={"provider": provider.name, "target_lang": lang, "error_msg": e.message},
                )
                continue
            except Exception as e:
                failures[provider.name] = f"{type(e).__name__}: {e}"
                logger.exception(
                    "Unexpected translation provider error, falling through",
                    extra={"provider": provider.name, "target_lang": lang},
                )
                continue

            logger.info(
                "Translation succeeded",
                extra={
                    "provider": provider.name,
                    "target_lang": lang,
                    "tone": tone,
                    "latency_ms": round((time.monotonic() - started) * 1000, 2),
                },
            )
            await self._cache_set(key, CachedTranslation(translation, provider.name, tone))
            return TranslationResult(translation=translation, source=provider.name, tone=tone)

        logger.error(
            "All translation providers failed",
            extra={"target_lang": lang, "failures": failures},
        )
        raise AllProvidersFailedError(failures)

    async def clear_cache(self) -> None:
        await self._cache.clear()

    async def purge_cache(self) -> int:
        """Drop expired cache entries; returns the number removed."""
        removed = await self._cache.purge_expired()
        if removed:
            logger.info("Purged expired translations", extra={"removed": removed})
        return removed

    async def _detect_tone(self, text: str) -> str | None:
        """Classify tone; any failure yields None and translation proceeds."""
        if self._tone_classifier is None:
            return None
        try:
            return await asyncio.wait_for(
                self._tone_classifier.classify(text),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Tone classification timed out",
                extra={"provider": self._tone_classifier.name},
            )
        except Exception as e:
            logger.warning(
                "Tone classification failed, translating without tone",
                extra={"provider": self._tone_classifier.name, "error_msg": str(e)},
            )
        return None

    async def _cache_get(self, key) -> CachedTranslation | None:
        try:
            return await self._cache.get(key)
        except Exception as e:
            logger.warning("Translation cache read failed", extra={"error_msg": str(e)})
            return None

    async def _cache_set(self, key, value: CachedTranslation) -> None:
        try:
            await self._cache.set(key, value)
        except Exception as e:
            logger.warning("Translation cache write failed", extra={"error_msg": str(e)})
