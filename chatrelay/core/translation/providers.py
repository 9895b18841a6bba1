"""
Translation and tone providers.

Every provider satisfies the same capability: translate text into a
canonical target language, optionally preserving a tone, or raise
ProviderError. The gateway composes them in priority order.

Dependencies: langchain_core, langchain_google_genai, langchain_aws, requests
System role: Pluggable translation backends
"""

import logging
from typing import Protocol

import requests
from fastapi.concurrency import run_in_threadpool
from langchain_core.language_models.chat_models import BaseChatModel

from chatrelay.configs.translation import TranslationSettings
from chatrelay.core.exceptions import ProviderError
from chatrelay.core.translation.cleaning import clean_tone_label
from chatrelay.core.translation.languages import deepl_code, language_name
from chatrelay.core.translation.prompts import (
    TONE_AWARE_TRANSLATION_PROMPT,
    TONE_CLASSIFICATION_PROMPT,
    TRANSLATION_PROMPT,
)

logger = logging.getLogger(__name__)


class TranslationProvider(Protocol):
    """Capability shared by every translation backend."""

    name: str

    async def translate(self, text: str, target_lang: str, tone: str | None = None) -> str:
        """
        Translate ``text`` into canonical ``target_lang``.

        Raises:
            ProviderError: Network error, malformed or empty response
        """
        ...


class ToneClassifier(Protocol):
    """Capability of labelling the tone of a message."""

    name: str

    async def classify(self, text: str) -> str:
        """Return a single lowercase tone word, or raise ProviderError."""
        ...


def _message_text(content) -> str:
    """Flatten chat model content, which may be a list of parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class ChatModelTranslationProvider:
    """
    Translation through any LangChain chat model.

    The same prompt drives the contextual (Gemini) and secondary (Bedrock)
    providers; only the wrapped model differs.
    """

    def __init__(self, name: str, model: BaseChatModel) -> None:
        self.name = name
        self._model = model

    async def translate(self, text: str, target_lang: str, tone: str | None = None) -> str:
        prompt = TONE_AWARE_TRANSLATION_PROMPT if tone else TRANSLATION_PROMPT
        variables = {"text": text, "language": language_name(target_lang)}
        if tone:
            variables["tone"] = tone
        messages = prompt.format_messages(**variables)

        try:
            response = await self._model.ainvoke(messages)
        except Exception as e:
            raise ProviderError(
                f"{self.name} invocation failed: {e}",
                provider=self.name,
                details={"error_type": type(e).__name__},
            ) from e

        translation = _message_text(response.content).strip()
        if not translation:
            raise ProviderError(f"{self.name} returned an empty translation", provider=self.name)
        return translation


class ChatModelToneClassifier:
    """Tone classification through a LangChain chat model."""

    def __init__(self, name: str, model: BaseChatModel) -> None:
        self.name = name
        self._model = model

    async def classify(self, text: str) -> str:
        try:
            response = await self._model.ainvoke(
                TONE_CLASSIFICATION_PROMPT.format_messages(text=text)
            )
        except Exception as e:
            raise ProviderError(
                f"{self.name} tone classification failed: {e}",
                provider=self.name,
            ) from e

        label = clean_tone_label(_message_text(response.content))
        if not label:
            raise ProviderError(f"{self.name} returned no tone label", provider=self.name)
        return label


class DeepLTranslationProvider:
    """Dedicated translation API provider (DeepL REST)."""

    name = "deepl"

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api-free.deepl.com/v2/translate",
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    def _post(self, text: str, target_lang: str) -> str:
        body = {"text": [text], "target_lang": deepl_code(target_lang)}
        if target_lang == "EN":
            # Without a hint DeepL may echo English-looking input untranslated
            body["formality"] = "default"

        try:
            response = self._session.post(
                self._api_url,
                json=body,
                headers={"Authorization": f"DeepL-Auth-Key {self._api_key}"},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(
                f"deepl request failed: {e}",
                provider=self.name,
                details={"error_type": type(e).__name__},
            ) from e

        try:
            translation = payload["translations"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("deepl returned a malformed response", provider=self.name) from e
        if not isinstance(translation, str) or not translation.strip():
            raise ProviderError("deepl returned an empty translation", provider=self.name)
        return translation

    async def translate(self, text: str, target_lang: str, tone: str | None = None) -> str:
        # DeepL has no tone control; the tone hint is ignored
        return await run_in_threadpool(self._post, text, target_lang)


def build_gemini_model(settings: TranslationSettings) -> BaseChatModel:
    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.gemini_api_key,
        temperature=0.0,
    )


def build_bedrock_model(settings: TranslationSettings) -> BaseChatModel:
    from langchain_aws import ChatBedrockConverse

    return ChatBedrockConverse(
        model=settings.bedrock_model_id,
        region_name=settings.bedrock_region,
        temperature=0.0,
    )


def build_provider_chain(
    settings: TranslationSettings,
) -> tuple[list[TranslationProvider], ToneClassifier | None]:
    """
    Build providers in priority order from configuration.

    Order: contextual LLM (Gemini) -> secondary LLM (Bedrock) -> DeepL.
    Providers without credentials are skipped. The first LLM also serves as
    the tone classifier.

    Returns:
        tuple: Ordered providers and the tone classifier (None if unavailable)
    """
    providers: list[TranslationProvider] = []
    tone_classifier: ToneClassifier | None = None

    if settings.gemini_api_key:
        gemini = build_gemini_model(settings)
        providers.append(ChatModelTranslationProvider("gemini", gemini))
        tone_classifier = ChatModelToneClassifier("gemini", gemini)

    if settings.bedrock_enabled:
        bedrock = build_bedrock_model(settings)
        providers.append(ChatModelTranslationProvider("bedrock", bedrock))
        if tone_classifier is None:
            tone_classifier = ChatModelToneClassifier("bedrock", bedrock)

    if settings.deepl_api_key:
        providers.append(
            DeepLTranslationProvider(
                api_key=settings.deepl_api_key,
                api_url=settings.deepl_api_url,
                timeout_seconds=settings.provider_timeout_seconds,
            )
        )

    if not settings.tone_enabled:
        tone_classifier = None

    logger.info(
        "Translation provider chain built",
        extra={
            "providers": [p.name for p in providers],
            "tone_classifier": tone_classifier.name if tone_classifier else None,
        },
    )
    return providers, tone_classifier
