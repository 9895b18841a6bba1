"""
Test suite for translation providers.

Chat models and the DeepL HTTP session are mocked; no network access.

System role: Verification of provider contracts
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import requests
from langchain_core.messages import AIMessage

from chatrelay.configs.translation import TranslationSettings
from chatrelay.core.exceptions import ProviderError
from chatrelay.core.translation.providers import (
    ChatModelToneClassifier,
    ChatModelTranslationProvider,
    DeepLTranslationProvider,
    build_provider_chain,
)


def chat_model(content=None, error: Exception | None = None) -> MagicMock:
    model = MagicMock()
    if error is not None:
        model.ainvoke = AsyncMock(side_effect=error)
    else:
        model.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return model


def deepl_session(payload=None, status_error: Exception | None = None) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    session = MagicMock()
    session.post.return_value = response
    return session


class TestChatModelTranslationProvider:
    """Test suite for ChatModelTranslationProvider.translate()."""

    @pytest.mark.asyncio
    async def test_translate_should_return_model_text(self) -> None:
        model = chat_model(" hola ")
        provider = ChatModelTranslationProvider("gemini", model)

        result = await provider.translate("hi", "ES")

        assert result == "hola"
        messages = model.ainvoke.call_args.args[0]
        assert "Spanish" in messages[0].content
        assert messages[-1].content == "hi"

    @pytest.mark.asyncio
    async def test_translate_should_include_tone_in_prompt(self) -> None:
        model = chat_model("hola")
        provider = ChatModelTranslationProvider("gemini", model)

        await provider.translate("hi", "ES", tone="playful")

        system_prompt = model.ainvoke.call_args.args[0][0].content
        assert "playful" in system_prompt

    @pytest.mark.asyncio
    async def test_translate_should_join_content_parts(self) -> None:
        provider = ChatModelTranslationProvider(
            "bedrock", chat_model([{"type": "text", "text": "ho"}, {"type": "text", "text": "la"}])
        )

        assert await provider.translate("hi", "ES") == "hola"

    @pytest.mark.asyncio
    async def test_translate_should_wrap_model_errors(self) -> None:
        provider = ChatModelTranslationProvider("gemini", chat_model(error=RuntimeError("quota")))

        with pytest.raises(ProviderError) as exc_info:
            await provider.translate("hi", "ES")

        assert exc_info.value.details["provider"] == "gemini"

    @pytest.mark.asyncio
    async def test_translate_should_reject_empty_output(self) -> None:
        provider = ChatModelTranslationProvider("gemini", chat_model("   "))

        with pytest.raises(ProviderError):
            await provider.translate("hi", "ES")


class TestChatModelToneClassifier:
    """Test suite for ChatModelToneClassifier.classify()."""

    @pytest.mark.asyncio
    async def test_classify_should_clean_label(self) -> None:
        classifier = ChatModelToneClassifier("gemini", chat_model("The tone is: Sarcastic."))

        assert await classifier.classify("oh great") == "sarcastic"

    @pytest.mark.asyncio
    async def test_classify_should_fail_without_label(self) -> None:
        classifier = ChatModelToneClassifier("gemini", chat_model("..."))

        with pytest.raises(ProviderError):
            await classifier.classify("hm")


class TestDeepLTranslationProvider:
    """Test suite for DeepLTranslationProvider.translate()."""

    @pytest.mark.asyncio
    async def test_translate_should_post_mapped_code_and_parse_text(self) -> None:
        session = deepl_session({"translations": [{"text": "Hallo"}]})
        provider = DeepLTranslationProvider("key", "https://deepl.test/v2/translate", session=session)

        result = await provider.translate("hello", "DE")

        assert result == "Hallo"
        kwargs = session.post.call_args.kwargs
        assert kwargs["json"] == {"text": ["hello"], "target_lang": "DE"}
        assert kwargs["headers"]["Authorization"] == "DeepL-Auth-Key key"

    @pytest.mark.asyncio
    async def test_translate_should_add_formality_hint_for_english(self) -> None:
        session = deepl_session({"translations": [{"text": "Hello"}]})
        provider = DeepLTranslationProvider("key", session=session)

        await provider.translate("hola", "EN")

        body = session.post.call_args.kwargs["json"]
        assert body["target_lang"] == "EN-US"
        assert body["formality"] == "default"

    @pytest.mark.asyncio
    async def test_translate_should_wrap_http_errors(self) -> None:
        session = deepl_session(status_error=requests.HTTPError("456 Quota exceeded"))
        provider = DeepLTranslationProvider("key", session=session)

        with pytest.raises(ProviderError):
            await provider.translate("hola", "EN")

    @pytest.mark.asyncio
    async def test_translate_should_reject_malformed_payload(self) -> None:
        provider = DeepLTranslationProvider("key", session=deepl_session({"unexpected": True}))

        with pytest.raises(ProviderError):
            await provider.translate("hola", "EN")


class TestBuildProviderChain:
    """Test suite for build_provider_chain()."""

    def test_build_provider_chain_should_skip_unconfigured_providers(self) -> None:
        settings = TranslationSettings(gemini_api_key=None, bedrock_enabled=False, deepl_api_key="k")

        providers, tone_classifier = build_provider_chain(settings)

        assert [p.name for p in providers] == ["deepl"]
        assert tone_classifier is None

    def test_build_provider_chain_should_return_empty_chain_without_credentials(self) -> None:
        settings = TranslationSettings(gemini_api_key=None, bedrock_enabled=False, deepl_api_key=None)

        providers, _ = build_provider_chain(settings)

        assert providers == []
