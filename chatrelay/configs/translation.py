"""
Translation configuration settings.

Provider credentials, model identifiers, timeouts and cache lifetime for
the translation gateway.

Dependencies: pydantic, pydantic_settings
System role: Translation provider chain configuration
"""

from datetime import timedelta
from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from chatrelay.configs.base import BaseSettings


class TranslationSettings(BaseSettings):
    """Translation gateway configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TRANSLATION_",
        case_sensitive=False,
        extra="ignore",
    )

    provider_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound on a single provider attempt",
    )
    cache_ttl_seconds: int = Field(
        default=7 * 24 * 60 * 60,
        gt=0,
        description="Lifetime of cached translations",
    )
    cache_backend: Literal["database", "memory"] = Field(
        default="database",
        description="Where translations are cached",
    )
    cache_purge_enabled: bool = Field(
        default=True,
        description="Periodically delete expired cached translations",
    )
    cache_purge_interval_seconds: float = Field(
        default=60 * 60,
        gt=0,
        description="Seconds between cache purges",
    )
    tone_enabled: bool = Field(
        default=True,
        description="Allow tone classification before translating",
    )

    gemini_api_key: str | None = Field(default=None, description="Google Generative AI key")
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini model name")

    bedrock_enabled: bool = Field(default=False, description="Use Bedrock as secondary provider")
    bedrock_model_id: str = Field(
        default="anthropic.claude-3-haiku-20240307-v1:0",
        description="Bedrock Converse model identifier",
    )
    bedrock_region: str = Field(default="us-east-1", description="AWS region for Bedrock")

    deepl_api_key: str | None = Field(default=None, description="DeepL API key")
    deepl_api_url: str = Field(
        default="https://api-free.deepl.com/v2/translate",
        description="DeepL translate endpoint",
    )

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.cache_ttl_seconds)

    @property
    def cache_purge_interval(self) -> timedelta:
        return timedelta(seconds=self.cache_purge_interval_seconds)
