"""
Translation cache ORM model.

Dependencies: sqlalchemy, chatrelay.boundary.db.base
System role: Durable translation cache entries
"""

from datetime import datetime

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chatrelay.boundary.db.base import Base, TimestampMixin, UTCDateTime


class TranslationCacheModel(Base, TimestampMixin):
    """
    Cached translation keyed by a digest of (text, target language, tone mode).

    Attributes:
        cache_key: sha256 hex digest, primary key
        source_text_prefix: First characters of the source text, for inspection
        target_lang: Canonical target language code
        tone_mode: Whether the translation was tone-aware
        translation: Translated text
        provider: Provider that produced it
        tone: Detected tone label, if any
        expires_at: End of the entry's lifetime
    """

    __tablename__ = "translation_cache"

    cache_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    source_text_prefix: Mapped[str] = mapped_column(String(100), nullable=False)
    target_lang: Mapped[str] = mapped_column(String(16), nullable=False)
    tone_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    translation: Mapped[str] = mapped_column(Text, nullable=False)
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    tone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
