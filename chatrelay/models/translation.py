"""
Translation request/response schemas.

Dependencies: pydantic
System role: Translation API contracts
"""

from pydantic import Field

from chatrelay.models.common import CamelModel


class TranslateRequest(CamelModel):
    """Request schema for POST /translate."""

    text: str = ""
    target_lang: str = Field(default="", max_length=16)
    tone_understanding: bool = False


class TranslationResult(CamelModel):
    """
    Outcome of a translation.

    Attributes:
        translation: Translated text (or the original text on short-circuit)
        source: Provider that produced the translation, None when untranslated
        tone: Detected tone label when tone understanding was used
        cached: Whether the result came from the translation cache
    """

    translation: str
    source: str | None = None
    tone: str | None = None
    cached: bool = Field(default=False, exclude=True)
