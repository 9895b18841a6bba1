"""
Translation API endpoints.

Routes:
- POST /translate - Translate text through the provider chain
- DELETE /translate/cache - Drop every cached translation

Dependencies: chatrelay.core.translation, chatrelay.models
System role: Translation HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from chatrelay.api.deps import get_translation_gateway
from chatrelay.api.routers.router_utils import handle_relay_errors
from chatrelay.core.translation.gateway import TranslationGateway
from chatrelay.models.translation import TranslateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translate", tags=["translation"])


@router.post("")
@handle_relay_errors
async def translate(
    request: TranslateRequest,
    gateway: TranslationGateway = Depends(get_translation_gateway),
):
    """
    Translate text into the target language.

    Empty text or language returns the text unchanged with ``source: null``.

    Returns:
        dict: ``{translation, source, tone}``

    Raises:
        502: Every provider failed; clients display the original text
    """
    result = await gateway.translate(
        request.text,
        request.target_lang,
        tone_understanding=request.tone_understanding,
    )
    logger.debug(
        "Translation served",
        extra={"target_lang": request.target_lang, "provider": result.source, "cached": result.cached},
    )
    return result.to_wire()


@router.delete("/cache")
@handle_relay_errors
async def clear_translation_cache(
    gateway: TranslationGateway = Depends(get_translation_gateway),
) -> dict:
    """Clear the translation cache, forcing fresh provider calls."""
    await gateway.clear_cache()
    return {"success": True}
