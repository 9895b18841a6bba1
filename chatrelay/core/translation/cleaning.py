"""
Cleanup of provider output.

LLM providers tend to wrap translations in quotes or prefix them with
labels; tone classifiers answer in sentences instead of a single word.
"""

import re

_WRAPPING_QUOTES = [
    ('"', '"'),
    ("'", "'"),
    ("“", "”"),
    ("‘", "’"),
    ("«", "»"),
    ("「", "」"),
    ("`", "`"),
]

_TRANSLATION_PREFIX = re.compile(
    r"^\s*(?:here\s+is\s+the\s+translation|translated\s+text|translation)\s*(?:\([^)]*\))?\s*[:\-]\s*",
    re.IGNORECASE,
)

_TONE_PREFIX = re.compile(
    r"^\s*(?:the\s+)?(?:detected\s+)?(?:tone|mood|sentiment)(?:\s+of\s+(?:the|this)\s+(?:message|text))?\s*(?:is|:)\s*",
    re.IGNORECASE,
)


def strip_translation_wrapping(text: str) -> str:
    """
    Remove incidental wrapping around a translated text.

    Strips "Translation:"-style prefixes and a single matching pair of
    surrounding quotes, repeatedly, until the text is stable.
    """
    result = text.strip()
    while True:
        previous = result
        result = _TRANSLATION_PREFIX.sub("", result, count=1).strip()
        for opening, closing in _WRAPPING_QUOTES:
            if len(result) >= 2 and result.startswith(opening) and result.endswith(closing):
                result = result[len(opening):-len(closing)].strip()
                break
        if result == previous:
            return result


def clean_tone_label(raw: str) -> str | None:
    """
    Reduce a tone classifier answer to a single lowercase word.

    Returns None when nothing usable remains.
    """
    text = _TONE_PREFIX.sub("", raw.strip(), count=1)
    words = re.findall(r"[^\W\d_]+", text)
    if not words:
        return None
    return words[0].lower()
