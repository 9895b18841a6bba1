"""
Language code normalization and per-provider code tables.

Canonical codes are uppercase two-letter codes ("ES", "KO"). Each provider
family maps them to what its API expects.
"""

LANGUAGE_NAMES: dict[str, str] = {
    "AR": "Arabic",
    "BG": "Bulgarian",
    "CS": "Czech",
    "DA": "Danish",
    "DE": "German",
    "EL": "Greek",
    "EN": "English",
    "ES": "Spanish",
    "ET": "Estonian",
    "FI": "Finnish",
    "FR": "French",
    "HI": "Hindi",
    "HU": "Hungarian",
    "ID": "Indonesian",
    "IT": "Italian",
    "JA": "Japanese",
    "KO": "Korean",
    "LT": "Lithuanian",
    "LV": "Latvian",
    "NL": "Dutch",
    "PL": "Polish",
    "PT": "Portuguese",
    "RO": "Romanian",
    "RU": "Russian",
    "SK": "Slovak",
    "SL": "Slovenian",
    "SV": "Swedish",
    "TH": "Thai",
    "TR": "Turkish",
    "UK": "Ukrainian",
    "VI": "Vietnamese",
    "ZH": "Chinese (Simplified)",
}

# DeepL wants regional variants for a few targets
DEEPL_CODES: dict[str, str] = {code: code for code in LANGUAGE_NAMES if code not in {"HI", "TH", "VI"}}
DEEPL_CODES.update({"EN": "EN-US", "PT": "PT-BR", "ZH": "ZH-HANS"})

DEEPL_FALLBACK = "EN-US"


def normalize_language(code: str) -> str:
    """
    Canonicalize a language code.

    "es", " es-MX " and "ES_mx" all become "ES".
    """
    cleaned = code.strip().replace("_", "-").upper()
    return cleaned.split("-", 1)[0]


def language_name(code: str) -> str:
    """Human-readable language name for LLM prompts; unknown codes pass through."""
    return LANGUAGE_NAMES.get(code, code)


def deepl_code(code: str) -> str:
    return DEEPL_CODES.get(code, DEEPL_FALLBACK)
