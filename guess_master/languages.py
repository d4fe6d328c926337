"""Language tags and per-user / per-chat language resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from unidecode import unidecode

if TYPE_CHECKING:
    from .games.session_store import SessionStore

SUPPORTED_LANGUAGES = ("en", "it", "ar", "ru", "zh")

LANGUAGE_DISPLAY_NAMES = {
    "en": "English",
    "it": "Italiano",
    "ar": "العربية",
    "ru": "Русский",
    "zh": "中文",
}

# Keys are ASCII-folded, so native spellings ("Русский", "中文") match too.
LANGUAGE_ALIASES = {
    "english": "en",
    "inglese": "en",
    "italian": "it",
    "italiano": "it",
    "arabic": "ar",
    "arabo": "ar",
    "russian": "ru",
    "russo": "ru",
    "russkii": "ru",
    "chinese": "zh",
    "cinese": "zh",
    "zhong wen": "zh",
    "zhongwen": "zh",
}


def _fold(text: str) -> str:
    return " ".join(unidecode(text).lower().split())


def parse_lang(value: Optional[str]) -> Optional[str]:
    """Return the supported tag for ``value`` or None."""
    if not value:
        return None
    raw = str(value).strip().lower()
    if raw in SUPPORTED_LANGUAGES:
        return raw
    return LANGUAGE_ALIASES.get(_fold(raw))


def language_from_code(language_code: Optional[str]) -> Optional[str]:
    """Map a transport locale such as "en-US" onto a supported tag."""
    if not language_code:
        return None
    parsed = parse_lang(language_code)
    if parsed:
        return parsed
    code = str(language_code).strip()
    if len(code) >= 2:
        return parse_lang(code[:2])
    return None


def display_name(tag: str) -> str:
    return LANGUAGE_DISPLAY_NAMES.get(tag, tag)


def effective_lang(
    store: "SessionStore",
    chat_id: int,
    user_id: Optional[int],
    language_code: Optional[str],
    default: str,
) -> str:
    if user_id is not None:
        pref = store.user_language((chat_id, user_id))
        if pref:
            return pref
    chat_pref = store.chat_language(chat_id)
    if chat_pref:
        return chat_pref
    detected = language_from_code(language_code)
    if detected:
        return detected
    return default


__all__ = [
    "LANGUAGE_DISPLAY_NAMES",
    "SUPPORTED_LANGUAGES",
    "display_name",
    "effective_lang",
    "language_from_code",
    "parse_lang",
]
