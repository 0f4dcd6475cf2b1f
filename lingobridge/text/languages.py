"""Target-language resolution helpers."""

from __future__ import annotations


_THAI_LANGUAGE_TOKENS = frozenset({"thai", "th", "th-th", "th_th", "ไทย", "ภาษาไทย"})
_PHONETIC_LANGUAGE_TOKENS = frozenset(
    {
        "thai",
        "th",
        "japanese",
        "ja",
        "korean",
        "ko",
        "chinese",
        "zh",
        "mandarin",
        "cantonese",
    }
)


def _language_token(value: object) -> str:
    """Return a lowercase comparison token for a free-form language label."""

    if value is None:
        return ""
    return str(value).strip().lower()


def is_thai_language(value: object) -> bool:
    """Return whether a language label names Thai."""

    return _language_token(value) in _THAI_LANGUAGE_TOKENS


def needs_phonetic(value: object) -> bool:
    """Return whether the target language is written in a non-Latin script we romanize."""

    token = _language_token(value)
    if token in _PHONETIC_LANGUAGE_TOKENS:
        return True
    return token.split("-")[0].split("_")[0] in _PHONETIC_LANGUAGE_TOKENS
