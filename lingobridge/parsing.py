"""Shared parsing helpers for request payloads and runtime configuration values."""

from __future__ import annotations

from .models.datatypes import PolitenessMode, SpeakerGender


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})

_POLITENESS_TOKENS: dict[str, PolitenessMode] = {
    "polite": PolitenessMode.POLITE,
    "formal": PolitenessMode.POLITE,
    "p": PolitenessMode.POLITE,
    "on": PolitenessMode.POLITE,
    "yes": PolitenessMode.POLITE,
    "true": PolitenessMode.POLITE,
    "1": PolitenessMode.POLITE,
    "สุภาพ": PolitenessMode.POLITE,
    "casual": PolitenessMode.CASUAL,
    "informal": PolitenessMode.CASUAL,
    "neutral": PolitenessMode.CASUAL,
    "friendly": PolitenessMode.CASUAL,
    "none": PolitenessMode.CASUAL,
    "c": PolitenessMode.CASUAL,
    "off": PolitenessMode.CASUAL,
    "no": PolitenessMode.CASUAL,
    "false": PolitenessMode.CASUAL,
    "0": PolitenessMode.CASUAL,
    "กันเอง": PolitenessMode.CASUAL,
}

_GENDER_TOKENS: dict[str, SpeakerGender] = {
    "male": SpeakerGender.MALE,
    "m": SpeakerGender.MALE,
    "man": SpeakerGender.MALE,
    "boy": SpeakerGender.MALE,
    "masculine": SpeakerGender.MALE,
    "ชาย": SpeakerGender.MALE,
    "ผู้ชาย": SpeakerGender.MALE,
    "female": SpeakerGender.FEMALE,
    "f": SpeakerGender.FEMALE,
    "woman": SpeakerGender.FEMALE,
    "girl": SpeakerGender.FEMALE,
    "feminine": SpeakerGender.FEMALE,
    "หญิง": SpeakerGender.FEMALE,
    "ผู้หญิง": SpeakerGender.FEMALE,
}


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_required_boolean(value: str, field_name: str) -> bool:
    """Parse a required runtime boolean value from accepted textual tokens.

    Args:
        value: Text value to parse.
        field_name: Field name for an actionable validation error message.

    Raises:
        ValueError: If the token is not one of the accepted boolean values.
    """

    parsed = parse_permissive_boolean(value)
    if parsed is not None:
        return parsed

    raise ValueError(
        f"`{field_name}` must be a boolean value (`true`/`false`, `1`/`0`, `yes`/`no`)."
    )


def parse_politeness_mode(
    value: object,
    default: PolitenessMode = PolitenessMode.CASUAL,
    field_name: str = "politeness",
) -> PolitenessMode:
    """Map a free-form tone value onto `PolitenessMode`.

    Blank values resolve to `default`. Booleans are accepted so JSON clients can
    send `"thaiTone": true`.

    Raises:
        ValueError: If a non-blank value is not a recognized tone token.
    """

    if isinstance(value, PolitenessMode):
        return value
    if isinstance(value, bool):
        return PolitenessMode.POLITE if value else PolitenessMode.CASUAL

    normalized = normalize_optional_string(value)
    if normalized is None:
        return default

    mode = _POLITENESS_TOKENS.get(normalized.lower())
    if mode is None:
        raise ValueError(
            f"`{field_name}` must be `polite` or `casual` (got `{normalized}`)."
        )
    return mode


def parse_speaker_gender(
    value: object,
    default: SpeakerGender = SpeakerGender.MALE,
    field_name: str = "gender",
) -> SpeakerGender:
    """Map a free-form speaker value onto `SpeakerGender`.

    Raises:
        ValueError: If a non-blank value is not a recognized gender token.
    """

    if isinstance(value, SpeakerGender):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return default

    gender = _GENDER_TOKENS.get(normalized.lower())
    if gender is None:
        raise ValueError(
            f"`{field_name}` must be `male` or `female` (got `{normalized}`)."
        )
    return gender
