"""Unit tests for shared request and configuration parsing helpers."""

import pytest

from lingobridge.models.datatypes import PolitenessMode, SpeakerGender
from lingobridge.parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_politeness_mode,
    parse_required_boolean,
    parse_speaker_gender,
)


def test_normalize_optional_string_handles_blank_values() -> None:
    """Normalization should return `None` for `None` and blank textual values."""

    assert normalize_optional_string(None) is None
    assert normalize_optional_string("") is None
    assert normalize_optional_string("   ") is None


def test_normalize_optional_string_strips_non_blank_values() -> None:
    """Normalization should return stripped content for non-empty values."""

    assert normalize_optional_string("  value  ") == "value"
    assert normalize_optional_string(42) == "42"


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("TrUe", True),
        ("  ON ", True),
        ("YeS", True),
        ("FALSE", False),
        (" oFf ", False),
        ("nO", False),
    ],
)
def test_parse_permissive_boolean_accepts_mixed_case_tokens(
    token: str, expected: bool
) -> None:
    """Permissive parsing should accept valid tokens case-insensitively."""

    assert parse_permissive_boolean(token) is expected


@pytest.mark.parametrize("value", ["", "   ", "maybe", "2", object()])
def test_parse_permissive_boolean_returns_none_for_invalid_tokens(value: object) -> None:
    """Permissive parsing should return `None` for invalid or blank inputs."""

    assert parse_permissive_boolean(value) is None


def test_parse_required_boolean_raises_for_invalid_token() -> None:
    """Strict boolean parsing should name the field in its validation message."""

    with pytest.raises(
        ValueError,
        match=(
            r"`prompt_particles` must be a boolean value "
            r"\(`true`/`false`, `1`/`0`, `yes`/`no`\)\."
        ),
    ):
        parse_required_boolean("maybe", "prompt_particles")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("polite", PolitenessMode.POLITE),
        (" Formal ", PolitenessMode.POLITE),
        ("สุภาพ", PolitenessMode.POLITE),
        (True, PolitenessMode.POLITE),
        ("casual", PolitenessMode.CASUAL),
        ("NEUTRAL", PolitenessMode.CASUAL),
        ("off", PolitenessMode.CASUAL),
        (False, PolitenessMode.CASUAL),
        (PolitenessMode.POLITE, PolitenessMode.POLITE),
    ],
)
def test_parse_politeness_mode_maps_free_form_tokens(
    value: object, expected: PolitenessMode
) -> None:
    """Free-form tone values should collapse onto the two politeness modes."""

    assert parse_politeness_mode(value) is expected


def test_parse_politeness_mode_uses_default_for_blank_values() -> None:
    """Missing tone values should resolve to the configured default."""

    assert parse_politeness_mode(None, default=PolitenessMode.POLITE) is PolitenessMode.POLITE
    assert parse_politeness_mode("  ") is PolitenessMode.CASUAL


def test_parse_politeness_mode_rejects_unknown_tokens() -> None:
    """Unknown tone values should fail with the field name in the message."""

    with pytest.raises(ValueError, match=r"`thaiTone` must be `polite` or `casual` \(got `loud`\)"):
        parse_politeness_mode("loud", field_name="thaiTone")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("male", SpeakerGender.MALE),
        ("M", SpeakerGender.MALE),
        ("man", SpeakerGender.MALE),
        ("ผู้ชาย", SpeakerGender.MALE),
        ("female", SpeakerGender.FEMALE),
        ("f", SpeakerGender.FEMALE),
        (" Woman ", SpeakerGender.FEMALE),
        ("หญิง", SpeakerGender.FEMALE),
    ],
)
def test_parse_speaker_gender_maps_free_form_tokens(
    value: str, expected: SpeakerGender
) -> None:
    """Free-form speaker values should collapse onto the two genders."""

    assert parse_speaker_gender(value) is expected


def test_parse_speaker_gender_defaults_and_rejects_unknown_tokens() -> None:
    """Blank speaker values use the default; unknown ones raise."""

    assert parse_speaker_gender("", default=SpeakerGender.FEMALE) is SpeakerGender.FEMALE
    with pytest.raises(ValueError, match=r"`speaker` must be `male` or `female`"):
        parse_speaker_gender("robot", field_name="speaker")
