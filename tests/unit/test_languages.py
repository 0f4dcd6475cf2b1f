"""Unit tests for target-language helpers."""

import pytest

from lingobridge.text.languages import is_thai_language, needs_phonetic


@pytest.mark.parametrize("value", ["Thai", " th ", "TH-th", "th_TH", "ไทย", "ภาษาไทย"])
def test_is_thai_language_accepts_thai_labels(value: str) -> None:
    assert is_thai_language(value) is True


@pytest.mark.parametrize("value", ["English", "thailand", "", None])
def test_is_thai_language_rejects_other_labels(value: object) -> None:
    assert is_thai_language(value) is False


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Thai", True), ("ja-JP", True), ("zh_Hant", True), ("Korean", True), ("French", False)],
)
def test_needs_phonetic_matches_romanized_scripts(value: str, expected: bool) -> None:
    assert needs_phonetic(value) is expected
