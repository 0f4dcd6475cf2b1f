"""Unit tests for translation prompt construction."""

from __future__ import annotations

from lingobridge.llm.prompts import PromptLibrary
from lingobridge.models.datatypes import PolitenessMode, SpeakerGender, TranslationRequest


def _request(**overrides: object) -> TranslationRequest:
    """Build a Thai translation request with optional field overrides."""

    values: dict[str, object] = {
        "text": "Have you eaten yet?",
        "source_language": "auto",
        "target_language": "Thai",
    }
    values.update(overrides)
    return TranslationRequest(**values)  # type: ignore[arg-type]


def test_system_prompt_forbids_particles_in_casual_mode() -> None:
    """Casual Thai requests should instruct the model not to add particles."""

    prompt = PromptLibrary().translation_system_prompt(_request())

    assert "Return ONLY valid JSON" in prompt
    assert "source_lang, target_lang, translation, phonetic, notes" in prompt
    assert "NEVER add polite particles" in prompt


def test_system_prompt_requests_gendered_particle_in_polite_mode() -> None:
    """Polite Thai requests should name the single particle to use."""

    prompt = PromptLibrary().translation_system_prompt(
        _request(
            politeness_mode=PolitenessMode.POLITE,
            speaker_gender=SpeakerGender.FEMALE,
        )
    )

    assert "the speaker is female" in prompt
    assert "`ค่ะ`" in prompt
    assert "NEVER add polite particles" not in prompt


def test_system_prompt_omits_particle_policy_for_non_thai_or_when_disabled() -> None:
    """The Thai particle rule should appear only for Thai targets when enabled."""

    library = PromptLibrary()

    japanese = library.translation_system_prompt(_request(target_language="Japanese"))
    disabled = library.translation_system_prompt(_request(), include_particle_policy=False)

    assert "ครับ" not in japanese
    assert "ครับ" not in disabled


def test_translate_prompt_carries_language_pair_and_text() -> None:
    """User prompt should state languages, phonetic requirement, and text."""

    prompt = PromptLibrary().translate_prompt(_request(source_language="English"))

    assert prompt == (
        "Source language: English\n"
        "Target language: Thai\n"
        "Phonetic: required\n"
        "Text: Have you eaten yet?"
    )
    assert "Phonetic: optional" in PromptLibrary().translate_prompt(
        _request(target_language="Spanish")
    )


def test_strict_retry_prompt_extends_base_prompt() -> None:
    """Retry prompt should keep the base instructions and demand bare JSON."""

    prompt = PromptLibrary().strict_json_retry_prompt("BASE")

    assert prompt.startswith("BASE\n\n")
    assert "previous reply was not valid JSON" in prompt
    assert "Start with `{` and end with `}`" in prompt
