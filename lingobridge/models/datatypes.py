"""Core datatypes shared across Lingobridge modules.

Responsibilities:
- Represent the validated politeness settings resolved at the request boundary.
- Represent immutable request/result records exchanged between endpoint stages.

Key types:
- `PolitenessMode`, `SpeakerGender`, `Particle`, `NormalizationRequest`,
  `TranslationRequest`, and `TranslationResult`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PolitenessMode(str, Enum):
    """Requested register for Thai output."""

    CASUAL = "casual"
    POLITE = "polite"


class SpeakerGender(str, Enum):
    """Speaker gender used to select a Thai politeness particle."""

    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True, slots=True)
class Particle:
    """Script and romanized forms of one trailing politeness marker.

    Attributes:
        script: Thai-script marker appended to translations.
        phonetic: Latin-letter marker appended to phonetic transcriptions.
    """

    script: str
    phonetic: str


PARTICLES: dict[SpeakerGender, Particle] = {
    SpeakerGender.MALE: Particle(script="ครับ", phonetic="khráp"),
    SpeakerGender.FEMALE: Particle(script="ค่ะ", phonetic="khâ"),
}


@dataclass(frozen=True, slots=True)
class NormalizationRequest:
    """Inputs of one particle normalization pass.

    Attributes:
        text: Candidate Thai translation.
        phonetic: Candidate romanized transcription.
        politeness_mode: Requested register.
        speaker_gender: Speaker gender selecting the appended marker.
    """

    text: str
    phonetic: str
    politeness_mode: PolitenessMode
    speaker_gender: SpeakerGender


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    """Validated translation request built once from the raw payload.

    Attributes:
        text: Source text to translate.
        source_language: Source language label, or `auto` for detection.
        target_language: Target language label.
        politeness_mode: Requested Thai register.
        speaker_gender: Speaker gender for Thai particles.
    """

    text: str
    source_language: str
    target_language: str
    politeness_mode: PolitenessMode = PolitenessMode.CASUAL
    speaker_gender: SpeakerGender = SpeakerGender.MALE


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """Post-processed translation returned by the translator.

    Attributes:
        source_lang: Source language reported by the model or requested by the caller.
        target_lang: Target language reported by the model or requested by the caller.
        translation: Final translated text.
        phonetic: Final Latin-letter transcription, possibly empty.
        notes: Short English usage notes, possibly empty.
        detected_source: Model-detected source language when detection was requested.
        provider: Provider identifier used for the call.
        model: Model identifier used for the call.
        retried: Whether the stricter JSON retry was needed.
    """

    source_lang: str
    target_lang: str
    translation: str
    phonetic: str
    notes: str
    detected_source: str | None = None
    provider: str = "openai"
    model: str = ""
    retried: bool = False

    def as_payload(self) -> dict[str, str]:
        """Return response body fields in stable key order."""

        payload = {
            "source_lang": self.source_lang,
            "target_lang": self.target_lang,
            "translation": self.translation,
            "phonetic": self.phonetic,
            "notes": self.notes,
        }
        if self.detected_source is not None:
            payload["detected_source"] = self.detected_source
        return payload
