"""Thai politeness particle normalization.

Responsibilities:
- Strip trailing politeness markers (`ครับ`, `ค่ะ`, `คะ`) and their romanized
  spellings from model output.
- Append exactly one gender-appropriate marker when polite register is requested.

The pass is a pure string transform: output depends only on the four inputs,
and it never raises for string input.
"""

from __future__ import annotations

import re

from ..models.datatypes import (
    PARTICLES,
    NormalizationRequest,
    PolitenessMode,
    SpeakerGender,
)


SCRIPT_MARKERS = ("ครับ", "ค่ะ", "คะ")
PHONETIC_MARKERS = (
    "khráp",
    "khrap",
    "khrab",
    "khráb",
    "khrup",
    "khrúp",
    "krap",
    "krub",
    "khâ",
    "khà",
    "khá",
    "khaa",
    "kha",
    "kâ",
    "ká",
    "ka",
)

_PUNCTUATION_CHARS = ".!?。！？．…"
_TERMINAL_PUNCTUATION = rf"[{_PUNCTUATION_CHARS}]+"

_TRAILING_BLANK_PATTERN = re.compile(r"[\s\u200b]+\Z")
_TRAILING_PUNCTUATION_PATTERN = re.compile(
    rf"[{_PUNCTUATION_CHARS}][{_PUNCTUATION_CHARS}\s\u200b]*\Z"
)
_SCRIPT_TAIL_PATTERN = re.compile(
    rf"(?:{_TERMINAL_PUNCTUATION})?[\s\u200b]*"
    rf"(?:{'|'.join(re.escape(marker) for marker in SCRIPT_MARKERS)})"
    r"[\s\u200b]*\Z"
)
_PHONETIC_TAIL_PATTERN = re.compile(
    rf"(?:{_TERMINAL_PUNCTUATION})?[\s\u200b]*"
    rf"\b(?:{'|'.join(re.escape(marker) for marker in PHONETIC_MARKERS)})\b"
    r"[\s\u200b]*\Z",
    re.IGNORECASE,
)


def _rstrip_blank(value: str) -> str:
    """Trim trailing Unicode whitespace and zero-width spaces."""

    return _TRAILING_BLANK_PATTERN.sub("", value)


def _split_tail(value: str | None, pattern: re.Pattern[str]) -> tuple[str, str]:
    """Split `value` into a marker-free body and its closing punctuation.

    Punctuation after the last marker is set aside and kept. Punctuation
    directly before a stripped marker goes with the marker. When nothing but
    markers and punctuation remain, both parts are empty.
    """

    body = _rstrip_blank(value or "")
    punctuation = ""
    removed = False
    while True:
        match = _TRAILING_PUNCTUATION_PATTERN.search(body)
        if match is not None:
            punctuation = match.group(0) + punctuation
            body = _rstrip_blank(body[: match.start()])
        candidate = _rstrip_blank(pattern.sub("", body, count=1))
        if candidate != body:
            removed = True
        elif match is None:
            break
        body = candidate

    if not body and removed:
        punctuation = ""
    return body, punctuation


def _with_particle(body: str, punctuation: str, marker: str | None) -> str:
    """Rejoin a split string, placing `marker` before the closing punctuation."""

    if marker is None or not body:
        return f"{body}{punctuation}"
    return f"{body} {marker}{punctuation}"


def strip_script_particles(text: str | None) -> str:
    """Strip trailing Thai-script politeness markers regardless of gender."""

    return _with_particle(*_split_tail(text, _SCRIPT_TAIL_PATTERN), None)


def strip_phonetic_particles(phonetic: str | None) -> str:
    """Strip trailing romanized politeness markers, case-insensitively."""

    return _with_particle(*_split_tail(phonetic, _PHONETIC_TAIL_PATTERN), None)


def normalize_particles(
    text: str | None,
    phonetic: str | None,
    mode: PolitenessMode,
    gender: SpeakerGender,
) -> tuple[str, str]:
    """Return `(text, phonetic)` with at most one trailing politeness marker.

    Casual mode leaves no marker. Polite mode leaves exactly one marker matching
    `gender` on each string that has content besides punctuation; the marker
    goes before any closing punctuation, and empty strings stay empty.
    """

    script_marker: str | None = None
    phonetic_marker: str | None = None
    if mode is PolitenessMode.POLITE:
        particle = PARTICLES[gender]
        script_marker = particle.script
        phonetic_marker = particle.phonetic

    normalized_text = _with_particle(
        *_split_tail(text, _SCRIPT_TAIL_PATTERN), script_marker
    )
    normalized_phonetic = _with_particle(
        *_split_tail(phonetic, _PHONETIC_TAIL_PATTERN), phonetic_marker
    )
    return normalized_text, normalized_phonetic


def normalize_request(request: NormalizationRequest) -> tuple[str, str]:
    """Normalize a `NormalizationRequest` record."""

    return normalize_particles(
        request.text,
        request.phonetic,
        request.politeness_mode,
        request.speaker_gender,
    )
