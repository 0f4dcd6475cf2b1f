"""Typed data models used by the translation endpoint."""

from .datatypes import (
    PARTICLES,
    NormalizationRequest,
    Particle,
    PolitenessMode,
    SpeakerGender,
    TranslationRequest,
    TranslationResult,
)

__all__ = [
    "PARTICLES",
    "NormalizationRequest",
    "Particle",
    "PolitenessMode",
    "SpeakerGender",
    "TranslationRequest",
    "TranslationResult",
]
