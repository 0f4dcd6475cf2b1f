"""Deterministic text post-processing for translation output."""

from .languages import is_thai_language, needs_phonetic
from .particles import (
    normalize_particles,
    normalize_request,
    strip_phonetic_particles,
    strip_script_particles,
)

__all__ = [
    "is_thai_language",
    "needs_phonetic",
    "normalize_particles",
    "normalize_request",
    "strip_phonetic_particles",
    "strip_script_particles",
]
