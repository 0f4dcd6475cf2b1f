"""Prompt template library for the translation endpoint.

Responsibilities:
- Centralize system and user prompt construction for translation calls.
- Provide the stricter JSON-only instruction used for the single retry.
"""

from __future__ import annotations

from ..models.datatypes import PARTICLES, PolitenessMode, TranslationRequest
from ..text.languages import is_thai_language, needs_phonetic


RESPONSE_KEYS = ("source_lang", "target_lang", "translation", "phonetic", "notes")


class PromptLibrary:
    """Build prompt strings for translation requests."""

    def translation_system_prompt(
        self,
        request: TranslationRequest,
        include_particle_policy: bool = True,
    ) -> str:
        """Return the JSON-only system prompt for one request."""

        key_list = ", ".join(RESPONSE_KEYS)
        lines = [
            "You are a professional translation engine.",
            "Return ONLY valid JSON. No markdown. No code fences. No extra text.",
            f"JSON keys must be exactly: {key_list}.",
            "",
            "Rules:",
            "- Translate into natural, everyday spoken language for the target.",
            "- If input is a single word (food/fruit/proper noun), use the most common "
            "target-language term if it exists.",
            "- Notes must be in English only (short).",
        ]
        if include_particle_policy and is_thai_language(request.target_language):
            lines.append(f"- {self.thai_particle_instruction(request)}")
        lines.extend(
            [
                "",
                "Phonetic:",
                "- If target is Thai/Japanese/Korean/Chinese, provide phonetic in Latin letters.",
                "- Otherwise phonetic can be empty string if not needed.",
                "",
                "Output JSON example:",
                "{",
                '  "source_lang": "Malay",',
                '  "target_lang": "Thai",',
                '  "translation": "...",',
                '  "phonetic": "...",',
                '  "notes": "..."',
                "}",
            ]
        )
        return "\n".join(lines)

    @staticmethod
    def thai_particle_instruction(request: TranslationRequest) -> str:
        """Return the Thai politeness instruction matching the requested register."""

        if request.politeness_mode is PolitenessMode.CASUAL:
            return (
                "If target is Thai: NEVER add polite particles (ครับ/ค่ะ/คะ). "
                "Keep it neutral and friendly."
            )
        particle = PARTICLES[request.speaker_gender]
        return (
            f"If target is Thai: the speaker is {request.speaker_gender.value}; end the "
            f"sentence with exactly one polite particle `{particle.script}` "
            f"(phonetic `{particle.phonetic}`) and never use any other particle."
        )

    def translate_prompt(self, request: TranslationRequest) -> str:
        """Return the user prompt carrying the source text and language pair."""

        phonetic_hint = "required" if needs_phonetic(request.target_language) else "optional"
        return (
            f"Source language: {request.source_language}\n"
            f"Target language: {request.target_language}\n"
            f"Phonetic: {phonetic_hint}\n"
            f"Text: {request.text}"
        )

    def strict_json_retry_prompt(self, base_system_prompt: str) -> str:
        """Return the stricter system prompt used after an unparseable reply."""

        key_list = ", ".join(RESPONSE_KEYS)
        return (
            f"{base_system_prompt}\n\n"
            "IMPORTANT: Your previous reply was not valid JSON. Reply with a single JSON "
            f"object containing exactly the keys {key_list}. Start with `{{` and end "
            "with `}`. Do not wrap it in code fences and do not add any other text."
        )
