"""Translation provider integration.

Responsibilities:
- Call the chat model with the JSON-only translation prompt.
- Retry exactly once with a stricter instruction when the reply is not JSON.
- Fill missing reply fields and apply deterministic Thai particle normalization.
- Map provider and reply failures onto stage-scoped endpoint errors.
"""

from __future__ import annotations

from typing import Any, Protocol

from ..config import EndpointConfig, RuntimeConfigSources
from ..errors import TranslationStageError
from ..models.datatypes import TranslationRequest, TranslationResult
from ..telemetry.logger import RequestLogger
from ..text.languages import is_thai_language
from ..text.particles import normalize_particles
from .openai_client import OpenAIChatClient, OpenAIProviderError
from .prompts import PromptLibrary
from .reply_parser import ModelReplyError, parse_model_reply, reply_field


class Translator(Protocol):
    """Protocol for translation providers."""

    def translate(self, request: TranslationRequest) -> TranslationResult:
        """Translate one validated request."""


class OpenAITranslator:
    """OpenAI-backed translator returning normalized JSON translation fields."""

    def __init__(
        self,
        model: str = "gpt-4o",
        provider_id: str = "openai",
        api_key: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.2,
        timeout_seconds: float = 60.0,
        prompt_particles: bool = True,
        max_detail_chars: int = 2000,
        run_logger: RequestLogger | None = None,
    ) -> None:
        """Initialize translator settings and OpenAI client dependencies."""

        self.model = model
        self.provider_id = provider_id
        self.temperature = temperature
        self.prompt_particles = prompt_particles
        self.max_detail_chars = max_detail_chars
        self.run_logger = run_logger
        self.client = OpenAIChatClient(
            api_key=api_key,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            max_message_chars=max_detail_chars,
        )
        self.prompts = PromptLibrary()

    @classmethod
    def from_config(
        cls,
        config: EndpointConfig,
        sources: RuntimeConfigSources | None = None,
        run_logger: RequestLogger | None = None,
    ) -> OpenAITranslator:
        """Build a translator from endpoint config and resolved runtime sources."""

        runtime = config.resolved_provider_runtime(sources)
        return cls(
            model=runtime.model,
            provider_id=runtime.provider,
            api_key=runtime.api_key,
            base_url=runtime.base_url,
            temperature=config.temperature,
            timeout_seconds=config.timeout_seconds,
            prompt_particles=config.prompt_particles,
            max_detail_chars=config.max_detail_chars,
            run_logger=run_logger,
        )

    def translate(self, request: TranslationRequest) -> TranslationResult:
        """Translate one request and return post-processed fields."""

        system_prompt = self.prompts.translation_system_prompt(
            request, include_particle_policy=self.prompt_particles
        )
        user_prompt = self.prompts.translate_prompt(request)

        content = self._complete(system_prompt, user_prompt)
        retried = False
        try:
            payload = parse_model_reply(content)
        except ModelReplyError:
            retried = True
            self._log_retry("reply", "invalid_json")
            content = self._complete(
                self.prompts.strict_json_retry_prompt(system_prompt), user_prompt
            )
            try:
                payload = parse_model_reply(content)
            except ModelReplyError as exc:
                raise TranslationStageError(
                    stage="reply",
                    detail="Model did not return valid JSON",
                    hint="Retry the request or choose a model that follows JSON instructions.",
                    upstream_detail=exc.content[: self.max_detail_chars],
                ) from exc

        return self._build_result(request, payload, retried)

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Run one chat completion and map provider failures to stage errors."""

        try:
            return self.client.chat_completion_text(
                model=self.model,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                temperature=self.temperature,
            )
        except OpenAIProviderError as exc:
            if exc.failure_kind == "missing_api_key":
                raise TranslationStageError(
                    stage="config",
                    detail="OPENAI_API_KEY is not set",
                    hint="Set `OPENAI_API_KEY` in the function environment or store a key "
                    "with `lingobridge credentials --set-api-key`.",
                ) from exc
            raise TranslationStageError(
                stage="provider",
                detail="OpenAI API error",
                upstream_detail=(exc.upstream_body or str(exc))[: self.max_detail_chars],
            ) from exc

    def _build_result(
        self,
        request: TranslationRequest,
        payload: dict[str, Any],
        retried: bool,
    ) -> TranslationResult:
        """Fill missing reply fields and apply Thai particle normalization."""

        reported_source = reply_field(payload, "source_lang")
        target_lang = reply_field(payload, "target_lang", request.target_language)
        translation = reply_field(payload, "translation")
        phonetic = reply_field(payload, "phonetic")

        if is_thai_language(target_lang) or is_thai_language(request.target_language):
            translation, phonetic = normalize_particles(
                translation,
                phonetic,
                request.politeness_mode,
                request.speaker_gender,
            )

        detected_source = None
        if request.source_language.strip().lower() == "auto" and reported_source:
            detected_source = reported_source

        return TranslationResult(
            source_lang=reported_source or request.source_language,
            target_lang=target_lang,
            translation=translation,
            phonetic=phonetic,
            notes=reply_field(payload, "notes"),
            detected_source=detected_source,
            provider=self.provider_id,
            model=self.model,
            retried=retried,
        )

    def _log_retry(self, stage: str, reason: str) -> None:
        """Emit a retry event when a logger is attached."""

        if self.run_logger is not None:
            self.run_logger.log_stage_retry(stage, reason)
