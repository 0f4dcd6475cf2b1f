"""Serverless translation endpoint.

Responsibilities:
- Route `OPTIONS` preflight and reject non-`POST` methods.
- Parse and validate the request payload into a `TranslationRequest`.
- Run the translator and convert stage errors into JSON error responses.

Key public functions:
- `handler`: serverless entry point reading configuration from the environment.
- `handle_event`: the same flow with injected configuration and translator factory.
- `build_translation_request`: boundary parsing of raw payload fields.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Callable, Mapping

from .. import __version__
from ..config import ConfigLoader, EndpointConfig
from ..errors import TranslationStageError
from ..models.datatypes import TranslationRequest
from ..parsing import (
    normalize_optional_string,
    parse_politeness_mode,
    parse_speaker_gender,
)
from ..telemetry.logger import RequestLogger
from ..llm.translator import OpenAITranslator, Translator
from .responses import ALLOWED_METHODS, error_payload, json_response


SOURCE_KEYS = ("sourceLang", "src", "source", "from")
TARGET_KEYS = ("targetLang", "tgt", "target", "to")
GENDER_KEYS = ("speaker", "gender", "speakerGender")
POLITENESS_KEYS = ("thaiTone", "politenessMode", "politeness", "tone")

TranslatorFactory = Callable[[EndpointConfig, RequestLogger | None], Translator]

_run_logger: RequestLogger | None = None


def _default_translator_factory(
    config: EndpointConfig, run_logger: RequestLogger | None
) -> Translator:
    """Build the OpenAI translator for one request."""

    return OpenAITranslator.from_config(config, run_logger=run_logger)


def _default_run_logger() -> RequestLogger:
    """Return the process-wide request logger, creating it on first use."""

    global _run_logger
    if _run_logger is None:
        _run_logger = RequestLogger()
    return _run_logger


def _first_present(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    """Return the first non-blank value among alias keys."""

    for key in keys:
        value = payload.get(key)
        if isinstance(value, bool):
            return value
        if normalize_optional_string(value) is not None:
            return value
    return None


def _decode_body(event: Mapping[str, Any]) -> Mapping[str, Any]:
    """Decode the event body into a JSON object.

    Raises:
        TranslationStageError: If the body is not a JSON object.
    """

    body = event.get("body")
    if isinstance(body, Mapping):
        return body
    if body is None or body == "":
        return {}

    invalid_body = TranslationStageError(
        stage="request",
        detail="Invalid JSON body",
        hint="Send a JSON object such as {\"text\": \"...\", \"targetLang\": \"Thai\"}.",
        status_code=400,
    )
    try:
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        payload = json.loads(body)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, TypeError) as exc:
        raise invalid_body from exc
    if not isinstance(payload, Mapping):
        raise invalid_body
    return payload


def build_translation_request(
    payload: Mapping[str, Any],
    config: EndpointConfig,
) -> TranslationRequest:
    """Validate raw payload fields and resolve them into a `TranslationRequest`.

    Raises:
        TranslationStageError: With status 400 for missing or invalid fields.
    """

    text = normalize_optional_string(payload.get("text"))
    if text is None:
        raise TranslationStageError(
            stage="request",
            detail="Missing 'text'",
            hint="Include a non-empty `text` field.",
            status_code=400,
        )

    source_language = (
        normalize_optional_string(_first_present(payload, SOURCE_KEYS))
        or config.source_language
    )
    target_language = normalize_optional_string(
        _first_present(payload, TARGET_KEYS)
    ) or normalize_optional_string(config.target_language)
    if target_language is None:
        raise TranslationStageError(
            stage="request",
            detail="Missing 'targetLang'",
            hint="Include `targetLang` or configure `LINGOBRIDGE_TARGET_LANG`.",
            status_code=400,
        )

    try:
        politeness_mode = parse_politeness_mode(
            _first_present(payload, POLITENESS_KEYS),
            default=config.politeness_mode,
            field_name="thaiTone",
        )
        speaker_gender = parse_speaker_gender(
            _first_present(payload, GENDER_KEYS),
            default=config.speaker_gender,
            field_name="speaker",
        )
    except ValueError as exc:
        raise TranslationStageError(
            stage="request",
            detail=str(exc),
            status_code=400,
        ) from exc

    return TranslationRequest(
        text=text,
        source_language=source_language,
        target_language=target_language,
        politeness_mode=politeness_mode,
        speaker_gender=speaker_gender,
    )


def handle_event(
    event: Mapping[str, Any],
    config: EndpointConfig,
    translator_factory: TranslatorFactory = _default_translator_factory,
    run_logger: RequestLogger | None = None,
) -> dict[str, Any]:
    """Handle one serverless event with explicit dependencies."""

    version = config.app_version

    def respond(
        status_code: int,
        payload: Mapping[str, Any],
        extra_headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        return json_response(
            status_code,
            payload,
            app_version=version,
            allow_origin=config.allow_origin,
            extra_headers=extra_headers,
        )

    method = str(event.get("httpMethod") or "").upper()
    if method == "OPTIONS":
        return respond(200, {"ok": True, "_meta": {"version": version}})
    if method != "POST":
        return respond(
            405,
            error_payload("Method Not Allowed", app_version=version),
            extra_headers={"Allow": ALLOWED_METHODS},
        )

    stage = "request"
    try:
        request = build_translation_request(_decode_body(event), config)
        stage = "translate"
        if run_logger is not None:
            run_logger.log_stage_start(stage, target=request.target_language)
        translator = translator_factory(config, run_logger)
        result = translator.translate(request)
    except TranslationStageError as exc:
        if run_logger is not None:
            run_logger.log_stage_failure(exc.stage, type(exc).__name__)
        return respond(
            exc.status_code,
            error_payload(exc.detail, app_version=version, details=exc.upstream_detail),
        )
    except Exception as exc:
        if run_logger is not None:
            run_logger.log_stage_failure(stage, type(exc).__name__)
        return respond(
            500,
            error_payload(
                "Function crashed",
                app_version=version,
                details=str(exc)[: config.max_detail_chars],
            ),
        )

    if run_logger is not None:
        run_logger.log_stage_complete(stage, retried=result.retried)

    body: dict[str, Any] = result.as_payload()
    body["_meta"] = {
        "version": version,
        "provider": result.provider,
        "model": result.model,
        "politeness": request.politeness_mode.value,
        "gender": request.speaker_gender.value,
        "retried": result.retried,
    }
    return respond(200, body)


def handler(event: Mapping[str, Any], context: object = None) -> dict[str, Any]:
    """Serverless entry point for `/.netlify/functions/translate`-style routes."""

    try:
        config = ConfigLoader.from_env()
    except ValueError as exc:
        return json_response(
            500,
            error_payload(
                "Invalid function configuration",
                app_version=__version__,
                details=str(exc),
            ),
            app_version=__version__,
        )
    return handle_event(event, config, run_logger=_default_run_logger())
