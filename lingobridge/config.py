"""Configuration model and loaders for Lingobridge.

Responsibilities:
- Define endpoint configuration as a typed dataclass.
- Provide deterministic precedence resolution for provider runtime settings.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `EndpointConfig`: normalized settings for the translation endpoint.
- `ProviderRuntimeConfig`: resolved provider/model runtime values.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `EndpointConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from . import __version__
from .models.datatypes import PolitenessMode, SpeakerGender
from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_politeness_mode,
    parse_required_boolean,
    parse_speaker_gender,
)


_DEFAULT_MODEL = "gpt-4o"
_DEFAULT_BASE_URL = "https://api.openai.com/v1"
_DEFAULT_TEMPERATURE = 0.2
_DEFAULT_TIMEOUT_SECONDS = 60.0
_DEFAULT_MAX_DETAIL_CHARS = 2000
_SUPPORTED_PROVIDER_IDS = frozenset({"openai"})


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved provider and model identifiers for one request.

    Attributes:
        provider: Provider identifier.
        model: Chat model identifier.
        base_url: Provider REST base URL.
        api_key: Optional provider API key (resolved but never echoed in responses).
    """

    provider: str
    model: str
    base_url: str
    api_key: str | None = None

    def as_response_metadata(self) -> dict[str, str]:
        """Return non-secret runtime metadata safe to include in responses."""

        return {"provider": self.provider, "model": self.model}


@dataclass(slots=True)
class EndpointConfig:
    """Runtime configuration for the translation endpoint.

    Attributes:
        provider: Provider identifier.
        model: Chat model identifier.
        base_url: Provider REST base URL.
        api_key: Optional API key for provider calls.
        temperature: Sampling temperature for translation calls.
        timeout_seconds: HTTP timeout for provider calls.
        app_version: Version label returned in `_meta` and `x-app-version`.
        allow_origin: Value of `Access-Control-Allow-Origin`.
        source_language: Default source language when the request omits one.
        target_language: Default target language when the request omits one.
        politeness_mode: Default Thai register.
        speaker_gender: Default speaker gender for Thai particles.
        prompt_particles: Whether the prompt also instructs the model about particles.
        max_detail_chars: Cap for upstream error details echoed in responses.
        runtime_sources: Optional runtime source overrides injected by CLI.
    """

    provider: str = "openai"
    model: str = _DEFAULT_MODEL
    base_url: str = _DEFAULT_BASE_URL
    api_key: str | None = None
    temperature: float = _DEFAULT_TEMPERATURE
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    app_version: str = __version__
    allow_origin: str = "*"
    source_language: str = "auto"
    target_language: str = "Thai"
    politeness_mode: PolitenessMode = PolitenessMode.CASUAL
    speaker_gender: SpeakerGender = SpeakerGender.MALE
    prompt_particles: bool = True
    max_detail_chars: int = _DEFAULT_MAX_DETAIL_CHARS
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)

    def validate(self) -> None:
        """Validate configuration values before serving requests."""

        self._validate_provider_id(self.provider, "provider")
        self._require_non_empty(self.model, "model")
        self._require_non_empty(self.base_url, "base_url")
        self._require_non_empty(self.app_version, "app_version")
        self._require_non_empty(self.allow_origin, "allow_origin")
        self._require_non_empty(self.source_language, "source_language")
        self._require_non_empty(self.target_language, "target_language")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("`temperature` must be between 0 and 2.")
        if self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be a positive number.")
        if self.max_detail_chars <= 0:
            raise ValueError("`max_detail_chars` must be a positive integer.")

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve provider settings with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field default.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        provider = self._resolve_runtime_value(
            key="provider",
            env_key="LINGOBRIDGE_PROVIDER",
            default_value=self.provider,
            sources=resolved_sources,
        )
        model = self._resolve_runtime_value(
            key="model",
            env_key="LINGOBRIDGE_MODEL",
            default_value=self.model,
            sources=resolved_sources,
        )
        base_url = self._resolve_runtime_value(
            key="base_url",
            env_key="OPENAI_BASE_URL",
            default_value=self.base_url,
            sources=resolved_sources,
        )
        api_key = self._resolve_optional_runtime_value(
            key="api_key",
            env_key="OPENAI_API_KEY",
            default_value=self.api_key,
            sources=resolved_sources,
        )

        resolved = ProviderRuntimeConfig(
            provider=provider,
            model=model,
            base_url=base_url,
            api_key=api_key,
        )
        self._validate_provider_id(resolved.provider, "provider")
        self._require_non_empty(resolved.model, "model")
        return resolved

    def _resolve_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str:
        """Resolve a runtime value from sources in deterministic precedence order."""

        resolved = self._resolve_optional_runtime_value(key, env_key, default_value, sources)
        if resolved is None:
            raise ValueError(
                f"`{key}` could not be resolved from CLI, secure storage, env, or defaults."
            )
        return resolved

    def _resolve_optional_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in deterministic order."""

        cli_value = self._normalized_lookup(sources.cli, key)
        if cli_value is not None:
            return cli_value

        secure_value = self._normalized_lookup(sources.secure, key)
        if secure_value is not None:
            return secure_value

        env_value = self._normalized_lookup(sources.env, env_key)
        if env_value is not None:
            return env_value

        return normalize_optional_string(default_value)

    @staticmethod
    def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
        """Return a stripped mapping value for a key or `None` when missing/blank."""

        if key not in mapping:
            return None
        return normalize_optional_string(mapping.get(key))

    @staticmethod
    def _validate_provider_id(provider_id: str, field_name: str) -> None:
        """Validate provider identifiers against currently supported providers."""

        if provider_id not in _SUPPORTED_PROVIDER_IDS:
            supported = ", ".join(sorted(_SUPPORTED_PROVIDER_IDS))
            raise ValueError(
                f"Unsupported `{field_name}` value `{provider_id}`; supported: {supported}."
            )

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `EndpointConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "provider",
            "model",
            "base_url",
            "api_key",
            "temperature",
            "timeout_seconds",
            "app_version",
            "allow_origin",
            "source_language",
            "target_language",
            "politeness_mode",
            "speaker_gender",
            "prompt_particles",
            "max_detail_chars",
        }
    )
    _RUNTIME_ENV_KEYS = frozenset(
        {
            "LINGOBRIDGE_PROVIDER",
            "LINGOBRIDGE_MODEL",
            "OPENAI_BASE_URL",
            "OPENAI_API_KEY",
        }
    )

    @staticmethod
    def from_yaml(path: Path, env: Mapping[str, str] | None = None) -> EndpointConfig:
        """Create a validated config from a YAML file.

        Runtime environment keys are still captured so `OPENAI_API_KEY` works
        without being written into the file.
        """

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        env_map: Mapping[str, str] = os.environ if env is None else env

        return ConfigLoader._build_config_from_mapping(
            payload,
            source_label=f"YAML `{path}`",
            runtime_env=ConfigLoader._runtime_env(env_map),
        )

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> EndpointConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        provider = ConfigLoader._optional_env_string(env_map, "LINGOBRIDGE_PROVIDER") or "openai"
        model = ConfigLoader._optional_env_string(env_map, "LINGOBRIDGE_MODEL") or _DEFAULT_MODEL
        base_url = (
            ConfigLoader._optional_env_string(env_map, "OPENAI_BASE_URL") or _DEFAULT_BASE_URL
        )
        api_key = ConfigLoader._optional_env_string(env_map, "OPENAI_API_KEY")
        temperature = ConfigLoader._optional_env_float(env_map, "LINGOBRIDGE_TEMPERATURE")
        timeout_seconds = ConfigLoader._optional_env_float(
            env_map, "LINGOBRIDGE_TIMEOUT_SECONDS"
        )
        app_version = ConfigLoader._optional_env_string(env_map, "APP_VERSION") or __version__
        allow_origin = ConfigLoader._optional_env_string(env_map, "LINGOBRIDGE_ALLOW_ORIGIN") or "*"
        source_language = (
            ConfigLoader._optional_env_string(env_map, "LINGOBRIDGE_SOURCE_LANG") or "auto"
        )
        target_language = (
            ConfigLoader._optional_env_string(env_map, "LINGOBRIDGE_TARGET_LANG") or "Thai"
        )
        politeness_mode = parse_politeness_mode(
            env_map.get("LINGOBRIDGE_POLITENESS"),
            field_name="LINGOBRIDGE_POLITENESS",
        )
        speaker_gender = parse_speaker_gender(
            env_map.get("LINGOBRIDGE_GENDER"),
            field_name="LINGOBRIDGE_GENDER",
        )
        prompt_particles = ConfigLoader._optional_env_boolean(
            env_map, "LINGOBRIDGE_PROMPT_PARTICLES"
        )
        max_detail_chars = ConfigLoader._optional_env_positive_int(
            env_map, "LINGOBRIDGE_MAX_DETAIL_CHARS"
        )

        config = EndpointConfig(
            provider=provider,
            model=model,
            base_url=base_url,
            api_key=api_key,
            temperature=_DEFAULT_TEMPERATURE if temperature is None else temperature,
            timeout_seconds=(
                _DEFAULT_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
            ),
            app_version=app_version,
            allow_origin=allow_origin,
            source_language=source_language,
            target_language=target_language,
            politeness_mode=politeness_mode,
            speaker_gender=speaker_gender,
            prompt_particles=True if prompt_particles is None else prompt_particles,
            max_detail_chars=max_detail_chars or _DEFAULT_MAX_DETAIL_CHARS,
            runtime_sources=RuntimeConfigSources(env=ConfigLoader._runtime_env(env_map)),
        )
        config.validate()
        return config

    @staticmethod
    def _runtime_env(env: Mapping[str, str]) -> dict[str, str]:
        """Capture non-blank runtime environment keys for precedence resolution."""

        return {
            key: value
            for key, value in env.items()
            if key in ConfigLoader._RUNTIME_ENV_KEYS
            and normalize_optional_string(value) is not None
        }

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any],
        source_label: str,
        runtime_env: Mapping[str, str] | None = None,
    ) -> EndpointConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_yaml_keys(payload, source_label)

        string_value = ConfigLoader._optional_non_empty_string
        try:
            politeness_mode = parse_politeness_mode(
                payload.get("politeness_mode"), field_name="politeness_mode"
            )
            speaker_gender = parse_speaker_gender(
                payload.get("speaker_gender"), field_name="speaker_gender"
            )
        except ValueError as exc:
            raise ValueError(f"{source_label} {exc}") from exc

        config = EndpointConfig(
            provider=string_value(payload, "provider") or "openai",
            model=string_value(payload, "model") or _DEFAULT_MODEL,
            base_url=string_value(payload, "base_url") or _DEFAULT_BASE_URL,
            api_key=string_value(payload, "api_key"),
            temperature=ConfigLoader._optional_float(
                payload, "temperature", source_label, default=_DEFAULT_TEMPERATURE
            ),
            timeout_seconds=ConfigLoader._optional_float(
                payload, "timeout_seconds", source_label, default=_DEFAULT_TIMEOUT_SECONDS
            ),
            app_version=string_value(payload, "app_version") or __version__,
            allow_origin=string_value(payload, "allow_origin") or "*",
            source_language=string_value(payload, "source_language") or "auto",
            target_language=string_value(payload, "target_language") or "Thai",
            politeness_mode=politeness_mode,
            speaker_gender=speaker_gender,
            prompt_particles=ConfigLoader._optional_boolean(
                payload, "prompt_particles", source_label, default=True
            ),
            max_detail_chars=ConfigLoader._optional_positive_int(
                payload, "max_detail_chars", source_label, default=_DEFAULT_MAX_DETAIL_CHARS
            ),
            runtime_sources=RuntimeConfigSources(env=dict(runtime_env or {})),
        )
        config.validate()
        return config

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Validate supported YAML keys."""

        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS)
        )
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc

        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_float(
        payload: Mapping[str, Any], key: str, source_label: str, default: float
    ) -> float:
        """Read and validate a numeric payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a number.")
        if isinstance(raw_value, int | float):
            return float(raw_value)

        normalized = normalize_optional_string(raw_value)
        if normalized is None:
            return default
        try:
            return float(normalized)
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a number.") from exc

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_positive_int(env: Mapping[str, str], key: str) -> int | None:
        """Read an optional positive integer from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        try:
            parsed = int(raw_value)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a positive integer.") from exc
        if parsed <= 0:
            raise ValueError(f"Environment variable `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_env_float(env: Mapping[str, str], key: str) -> float | None:
        """Read an optional number from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        try:
            return float(raw_value)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a number.") from exc

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        return parse_required_boolean(raw_value, key)
