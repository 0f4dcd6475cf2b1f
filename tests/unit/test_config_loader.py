"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from lingobridge import __version__
from lingobridge.config import ConfigLoader, EndpointConfig, RuntimeConfigSources
from lingobridge.models.datatypes import PolitenessMode, SpeakerGender


def test_config_loader_from_env_uses_defaults_for_empty_environment() -> None:
    """An empty environment should yield the documented defaults."""

    config = ConfigLoader.from_env({})

    assert config.provider == "openai"
    assert config.model == "gpt-4o"
    assert config.base_url == "https://api.openai.com/v1"
    assert config.api_key is None
    assert config.temperature == 0.2
    assert config.timeout_seconds == 60.0
    assert config.app_version == __version__
    assert config.allow_origin == "*"
    assert config.source_language == "auto"
    assert config.target_language == "Thai"
    assert config.politeness_mode is PolitenessMode.CASUAL
    assert config.speaker_gender is SpeakerGender.MALE
    assert config.prompt_particles is True
    assert config.max_detail_chars == 2000
    assert dict(config.runtime_sources.env) == {}


def test_config_loader_from_env_loads_values_and_normalizes_blanks() -> None:
    """Environment loader should parse typed keys and ignore blank strings."""

    env = {
        "LINGOBRIDGE_MODEL": " gpt-4.1-mini ",
        "OPENAI_API_KEY": " env-key ",
        "OPENAI_BASE_URL": "   ",
        "LINGOBRIDGE_TEMPERATURE": "0",
        "LINGOBRIDGE_TIMEOUT_SECONDS": "12.5",
        "APP_VERSION": "v12-test",
        "LINGOBRIDGE_ALLOW_ORIGIN": "https://app.example.com",
        "LINGOBRIDGE_TARGET_LANG": "Japanese",
        "LINGOBRIDGE_POLITENESS": "polite",
        "LINGOBRIDGE_GENDER": "f",
        "LINGOBRIDGE_PROMPT_PARTICLES": "no",
        "LINGOBRIDGE_MAX_DETAIL_CHARS": "500",
        "UNRELATED": "ignored",
    }

    config = ConfigLoader.from_env(env)

    assert config.model == "gpt-4.1-mini"
    assert config.api_key == "env-key"
    assert config.base_url == "https://api.openai.com/v1"
    assert config.temperature == 0.0
    assert config.timeout_seconds == 12.5
    assert config.app_version == "v12-test"
    assert config.allow_origin == "https://app.example.com"
    assert config.target_language == "Japanese"
    assert config.politeness_mode is PolitenessMode.POLITE
    assert config.speaker_gender is SpeakerGender.FEMALE
    assert config.prompt_particles is False
    assert config.max_detail_chars == 500
    assert dict(config.runtime_sources.env) == {
        "LINGOBRIDGE_MODEL": " gpt-4.1-mini ",
        "OPENAI_API_KEY": " env-key ",
    }


@pytest.mark.parametrize(
    ("env", "message"),
    [
        ({"LINGOBRIDGE_TEMPERATURE": "warm"}, "`LINGOBRIDGE_TEMPERATURE` must be a number"),
        ({"LINGOBRIDGE_TEMPERATURE": "3"}, "`temperature` must be between 0 and 2"),
        ({"LINGOBRIDGE_MAX_DETAIL_CHARS": "0"}, "must be a positive integer"),
        ({"LINGOBRIDGE_PROMPT_PARTICLES": "maybe"}, "must be a boolean value"),
        ({"LINGOBRIDGE_GENDER": "robot"}, "`LINGOBRIDGE_GENDER` must be `male` or `female`"),
        ({"LINGOBRIDGE_PROVIDER": "acme"}, "Unsupported `provider` value `acme`"),
    ],
)
def test_config_loader_from_env_rejects_invalid_values(
    env: dict[str, str], message: str
) -> None:
    """Invalid environment values should fail with actionable messages."""

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_env(env)


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse valid payloads and normalize typed/blank values."""

    config_path = tmp_path / "lingobridge.yml"
    config_path.write_text(
        """
model: " gpt-4.1-mini "
temperature: " 0.5 "
timeout_seconds: 30
allow_origin: " https://app.example.com "
source_language: " English "
target_language: " Thai "
politeness_mode: " formal "
speaker_gender: " woman "
prompt_particles: " yes "
max_detail_chars: " 1200 "
api_key: ""
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path, env={"OPENAI_API_KEY": "env-key"})

    assert config.model == "gpt-4.1-mini"
    assert config.temperature == 0.5
    assert config.timeout_seconds == 30.0
    assert config.allow_origin == "https://app.example.com"
    assert config.source_language == "English"
    assert config.target_language == "Thai"
    assert config.politeness_mode is PolitenessMode.POLITE
    assert config.speaker_gender is SpeakerGender.FEMALE
    assert config.prompt_particles is True
    assert config.max_detail_chars == 1200
    assert config.api_key is None
    assert config.resolved_provider_runtime().api_key == "env-key"


def test_config_loader_from_yaml_rejects_unknown_keys_and_bad_values(tmp_path: Path) -> None:
    """YAML loader should fail clearly on unsupported keys and invalid typed values."""

    unknown_path = tmp_path / "unknown.yml"
    unknown_path.write_text("model: gpt-4o\nunknown_field: x\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"unsupported key\(s\): unknown_field"):
        ConfigLoader.from_yaml(unknown_path, env={})

    invalid_bool_path = tmp_path / "invalid-bool.yml"
    invalid_bool_path.write_text("prompt_particles: maybe\n", encoding="utf-8")
    with pytest.raises(ValueError, match="`prompt_particles` must be a boolean"):
        ConfigLoader.from_yaml(invalid_bool_path, env={})

    invalid_int_path = tmp_path / "invalid-int.yml"
    invalid_int_path.write_text("max_detail_chars: x\n", encoding="utf-8")
    with pytest.raises(ValueError, match="`max_detail_chars` must be a positive integer"):
        ConfigLoader.from_yaml(invalid_int_path, env={})

    list_root_path = tmp_path / "list-root.yml"
    list_root_path.write_text("- model\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must contain a top-level mapping"):
        ConfigLoader.from_yaml(list_root_path, env={})


def test_resolved_provider_runtime_applies_cli_secure_env_precedence() -> None:
    """Runtime resolution should prefer CLI, then secure storage, then env, then defaults."""

    config = EndpointConfig(model="gpt-4o", api_key="config-key")
    sources = RuntimeConfigSources(
        cli={"model": " cli-model "},
        secure={"api_key": "secure-key"},
        env={"OPENAI_API_KEY": "env-key", "LINGOBRIDGE_MODEL": "env-model"},
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.model == "cli-model"
    assert runtime.api_key == "secure-key"
    assert runtime.base_url == "https://api.openai.com/v1"
    assert runtime.as_response_metadata() == {"provider": "openai", "model": "cli-model"}

    env_only = config.resolved_provider_runtime(
        RuntimeConfigSources(env={"OPENAI_API_KEY": "env-key"})
    )
    assert env_only.model == "gpt-4o"
    assert env_only.api_key == "env-key"

    defaults_only = config.resolved_provider_runtime(RuntimeConfigSources())
    assert defaults_only.api_key == "config-key"
