"""Command-line interface for Lingobridge.

Responsibilities:
- Expose user-facing commands for translation, offline particle normalization,
  credential management, and a local development server.
- Convert CLI arguments into `EndpointConfig` and runtime sources.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_normalized, echo_translation, exit_with_command_error
from .config import ConfigLoader, EndpointConfig, RuntimeConfigSources
from .credentials import create_credential_store
from .endpoint.dev_server import create_server
from .endpoint.handler import build_translation_request
from .errors import TranslationStageError
from .llm.translator import OpenAITranslator
from .parsing import normalize_optional_string, parse_politeness_mode, parse_speaker_gender
from .telemetry.logger import RequestLogger
from .text.particles import normalize_particles

app = typer.Typer(
    name="lingobridge",
    no_args_is_help=True,
    help="Lingobridge translation CLI.",
)


def _load_config(config_path: Path | None) -> EndpointConfig:
    """Load config from YAML when requested, else from the environment."""

    try:
        if config_path is not None:
            return ConfigLoader.from_yaml(config_path)
        return ConfigLoader.from_env()
    except FileNotFoundError as exc:
        raise TranslationStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise TranslationStageError(
            stage="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config values or environment variables and rerun.",
        ) from exc


def _runtime_sources(
    config: EndpointConfig,
    model: str | None,
    api_key: str | None,
) -> RuntimeConfigSources:
    """Assemble CLI, secure-storage, and environment runtime sources."""

    cli_values: dict[str, str] = {}
    normalized_model = normalize_optional_string(model)
    if normalized_model is not None:
        cli_values["model"] = normalized_model
    normalized_api_key = normalize_optional_string(api_key)
    if normalized_api_key is not None:
        cli_values["api_key"] = normalized_api_key

    secure_values: dict[str, str] = {}
    if "api_key" not in cli_values:
        stored_api_key = create_credential_store().get_api_key()
        if stored_api_key is not None:
            secure_values["api_key"] = stored_api_key

    return RuntimeConfigSources(
        cli=cli_values,
        secure=secure_values,
        env=config.runtime_sources.env,
    )


@app.command("translate")
def translate_command(
    text: Annotated[str, typer.Argument(help="Text to translate.")],
    source: Annotated[
        str | None, typer.Option("--source", "-s", help="Source language (default: auto).")
    ] = None,
    target: Annotated[
        str | None, typer.Option("--target", "-t", help="Target language (default: Thai).")
    ] = None,
    politeness: Annotated[
        str | None,
        typer.Option("--politeness", "-p", help="Thai register: `polite` or `casual`."),
    ] = None,
    gender: Annotated[
        str | None,
        typer.Option("--gender", "-g", help="Speaker gender for Thai particles."),
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", help="Optional YAML config file.")
    ] = None,
    model: Annotated[str | None, typer.Option("--model", help="Chat model override.")] = None,
    api_key: Annotated[
        str | None, typer.Option("--api-key", help="OpenAI API key for this run only.")
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the response JSON body.")
    ] = False,
) -> None:
    """Translate text through the configured chat model."""

    try:
        config = _load_config(config_file)
        request = build_translation_request(
            {
                "text": text,
                "sourceLang": source,
                "targetLang": target,
                "thaiTone": politeness,
                "speaker": gender,
            },
            config,
        )
        translator = OpenAITranslator.from_config(
            config,
            sources=_runtime_sources(config, model, api_key),
            run_logger=RequestLogger(),
        )
        result = translator.translate(request)
    except Exception as exc:
        exit_with_command_error("translate", exc)

    echo_translation(result, as_json=as_json)


@app.command("normalize")
def normalize_command(
    text: Annotated[str, typer.Argument(help="Thai text to normalize.")],
    phonetic: Annotated[
        str, typer.Option("--phonetic", help="Romanized transcription to normalize.")
    ] = "",
    politeness: Annotated[
        str, typer.Option("--politeness", "-p", help="Thai register: `polite` or `casual`.")
    ] = "casual",
    gender: Annotated[
        str, typer.Option("--gender", "-g", help="Speaker gender for Thai particles.")
    ] = "male",
) -> None:
    """Apply Thai particle normalization offline, without calling a model."""

    try:
        mode = parse_politeness_mode(politeness, field_name="--politeness")
        speaker_gender = parse_speaker_gender(gender, field_name="--gender")
    except ValueError as exc:
        exit_with_command_error(
            "normalize",
            TranslationStageError(stage="request", detail=str(exc), status_code=400),
        )

    normalized_text, normalized_phonetic = normalize_particles(
        text, phonetic, mode, speaker_gender
    )
    echo_normalized(normalized_text, normalized_phonetic)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage the securely stored OpenAI API key."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            TranslationStageError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = normalize_optional_string(
            typer.prompt(
                "OpenAI API key (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                TranslationStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                TranslationStageError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        removed = credential_store.clear_api_key()
        if removed:
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    has_stored_key = credential_store.get_api_key() is not None
    status = "present" if has_stored_key else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored OpenAI API key: {status}")


@app.command("serve")
def serve_command(
    host: Annotated[str, typer.Option("--host", help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Bind port.")] = 8888,
    config_file: Annotated[
        Path | None, typer.Option("--config", help="Optional YAML config file.")
    ] = None,
) -> None:
    """Serve the translate endpoint locally for frontend development."""

    try:
        config = _load_config(config_file)
        server = create_server(config, host=host, port=port, run_logger=RequestLogger())
    except Exception as exc:
        exit_with_command_error("serve", exc)

    typer.echo(f"Serving http://{host}:{port}/translate (Ctrl+C to stop)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        typer.echo("Shutting down.")
    finally:
        server.server_close()


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
