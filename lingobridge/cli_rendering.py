"""CLI output and error rendering helpers."""

from __future__ import annotations

import json
from typing import NoReturn

import typer

from .errors import TranslationStageError
from .models.datatypes import TranslationResult


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, TranslationStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.upstream_detail:
            typer.secho(f"Details: {exc.upstream_detail}", err=True)
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_translation(result: TranslationResult, as_json: bool = False) -> None:
    """Print a translation result as labelled lines or as the response JSON body."""

    if as_json:
        typer.echo(json.dumps(result.as_payload(), ensure_ascii=False, indent=2))
        return

    typer.echo(f"Translation: {result.translation}")
    if result.phonetic:
        typer.echo(f"Phonetic: {result.phonetic}")
    if result.notes:
        typer.echo(f"Notes: {result.notes}")
    source_label = result.detected_source or result.source_lang
    typer.echo(f"Languages: {source_label} -> {result.target_lang}")


def echo_normalized(text: str, phonetic: str) -> None:
    """Print the output of an offline particle normalization pass."""

    typer.echo(f"Text: {text}")
    if phonetic:
        typer.echo(f"Phonetic: {phonetic}")
