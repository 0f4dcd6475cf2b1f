"""Shared pytest fixtures for the Lingobridge test suite."""

from __future__ import annotations

import os

import pytest


_ISOLATED_ENV_PREFIXES = ("LINGOBRIDGE_", "OPENAI_")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop endpoint-related environment variables so tests see documented defaults."""

    for name in list(os.environ):
        if name.startswith(_ISOLATED_ENV_PREFIXES) or name == "APP_VERSION":
            monkeypatch.delenv(name, raising=False)
