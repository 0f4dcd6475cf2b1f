"""Module entrypoint for running Lingobridge as ``python -m lingobridge``."""

from __future__ import annotations

from lingobridge.cli import main


if __name__ == "__main__":
    main()
