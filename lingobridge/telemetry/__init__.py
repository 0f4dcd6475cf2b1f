"""Telemetry and observability helpers."""

from .logger import RequestLogger

__all__ = ["RequestLogger"]
