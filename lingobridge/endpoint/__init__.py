"""Serverless HTTP surface for the translation endpoint."""

from .handler import build_translation_request, handle_event, handler

__all__ = ["build_translation_request", "handle_event", "handler"]
