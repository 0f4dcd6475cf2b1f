"""LLM-facing abstractions for translation.

This package defines the prompt library, the OpenAI chat client, reply
parsing, and the translator that ties them together.
"""

from .openai_client import OpenAIChatClient, OpenAIProviderError
from .prompts import PromptLibrary
from .reply_parser import ModelReplyError, parse_model_reply
from .translator import OpenAITranslator, Translator

__all__ = [
    "ModelReplyError",
    "OpenAIChatClient",
    "OpenAIProviderError",
    "OpenAITranslator",
    "PromptLibrary",
    "Translator",
    "parse_model_reply",
]
