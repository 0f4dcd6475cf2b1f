"""Model reply parsing and repair.

Responsibilities:
- Extract the JSON object embedded in an assistant reply.
- Tolerate code fences and surrounding prose that models add despite instructions.
"""

from __future__ import annotations

import json
import re
from typing import Any


_CODE_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_DECODER = json.JSONDecoder()


class ModelReplyError(ValueError):
    """Raised when an assistant reply does not contain a JSON object."""

    def __init__(self, message: str, *, content: str) -> None:
        """Initialize the error with the raw reply content for diagnostics."""

        super().__init__(message)
        self.content = content


def _candidate_texts(content: str) -> list[str]:
    """Return reply fragments to try, fenced blocks first."""

    candidates = [match.strip() for match in _CODE_FENCE_PATTERN.findall(content)]
    candidates.append(content.strip())
    return [candidate for candidate in candidates if candidate]


def _first_embedded_object(text: str) -> dict[str, Any] | None:
    """Decode the first balanced JSON object that appears in `text`."""

    start = text.find("{")
    while start != -1:
        try:
            value, _ = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def parse_model_reply(content: str | None) -> dict[str, Any]:
    """Return the JSON object carried by an assistant reply.

    Raises:
        ModelReplyError: If no JSON object can be recovered.
    """

    raw = content or ""
    candidates = _candidate_texts(raw)
    if not candidates:
        raise ModelReplyError("Model reply is empty.", content=raw)

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            value = _first_embedded_object(candidate)
        if isinstance(value, dict):
            return value

    raise ModelReplyError("Model did not return a JSON object.", content=raw)


def reply_field(payload: dict[str, Any], key: str, default: str = "") -> str:
    """Read a reply field as a stripped string, falling back to `default`."""

    value = payload.get(key)
    if value is None:
        return default
    if isinstance(value, list | dict):
        text = json.dumps(value, ensure_ascii=False)
    else:
        text = str(value).strip()
    return text or default
