"""JSON response and CORS header helpers for the serverless handler."""

from __future__ import annotations

import json
from typing import Any, Mapping


ALLOWED_METHODS = "POST, OPTIONS"


def get_cors_headers(allow_origin: str = "*") -> dict[str, str]:
    """Return CORS headers for browser clients."""

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
    }


def json_response(
    status_code: int,
    payload: Mapping[str, Any],
    *,
    app_version: str,
    allow_origin: str = "*",
    extra_headers: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Build a serverless response with a UTF-8 JSON body and CORS headers."""

    headers = get_cors_headers(allow_origin)
    headers.update(
        {
            "Content-Type": "application/json; charset=utf-8",
            "Cache-Control": "no-store",
            "x-app-version": app_version,
        }
    )
    if extra_headers:
        headers.update(extra_headers)
    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json.dumps(dict(payload), ensure_ascii=False),
    }


def error_payload(
    error: str,
    *,
    app_version: str,
    details: str | None = None,
) -> dict[str, Any]:
    """Return the error body shape shared by all failure responses."""

    payload: dict[str, Any] = {"error": error}
    if details:
        payload["details"] = details
    payload["_meta"] = {"version": app_version}
    return payload
