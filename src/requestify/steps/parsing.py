"""
Response parsing steps.

- json_step: raw response -> parsed JSON body
- json_format_step: raw response -> ResponseEnvelope with the JSON body
- content_step: raw response -> ResponseEnvelope, body parsed by Content-Type
"""

from __future__ import annotations

from typing import Any

import httpx

from ..constants import BINARY_MARKERS, CONTENT_TYPE, JSON_MARKERS, TEXT_MARKERS
from ..contracts import ContentTypeError, MissingContentTypeError, ResponseEnvelope
from .base import TransformStep


def _headers(response: httpx.Response) -> dict:
    return {key.lower(): value for key, value in response.headers.items()}


def parse_body(response: httpx.Response) -> Any:
    """
    Parse a response body according to its Content-Type.

    Raises:
        MissingContentTypeError: No Content-Type header
        ContentTypeError: Content-Type is not JSON, text or binary
    """
    content_type = response.headers.get(CONTENT_TYPE)
    if not content_type:
        raise MissingContentTypeError("Response has no Content-Type header")

    lowered = content_type.lower()
    if any(marker in lowered for marker in JSON_MARKERS):
        return response.json()
    if any(marker in lowered for marker in TEXT_MARKERS):
        return response.text
    if any(marker in lowered for marker in BINARY_MARKERS):
        return response.content
    raise ContentTypeError(f"Unsupported Content-Type: {content_type}")


def _to_json(response: httpx.Response) -> Any:
    return response.json()


def _to_envelope(response: httpx.Response) -> ResponseEnvelope:
    return ResponseEnvelope(
        data=response.json(),
        status=response.status_code,
        headers=_headers(response),
        ok=response.is_success,
    )


def _to_content_envelope(response: httpx.Response) -> ResponseEnvelope:
    return ResponseEnvelope(
        data=parse_body(response),
        status=response.status_code,
        headers=_headers(response),
        ok=response.is_success,
    )


def json_step(name: str = "json") -> TransformStep:
    """Step that replaces the raw response with its parsed JSON body."""
    return TransformStep(name=name, after=_to_json)


def json_format_step(name: str = "json_format") -> TransformStep:
    """Step that wraps the JSON body with status and headers."""
    return TransformStep(name=name, after=_to_envelope)


def content_step(name: str = "content") -> TransformStep:
    """Step that wraps the body, parsed by Content-Type, with status and headers."""
    return TransformStep(name=name, after=_to_content_envelope)
