"""
Constants - HTTP methods, content-type markers and configuration defaults.
"""

from __future__ import annotations

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP methods supported by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


ALL_METHODS = tuple(HttpMethod)

CONTENT_TYPE = "Content-Type"
JSON_CONTENT_TYPE = "application/json"

# Substrings matched against a response Content-Type header
JSON_MARKERS = ("json",)
TEXT_MARKERS = ("text/", "xml", "html", "javascript")
BINARY_MARKERS = (
    "blob",
    "octet-stream",
    "image/",
    "audio/",
    "video/",
    "application/pdf",
    "application/zip",
)

DEFAULT_CACHE_LIFETIME_MS = 300_000  # 5 min
DEFAULT_TIMEOUT = 30.0

# Environment variables read by ClientSettings.from_env()
ENV_BASE_URL = "REQUESTIFY_BASE_URL"
ENV_TIMEOUT = "REQUESTIFY_TIMEOUT"
ENV_TRUST_ENV = "REQUESTIFY_TRUST_ENV"
ENV_MODE = "REQUESTIFY_ENV"
ENV_CACHE = "REQUESTIFY_CACHE"
ENV_CACHE_LIFETIME_MS = "REQUESTIFY_CACHE_LIFETIME_MS"
ENV_LOG_TIMING = "REQUESTIFY_LOG_TIMING"
