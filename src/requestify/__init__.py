"""
requestify - HTTP client with a composable request/response transform pipeline.

This package provides:
- client: HttpClient and its step management surface
- registry/runner: The ordered step registry and the before/after chains
- steps: The step model and built-in steps (JSON parsing, retry, ...)
- decorators: Time-boxed caching and timing wrappers
"""

from .client import HttpClient
from .config import ClientSettings
from .constants import ALL_METHODS, DEFAULT_CACHE_LIFETIME_MS, HttpMethod
from .contracts import (
    AbortedTransformError,
    CacheConfig,
    ContentTypeError,
    MissingContentTypeError,
    NotRegisteredError,
    RequestConfig,
    RequestifyError,
    ResponseEnvelope,
)
from .decorators import TTLCache, make_cache_key, with_cache, with_timing
from .ports import Transport, TransportResult
from .registry import PipelineRegistry
from .runner import RequestPipeline, ResponsePipeline, current_refetch, refetch_scope
from .steps import (
    RetryCoordinator,
    StepLike,
    TransformStep,
    camel_case_step,
    camel_to_snake,
    content_step,
    define_step,
    headers_step,
    json_format_step,
    json_step,
    retry_step,
    snake_to_camel,
)
from .transport import HttpxTransport
from .utils import append_query, default_serialize_body, encode_query, is_success, resolve_url

__version__ = "0.1.0"

__all__ = [
    # Client
    "HttpClient",
    "ClientSettings",
    # Enums / constants
    "HttpMethod",
    "ALL_METHODS",
    "DEFAULT_CACHE_LIFETIME_MS",
    # Models
    "RequestConfig",
    "CacheConfig",
    "ResponseEnvelope",
    # Exceptions
    "RequestifyError",
    "NotRegisteredError",
    "AbortedTransformError",
    "ContentTypeError",
    "MissingContentTypeError",
    # Engine
    "PipelineRegistry",
    "RequestPipeline",
    "ResponsePipeline",
    "current_refetch",
    "refetch_scope",
    # Steps
    "StepLike",
    "TransformStep",
    "define_step",
    "json_step",
    "json_format_step",
    "content_step",
    "camel_case_step",
    "snake_to_camel",
    "camel_to_snake",
    "headers_step",
    "RetryCoordinator",
    "retry_step",
    # Wrappers
    "TTLCache",
    "make_cache_key",
    "with_cache",
    "with_timing",
    # Transport
    "Transport",
    "TransportResult",
    "HttpxTransport",
    # Helpers
    "resolve_url",
    "encode_query",
    "append_query",
    "default_serialize_body",
    "is_success",
]
