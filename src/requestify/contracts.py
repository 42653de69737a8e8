"""
Client contracts - Data models and errors shared by the pipeline engine.

This module defines the core abstractions threaded through a call:
- RequestConfig: Mutable request description passed along the before-chain
- CacheConfig: Which methods are cached and for how long
- ResponseEnvelope: Normalized response shape produced by the built-in steps
- Error taxonomy raised by the registry and the built-in steps
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .constants import ALL_METHODS, DEFAULT_CACHE_LIFETIME_MS, HttpMethod


class RequestConfig(BaseModel):
    """
    Per-call request configuration.

    The client deep-copies this object before the before-chain starts, so
    steps are free to mutate the instance they receive.

    Attributes:
        headers: Request headers; merged over the client default headers
        params: Query parameters appended to the resolved URL
        exclude_steps: Names of steps to skip for this call only
        timeout: Transport timeout in seconds (None = transport default)
        follow_redirects: Forwarded to the transport when set
        serialize_body: Per-call body serializer override
        content: Serialized body; filled in by the client after the before-chain
        options: Extra keyword arguments forwarded to the transport

    Unknown fields are rejected; transport-specific keywords such as
    cookies belong in `options`.
    """

    headers: Dict[str, str] = Field(default_factory=dict)
    params: Dict[str, Union[str, int, float, bool]] = Field(default_factory=dict)
    exclude_steps: List[str] = Field(default_factory=list)
    timeout: Optional[float] = None
    follow_redirects: Optional[bool] = None
    serialize_body: Optional[Callable[[Any], Any]] = None
    content: Any = None
    options: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        arbitrary_types_allowed = True
        extra = "forbid"

    @classmethod
    def coerce(
        cls, value: Union["RequestConfig", Mapping[str, Any], None]
    ) -> Optional["RequestConfig"]:
        """
        Accept a RequestConfig, a plain mapping, or None.

        Raises:
            pydantic.ValidationError: The mapping carries an unknown key
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(
            f"Request config must be a RequestConfig or a mapping, got {type(value).__name__}"
        )

    def is_excluded(self, name: str) -> bool:
        """Check if a step is excluded for this call."""
        return name in self.exclude_steps


class CacheConfig(BaseModel):
    """
    Response cache settings.

    Attributes:
        enabled: Whether calls are cached at all
        lifetime: Entry lifetime in milliseconds
        methods: HTTP methods whose calls go through the cache
    """

    enabled: bool = False
    lifetime: int = DEFAULT_CACHE_LIFETIME_MS
    methods: List[HttpMethod] = Field(default_factory=lambda: list(ALL_METHODS))

    def caches(self, method: Union[str, HttpMethod]) -> bool:
        """Check if calls with the given method are cached."""
        return self.enabled and HttpMethod(method) in self.methods


class ResponseEnvelope(BaseModel):
    """
    Normalized response produced by json_format_step/content_step.

    Attributes:
        data: Parsed body (JSON value, text or bytes)
        status: HTTP status code
        headers: Response headers (lower-cased names)
        ok: Whether the status is 2xx
    """

    data: Any = None
    status: int
    headers: Dict[str, str] = Field(default_factory=dict)
    ok: bool = True


class RequestifyError(Exception):
    """Base class for errors raised by the client."""

    pass


class NotRegisteredError(RequestifyError, LookupError):
    """Removal of a step name that is not in the registry (strict mode)."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Step '{name}' is not registered in this client")


class AbortedTransformError(RequestifyError):
    """Raised by a transform to abort the current call on purpose."""

    def __init__(self, message: str, *, step: Optional[str] = None) -> None:
        self.step = step
        super().__init__(message)


class ContentTypeError(RequestifyError):
    """Response Content-Type cannot be mapped to a body parser."""

    pass


class MissingContentTypeError(ContentTypeError):
    """Response carries no Content-Type header."""

    pass
