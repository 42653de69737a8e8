"""
Client ports - Interfaces for the collaborators the pipeline engine calls.

Interfaces:
- TransportResult: What a transport returns (httpx.Response satisfies it)
- Transport: Executes one HTTP call for a fully prepared request
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

from .contracts import RequestConfig

# Re-issues the current request and returns a fresh transport result
Refetch = Callable[[], Awaitable[Any]]

# Turns a caller body into transport-ready content
BodySerializer = Callable[[Any], Any]

# (event, data) progress callback
EventCallback = Callable[[str, dict], None]


class TransportResult(Protocol):
    """Raw transport result.

    Non-2xx statuses are ordinary results: the transport reports them through
    `is_success` and never raises for them.
    """

    status_code: int

    @property
    def is_success(self) -> bool:
        """True for 2xx statuses."""
        ...


class Transport(Protocol):
    """Transport capability injected into the client."""

    async def execute(self, method: str, url: str, config: RequestConfig) -> Any:
        """Perform the HTTP call and return the raw result."""
        ...
