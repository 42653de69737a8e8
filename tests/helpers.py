"""Stub transports and canned responses."""

from typing import Any, Callable, List, Optional

import httpx

from requestify import RequestConfig


class StubTransport:
    """Transport returning queued results and recording every call."""

    def __init__(self, results: Optional[List[Any]] = None, *, factory: Optional[Callable] = None):
        self.results = list(results or [])
        self.factory = factory
        self.calls: List[tuple] = []

    async def execute(self, method: str, url: str, config: RequestConfig) -> Any:
        self.calls.append((method, url, config))
        if self.factory is not None:
            return self.factory(method, url, config)
        if not self.results:
            raise AssertionError(f"Unexpected transport call: {method} {url}")
        return self.results.pop(0)

    @property
    def call_count(self) -> int:
        return len(self.calls)


def ok(payload: Any = None, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json=payload if payload is not None else {})


def fail(status: int = 500, payload: Any = None) -> httpx.Response:
    return httpx.Response(status, json=payload if payload is not None else {"error": status})
