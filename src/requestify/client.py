"""
HTTP client with a composable transform pipeline.

Call flow:
    request(method, url, body, config)
      -> RequestPipeline.run(config)        before-transforms
      -> Transport.execute(method, url, final_config)
      -> ResponsePipeline.run(raw, final_config)   after-transforms

Ownership policy: `register_step()` and `copy()` return a new client that
shares the step registry and the cache store with the original by reference.
Step edits made through any of them are visible to all. Headers and base URL
are copied by value.
Cache entries are keyed on the resolved URL and default headers, so clients
that diverge after a copy never read each other's responses.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .config import ClientSettings
from .constants import CONTENT_TYPE, JSON_CONTENT_TYPE, HttpMethod
from .contracts import CacheConfig, RequestConfig
from .decorators import TimingCallback, TTLCache, make_cache_key, with_cache, with_timing
from .ports import BodySerializer, EventCallback, Transport
from .registry import PipelineRegistry
from .runner import RequestPipeline, ResponsePipeline, refetch_scope
from .transport import HttpxTransport
from .utils import append_query, default_serialize_body, resolve_url

logger = logging.getLogger(__name__)

ConfigLike = Union[RequestConfig, Mapping[str, Any], None]


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)


class HttpClient:
    """
    HTTP client whose calls run through an ordered chain of transform steps.

    Usage:
        api = (
            HttpClient("https://jsonplaceholder.typicode.com")
            .register_step(retry_step(2))
            .register_step(json_step())
            .register_step(camel_case_step())
        )
        users = await api.get("/users")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        steps: Optional[Iterable[Any]] = None,
        serialize_body: Optional[BodySerializer] = None,
        transport: Optional[Transport] = None,
        cache: Union[CacheConfig, Mapping[str, Any], None] = None,
        strict: Optional[bool] = None,
        settings: Optional[ClientSettings] = None,
        on_event: Optional[EventCallback] = None,
        on_timing: Optional[TimingCallback] = None,
        registry: Optional[PipelineRegistry] = None,
        cache_store: Optional[TTLCache] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Prepended to relative request URLs
            headers: Default headers sent with every request
            steps: Initial steps in execution order
            serialize_body: Body serializer (default: default_serialize_body)
            transport: Transport capability (default: HttpxTransport)
            cache: Cache settings (default: from settings)
            strict: Strict step removal (default: from settings)
            settings: Environment-derived defaults (default: ClientSettings.from_env())
            on_event: Pipeline progress callback
            on_timing: Called with (label, elapsed_ms, error) after every call
            registry: Existing registry to share
            cache_store: Existing cache store to share
        """
        self._settings = settings or ClientSettings.from_env()
        self.base_url = self._settings.base_url if base_url is None else base_url
        self.headers: Dict[str, str] = dict(headers or {})
        self._serialize_body = serialize_body or default_serialize_body
        self._transport = transport or HttpxTransport(
            timeout=self._settings.timeout, trust_env=self._settings.trust_env
        )
        self._on_event = on_event
        self._on_timing = on_timing

        if registry is None:
            registry = PipelineRegistry(
                strict=self._settings.strict_steps if strict is None else strict
            )
        elif strict is not None:
            registry.strict = strict
        for step in steps or ():
            registry.register(step)
        self._registry = registry

        if cache is None:
            self._cache_config = self._settings.cache_config()
        elif isinstance(cache, CacheConfig):
            self._cache_config = cache
        else:
            self._cache_config = CacheConfig.model_validate(dict(cache))
        self._cache = cache_store if cache_store is not None else TTLCache()

        self._request_pipeline = RequestPipeline(self._registry, on_event)
        self._response_pipeline = ResponsePipeline(self._registry, on_event)

        log_timing = self._settings.log_timing
        self._send = with_timing(
            self._execute, name="request", enabled=log_timing, on_timing=on_timing
        )
        self._send_cached = with_timing(
            with_cache(
                self._cache_config, self._execute, cache=self._cache, key=self._cache_key
            ),
            name="request",
            enabled=log_timing,
            on_timing=on_timing,
        )

    # ------------------------------------------------------------------
    # Step management
    # ------------------------------------------------------------------

    @property
    def registry(self) -> PipelineRegistry:
        return self._registry

    @property
    def cache_config(self) -> CacheConfig:
        return self._cache_config

    def register_step(self, step: Any) -> "HttpClient":
        """
        Append a step to the shared registry.

        Returns:
            A new client sharing the registry with this one
        """
        self._registry.register(step)
        return self.copy()

    def remove_step(self, name: Optional[str] = None) -> "HttpClient":
        """
        Remove all steps named `name`, or every step when no name is given.

        Raises:
            NotRegisteredError: Strict mode and the name is unknown
        """
        self._registry.remove(name)
        return self

    def list_steps(self) -> List[Dict[str, str]]:
        """Registered steps in execution order, as [{"name": ...}]."""
        return [{"name": name} for name in self._registry.list()]

    def copy(self) -> "HttpClient":
        """New client sharing this client's registry, cache store and transport."""
        return HttpClient(
            self.base_url,
            headers=self.headers,
            serialize_body=self._serialize_body,
            transport=self._transport,
            cache=self._cache_config.model_copy(deep=True),
            settings=self._settings,
            on_event=self._on_event,
            on_timing=self._on_timing,
            registry=self._registry,
            cache_store=self._cache,
        )

    def clean_cache(self) -> None:
        """Drop every cached response."""
        self._cache.clear()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def request(
        self,
        method: Union[str, HttpMethod],
        url: str,
        body: Any = None,
        config: ConfigLike = None,
    ) -> Any:
        """
        Issue a request through the pipeline.

        Args:
            method: HTTP method
            url: Absolute URL, or a path joined onto base_url
            body: Request body, serialized before sending
            config: Per-call RequestConfig (or mapping)

        Returns:
            The output of the last after-transform (the raw transport
            result when no step transforms it)
        """
        method = HttpMethod(method.upper() if isinstance(method, str) else method)
        send = self._send_cached if self._cache_config.caches(method) else self._send
        return await send(method.value, url, body, config)

    async def get(self, url: str, config: ConfigLike = None, *, body: Any = None) -> Any:
        return await self.request(HttpMethod.GET, url, body, config)

    async def post(self, url: str, body: Any = None, config: ConfigLike = None) -> Any:
        return await self.request(HttpMethod.POST, url, body, config)

    async def put(self, url: str, body: Any = None, config: ConfigLike = None) -> Any:
        return await self.request(HttpMethod.PUT, url, body, config)

    async def patch(self, url: str, body: Any = None, config: ConfigLike = None) -> Any:
        return await self.request(HttpMethod.PATCH, url, body, config)

    async def delete(self, url: str, config: ConfigLike = None, *, body: Any = None) -> Any:
        return await self.request(HttpMethod.DELETE, url, body, config)

    def _cache_key(self, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> str:
        """Key a call on its resolved URL and the default headers in effect."""
        method, url, body, config = args
        return make_cache_key(
            (method, resolve_url(self.base_url, url), self.headers, body, config), kwargs
        )

    def _prepare(self, final: RequestConfig, body: Any) -> RequestConfig:
        """Merge default headers and serialize the body into the final config."""
        final.headers = {**self.headers, **final.headers}
        if body is None:
            return final

        serializer = final.serialize_body or self._serialize_body
        final.content = serializer(body)
        if (
            serializer is default_serialize_body
            and isinstance(body, (Mapping, list, tuple))
            and not _has_header(final.headers, CONTENT_TYPE)
        ):
            final.headers[CONTENT_TYPE] = JSON_CONTENT_TYPE
        return final

    async def _execute(self, method: str, url: str, body: Any, config: ConfigLike) -> Any:
        final = await self._request_pipeline.run(config)
        final = self._prepare(final if final is not None else RequestConfig(), body)
        target = append_query(resolve_url(self.base_url, url), final.params)

        async def refetch() -> Any:
            return await self._transport.execute(method, target, final)

        logger.debug("%s %s", method, target, extra={"method": method, "url": target})
        result = await refetch()
        with refetch_scope(refetch):
            return await self._response_pipeline.run(result, final)

    def __repr__(self) -> str:
        return f"HttpClient(base_url={self.base_url!r}, steps={self._registry.list()!r})"
