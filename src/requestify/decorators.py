"""
Call wrappers - Time-boxed caching and request timing.

Both wrappers are applied by explicit composition around an async callable:

    send = with_timing(with_cache(cache_config, execute, cache=store))

- with_cache: returns a stored result for identical arguments until the
  entry's lifetime elapses; each entry is evicted on its own timer
- with_timing: logs start/finish and duration, re-raising any error as-is
"""

from __future__ import annotations

import asyncio
import functools
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from .contracts import CacheConfig

logger = logging.getLogger(__name__)
_timing_logger = logging.getLogger("requestify.timing")

AsyncFn = Callable[..., Awaitable[Any]]
TimingCallback = Callable[[str, float, Optional[BaseException]], None]


def _key_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return repr(value)


def make_cache_key(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> str:
    """Serialize call arguments into a stable cache key."""
    return json.dumps(
        [list(args), kwargs],
        sort_keys=True,
        default=_key_default,
        ensure_ascii=False,
        separators=(",", ":"),
    )


class TTLCache:
    """
    In-memory store whose entries expire after a per-entry lifetime.

    Expiry is enforced twice: a loop timer removes the entry when its lifetime
    elapses, and reads ignore entries past their deadline (covers the case
    where the timer's loop is no longer running).
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    def get(self, key: str) -> Tuple[bool, Any]:
        """Return (hit, value)."""
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        deadline, value = entry
        if time.monotonic() >= deadline:
            self.evict(key)
            return False, None
        return True, value

    def set(self, key: str, value: Any, lifetime_ms: int) -> None:
        """Store a value and schedule its eviction."""
        lifetime = max(lifetime_ms, 0) / 1000.0
        self._cancel_timer(key)
        self._entries[key] = (time.monotonic() + lifetime, value)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timers[key] = loop.call_later(lifetime, self.evict, key)

    def evict(self, key: str) -> None:
        """Drop a single entry."""
        self._cancel_timer(key)
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry and cancel pending timers."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._entries.clear()

    def _cancel_timer(self, key: str) -> None:
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def with_cache(
    config: CacheConfig,
    fn: AsyncFn,
    *,
    cache: Optional[TTLCache] = None,
    key: Callable[[Tuple[Any, ...], Dict[str, Any]], str] = make_cache_key,
) -> AsyncFn:
    """
    Wrap an async callable with a time-boxed result cache.

    The config is read on every call, so toggling `config.enabled` takes
    effect immediately. Entries are only removed by their timer or by
    `wrapper.cache.clear()`.

    Args:
        config: Cache settings (enabled flag and lifetime in ms)
        fn: Async callable to wrap
        cache: Store to use; pass the same store to share entries
        key: Builds the cache key from (args, kwargs)

    Returns:
        Wrapped callable exposing the store as `.cache`
    """
    store = cache if cache is not None else TTLCache()

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not config.enabled:
            return await fn(*args, **kwargs)

        cache_key = key(args, kwargs)
        hit, value = store.get(cache_key)
        if hit:
            logger.debug("Cache hit for %s", getattr(fn, "__name__", "call"))
            return value

        result = await fn(*args, **kwargs)
        store.set(cache_key, result, config.lifetime)
        return result

    wrapper.cache = store  # type: ignore[attr-defined]
    return wrapper


def with_timing(
    fn: AsyncFn,
    *,
    name: Optional[str] = None,
    enabled: bool = True,
    on_timing: Optional[TimingCallback] = None,
) -> AsyncFn:
    """
    Wrap an async callable with start/finish timing.

    Args:
        fn: Async callable to wrap
        name: Label used in log lines (defaults to the function name)
        enabled: If False, nothing is logged (on_timing still fires)
        on_timing: Called with (name, elapsed_ms, error) after every call

    Returns:
        Wrapped callable; errors are logged and re-raised unchanged
    """
    label = name or getattr(fn, "__qualname__", "call")

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if enabled:
            _timing_logger.info("Starting %s", label)
        t0 = time.perf_counter()
        try:
            result = await fn(*args, **kwargs)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - t0) * 1000.0
            if enabled:
                _timing_logger.error(
                    "%s failed after %.3f ms: %s", label, elapsed_ms, exc
                )
            if on_timing is not None:
                on_timing(label, elapsed_ms, exc)
            raise

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        if enabled:
            _timing_logger.info(
                "Finished %s in %.3f ms", label, elapsed_ms, extra={"ms": round(elapsed_ms, 3)}
            )
        if on_timing is not None:
            on_timing(label, elapsed_ms, None)
        return result

    return wrapper
