"""
Pipeline Runner - Runs the before-chain and the after-chain of a registry.

This module provides:
- RequestPipeline: Folds the request config through every before-transform
- ResponsePipeline: Folds the transport result through every after-transform
- refetch_scope/current_refetch: Exposes the current call's refetch
  capability to after-transforms (used by the retry step)

Both chains walk the same registry in the same order and honor the per-call
exclusion list. Each transform receives the previous transform's output.
A failing transform aborts the chain and its exception propagates unchanged.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Dict, Iterator, Mapping, Optional, Union

from .contracts import RequestConfig
from .ports import EventCallback, Refetch
from .steps.base import invoke

if TYPE_CHECKING:
    from .registry import PipelineRegistry

logger = logging.getLogger(__name__)

_current_refetch: ContextVar[Optional[Refetch]] = ContextVar(
    "requestify_refetch", default=None
)


def current_refetch() -> Optional[Refetch]:
    """Refetch capability of the call being processed, or None outside a client call."""
    return _current_refetch.get()


@contextmanager
def refetch_scope(refetch: Optional[Refetch]) -> Iterator[None]:
    """Make `refetch` visible to after-transforms for the duration of the block."""
    token = _current_refetch.set(refetch)
    try:
        yield
    finally:
        _current_refetch.reset(token)


class _PipelineBase:
    def __init__(
        self,
        registry: PipelineRegistry,
        on_event: Optional[EventCallback] = None,
    ) -> None:
        self._registry = registry
        self._on_event = on_event or (lambda e, d: None)

    @property
    def registry(self) -> PipelineRegistry:
        return self._registry

    def _emit(self, event: str, data: Dict[str, Any]) -> None:
        """Emit an event to the callback."""
        try:
            self._on_event(event, data)
        except Exception:
            # Callback errors never break the pipeline
            logger.debug("Event callback failed for %s", event, exc_info=True)


class RequestPipeline(_PipelineBase):
    """
    Runs before-transforms in registration order.

    Usage:
        pipeline = RequestPipeline(registry)
        final_config = await pipeline.run(config)
    """

    async def run(
        self, config: Union[RequestConfig, Mapping[str, Any], None]
    ) -> Optional[RequestConfig]:
        """
        Execute the before-chain.

        Args:
            config: Caller-supplied config; never mutated

        Returns:
            Final config, or None when no config was supplied (no steps run)
        """
        if config is None:
            return None

        working = RequestConfig.coerce(config).model_copy(deep=True)
        excluded = set(working.exclude_steps)

        for step in self._registry.snapshot():
            if step.name in excluded:
                self._emit("step_skipped", {"step": step.name, "phase": "before"})
                continue
            if step.before is None:
                continue

            try:
                result = await invoke(step.before, working)
            except Exception as exc:
                self._emit("step_failed", {"step": step.name, "phase": "before", "error": str(exc)})
                logger.error(
                    "Step %s before-transform failed: %s",
                    step.name,
                    exc,
                    extra={"step": step.name, "phase": "before"},
                )
                raise

            if result is None:
                raise TypeError(f"Step '{step.name}': before-transform returned None")
            working = RequestConfig.coerce(result)
            self._emit("step_before_completed", {"step": step.name})
            logger.debug("Step %s before-transform completed", step.name)

        return working


class ResponsePipeline(_PipelineBase):
    """
    Runs after-transforms in registration order as a strict left fold.

    The result type may change at every step (raw response -> JSON ->
    envelope); the pipeline only threads it forward.
    """

    async def run(self, result: Any, config: Optional[RequestConfig] = None) -> Any:
        """
        Execute the after-chain.

        Args:
            result: Raw transport result
            config: Final request config (source of the exclusion list)

        Returns:
            Whatever the last after-transform returned
        """
        excluded = set(config.exclude_steps) if config is not None else set()

        for step in self._registry.snapshot():
            if step.name in excluded:
                self._emit("step_skipped", {"step": step.name, "phase": "after"})
                continue
            if step.after is None:
                continue

            try:
                result = await invoke(step.after, result)
            except Exception as exc:
                self._emit("step_failed", {"step": step.name, "phase": "after", "error": str(exc)})
                logger.error(
                    "Step %s after-transform failed: %s",
                    step.name,
                    exc,
                    extra={"step": step.name, "phase": "after"},
                )
                raise

            self._emit("step_after_completed", {"step": step.name})
            logger.debug("Step %s after-transform completed", step.name)

        return result
