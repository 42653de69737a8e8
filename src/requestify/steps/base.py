"""
Base transform step and construction helpers.

A step is any object exposing `name`, `before` and `after`. The registry and
the pipelines never look further than those three attributes, so a step can
be a TransformStep instance or a class such as RetryCoordinator.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, Union, runtime_checkable

from ..contracts import RequestConfig

BeforeTransform = Callable[
    [RequestConfig], Union[RequestConfig, Awaitable[RequestConfig]]
]
AfterTransform = Callable[[Any], Any]


@runtime_checkable
class StepLike(Protocol):
    """
    Protocol for pipeline steps.

    Example:
        class Stamp:
            name = "stamp"
            before = None

            async def after(self, value):
                return {"value": value, "stamped": True}
    """

    name: str
    before: Optional[BeforeTransform]
    after: Optional[AfterTransform]


@dataclass(frozen=True)
class TransformStep:
    """
    Named pipeline stage with optional before/after transforms.

    A step with neither transform is legal and simply does nothing.
    """

    name: str
    before: Optional[BeforeTransform] = None
    after: Optional[AfterTransform] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Step name must be a non-empty string")
        for label, fn in (("before", self.before), ("after", self.after)):
            if fn is not None and not callable(fn):
                raise TypeError(f"Step '{self.name}': {label} must be callable")

    @property
    def inert(self) -> bool:
        return self.before is None and self.after is None


def define_step(
    name: str,
    *,
    before: Optional[BeforeTransform] = None,
    after: Optional[AfterTransform] = None,
) -> TransformStep:
    """Build a TransformStep."""
    return TransformStep(name=name, before=before, after=after)


def validate_step(step: Any) -> Any:
    """Reject objects that do not look like a step."""
    if not isinstance(step, StepLike):
        raise TypeError(
            f"Expected a step with name/before/after attributes, got {type(step).__name__}"
        )
    if not isinstance(step.name, str) or not step.name:
        raise ValueError("Step name must be a non-empty string")
    return step


async def invoke(fn: Callable[[Any], Any], value: Any) -> Any:
    """Call a transform, awaiting the result when it is awaitable."""
    result = fn(value)
    if inspect.isawaitable(result):
        result = await result
    return result
