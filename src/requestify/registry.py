"""
Step Registry - Ordered, mutable collection of transform steps.

Insertion order is execution order for both the before-chain and the
after-chain. Registration does not check for duplicate names; removal drops
every step carrying the given name.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, List, Optional

from .contracts import NotRegisteredError
from .steps.base import validate_step

logger = logging.getLogger(__name__)


class PipelineRegistry:
    """
    Registry for the steps of one client (or of several clients sharing it).

    Usage:
        registry = PipelineRegistry([json_step()])
        registry.register(camel_case_step())
        registry.list()            # ["json", "camel_case"]
        registry.remove("json")
        registry.remove()          # clear all
    """

    def __init__(self, steps: Optional[Iterable[Any]] = None, *, strict: bool = True) -> None:
        """
        Initialize the registry.

        Args:
            steps: Initial steps in execution order
            strict: If True, removing an unknown name raises NotRegisteredError
        """
        self.strict = strict
        self._steps: List[Any] = []
        for step in steps or ():
            self.register(step)

    def register(self, step: Any) -> "PipelineRegistry":
        """Append a step to the end of the chain."""
        self._steps.append(validate_step(step))
        logger.debug("Registered step %s", step.name, extra={"step": step.name})
        return self

    def remove(self, name: Optional[str] = None, *, strict: Optional[bool] = None) -> "PipelineRegistry":
        """
        Remove steps by name, or clear the registry when no name is given.

        Args:
            name: Step name; all steps with this name are removed
            strict: Overrides the registry-wide strict flag for this call

        Raises:
            NotRegisteredError: Strict mode and no step has this name
        """
        if name is None:
            self._steps.clear()
            logger.debug("Cleared all steps")
            return self

        strict = self.strict if strict is None else strict
        if strict and name not in self:
            raise NotRegisteredError(name)

        # In-place so clients sharing this registry see the change
        self._steps[:] = [step for step in self._steps if step.name != name]
        logger.debug("Removed step %s", name, extra={"step": name})
        return self

    def get(self, name: str) -> Optional[Any]:
        """Get the first step registered under a name."""
        for step in self._steps:
            if step.name == name:
                return step
        return None

    def list(self) -> List[str]:
        """Step names in execution order."""
        return [step.name for step in self._steps]

    def snapshot(self) -> List[Any]:
        """Copy of the current step sequence, used by a single pipeline run."""
        return list(self._steps)

    def __contains__(self, name: object) -> bool:
        return any(step.name == name for step in self._steps)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._steps)
