"""
Retry step - Re-issues a failed request through the refetch capability.

States: Evaluating -> Retrying* -> Done.

The step inspects the incoming transport result. A successful result passes
through untouched. Otherwise the request is re-issued up to `max_attempts`
times, stopping at the first success. When attempts run out the last result
is returned; exhausted retries never raise, HTTP failures stay data.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Callable, Optional

from ..runner import current_refetch
from ..utils import is_success

logger = logging.getLogger(__name__)


class RetryCoordinator:
    """
    After-transform that retries non-successful responses.

    Register it before any step that parses the response, since it works on
    raw transport results.

    Usage:
        client = HttpClient("https://api.example.com").register_step(retry_step(2))
    """

    before = None

    def __init__(
        self,
        max_attempts: int,
        *,
        name: str = "retry",
        delay: float = 0.0,
        success: Callable[[Any], bool] = is_success,
    ) -> None:
        """
        Args:
            max_attempts: Maximum number of refetches after the initial failure
            name: Step name
            delay: Base backoff delay in seconds (0 = retry immediately)
            success: Reads the success indicator of a result
        """
        if not isinstance(max_attempts, int) or max_attempts < 0:
            raise ValueError("max_attempts must be an integer >= 0")
        self._name = name
        self.max_attempts = max_attempts
        self.delay = delay
        self._success = success

    @property
    def name(self) -> str:
        return self._name

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter for a 1-based attempt number."""
        base = self.delay * (2 ** (attempt - 1))
        jitter = random.uniform(0, self.delay * 0.5)
        return base + jitter

    async def after(self, result: Any) -> Any:
        if self._success(result):
            return result

        refetch = current_refetch()
        last_result = result
        attempts_remaining = self.max_attempts

        while attempts_remaining > 0:
            if refetch is None:
                logger.debug("No refetch capability available, not retrying")
                break

            attempt = self.max_attempts - attempts_remaining + 1
            attempts_remaining -= 1
            if self.delay > 0:
                await asyncio.sleep(self._backoff_delay(attempt))

            logger.warning(
                "Retrying request (attempt %d/%d) after status %s",
                attempt,
                self.max_attempts,
                getattr(last_result, "status_code", None),
                extra={"step": self.name, "attempt": attempt},
            )
            last_result = await refetch()
            if self._success(last_result):
                return last_result

        return last_result

    def __repr__(self) -> str:
        return f"RetryCoordinator(name={self.name!r}, max_attempts={self.max_attempts})"


def retry_step(
    max_attempts: int = 3,
    *,
    delay: float = 0.0,
    name: str = "retry",
    success: Optional[Callable[[Any], bool]] = None,
) -> RetryCoordinator:
    """Build a retry step allowing up to `max_attempts` refetches."""
    return RetryCoordinator(
        max_attempts, name=name, delay=delay, success=success or is_success
    )
