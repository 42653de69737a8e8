"""
Key case conversion for parsed payloads.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from .base import TransformStep

_SNAKE_RE = re.compile(r"_([a-z0-9])")
_CAMEL_RE = re.compile(r"([A-Z])")


def _snake_key(key: str) -> str:
    return _CAMEL_RE.sub(r"_\1", key).lower()


def _camel_key(key: str) -> str:
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), key)


def _convert(value: Any, convert_key) -> Any:
    if isinstance(value, Mapping):
        return {
            (convert_key(k) if isinstance(k, str) else k): _convert(v, convert_key)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_convert(item, convert_key) for item in value]
    return value


def snake_to_camel(value: Any) -> Any:
    """Recursively rename snake_case keys to camelCase."""
    return _convert(value, _camel_key)


def camel_to_snake(value: Any) -> Any:
    """Recursively rename camelCase keys to snake_case."""
    return _convert(value, _snake_key)


def camel_case_step(name: str = "camel_case") -> TransformStep:
    """Step converting a parsed payload's keys to camelCase.

    Register it after a parsing step such as json_step.
    """
    return TransformStep(name=name, after=snake_to_camel)
