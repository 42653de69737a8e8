"""
Default header injection.
"""

from __future__ import annotations

from typing import Mapping

from ..contracts import RequestConfig
from .base import TransformStep


def headers_step(headers: Mapping[str, str], name: str = "headers") -> TransformStep:
    """
    Before-step filling in headers missing from the request config.

    Headers already present on the config (compared case-insensitively) win.
    """
    defaults = dict(headers)

    def before(config: RequestConfig) -> RequestConfig:
        present = {key.lower() for key in config.headers}
        for key, value in defaults.items():
            if key.lower() not in present:
                config.headers[key] = value
        return config

    return TransformStep(name=name, before=before)
