"""Shared fixtures for the client tests."""

import sys
from pathlib import Path
from typing import Any

import pytest

# Allow running the suite from a checkout without installing
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from requestify import ClientSettings, HttpClient  # noqa: E402


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(log_timing=False)


@pytest.fixture
def make_client(settings):
    def _make(transport: Any, **kwargs: Any) -> HttpClient:
        kwargs.setdefault("settings", settings)
        return HttpClient(kwargs.pop("base_url", "https://api.test"), transport=transport, **kwargs)

    return _make
