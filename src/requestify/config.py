"""
Client Configuration - Settings resolved from environment variables
"""
import os
from pathlib import Path

from pydantic import BaseModel
from dotenv import load_dotenv

from .constants import (
    DEFAULT_CACHE_LIFETIME_MS,
    DEFAULT_TIMEOUT,
    ENV_BASE_URL,
    ENV_CACHE,
    ENV_CACHE_LIFETIME_MS,
    ENV_LOG_TIMING,
    ENV_MODE,
    ENV_TIMEOUT,
    ENV_TRUST_ENV,
)
from .contracts import CacheConfig

# Load a project-local .env (existing environment variables win)
_local_env = Path.cwd() / ".env"
if _local_env.exists():
    load_dotenv(_local_env)


def _env_flag(name: str, default: str = "0") -> bool:
    """Parse boolean environment variable."""
    return os.getenv(name, default).strip() == "1"


class ClientSettings(BaseModel):
    """Client defaults with environment variable support"""

    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
    # Do not inherit proxy env vars unless asked to
    trust_env: bool = False

    # Removing an unknown step raises outside production
    strict_steps: bool = True

    cache_enabled: bool = False
    cache_lifetime_ms: int = DEFAULT_CACHE_LIFETIME_MS

    log_timing: bool = True

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Load settings from environment variables"""
        return cls(
            base_url=os.getenv(ENV_BASE_URL, ""),
            timeout=float(os.getenv(ENV_TIMEOUT, str(DEFAULT_TIMEOUT))),
            trust_env=_env_flag(ENV_TRUST_ENV, "0"),
            strict_steps=os.getenv(ENV_MODE, "development").strip().lower() != "production",
            cache_enabled=_env_flag(ENV_CACHE, "0"),
            cache_lifetime_ms=int(os.getenv(ENV_CACHE_LIFETIME_MS, str(DEFAULT_CACHE_LIFETIME_MS))),
            log_timing=_env_flag(ENV_LOG_TIMING, "1"),
        )

    def cache_config(self) -> CacheConfig:
        """Cache settings for a client built from these settings"""
        return CacheConfig(enabled=self.cache_enabled, lifetime=self.cache_lifetime_ms)
