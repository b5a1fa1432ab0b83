"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and .env files.
- Validate settings and provide defaults for optional ones.
- Expose typed settings (batch limits, jitter mode, debug, API host/port)
  for use across the scoring engine, analytics, API server, and tools.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass

from backend_altscore import __version__
from backend_altscore.config.env import (
    env_flag,
    env_int,
    env_optional_int,
    load_altscore_env,
)

DEFAULT_MAX_BATCH_SIZE = 100


@dataclass(frozen=True)
class Settings:
    """Process-wide read-only settings, built once from the environment."""

    model_version: str = __version__
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    batch_workers: int = 1
    score_jitter: bool = False
    """Apply the bounded ±5 ensemble jitter. Off means fully deterministic scores."""
    jitter_seed: int | None = None
    """Seed for the jitter generator; None draws fresh OS entropy per request."""
    debug: bool = False
    """Expose computation error detail to API callers."""
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    def __post_init__(self) -> None:
        if self.max_batch_size < 1:
            raise ValueError("max_batch_size must be >= 1")
        if self.batch_workers < 1:
            raise ValueError("batch_workers must be >= 1")


def load_settings() -> Settings:
    """Build Settings from env (after loading .env). Not cached."""
    load_altscore_env()
    return Settings(
        max_batch_size=env_int("ALTSCORE_MAX_BATCH_SIZE", DEFAULT_MAX_BATCH_SIZE),
        batch_workers=env_int("ALTSCORE_BATCH_WORKERS", 1),
        score_jitter=env_flag("ALTSCORE_SCORE_JITTER"),
        jitter_seed=env_optional_int("ALTSCORE_JITTER_SEED"),
        debug=env_flag("ALTSCORE_DEBUG"),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=env_int("API_PORT", 8000),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings (cached for the process).

    Tests that change env vars call get_settings.cache_clear() first.
    """
    return load_settings()
