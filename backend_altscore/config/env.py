"""
Environment variable loading for AltScore.

- ALTSCORE_MAX_BATCH_SIZE: maximum applications per batch request (default: 100)
- ALTSCORE_BATCH_WORKERS: thread pool size for batch scoring (default: 1, sequential)
- ALTSCORE_SCORE_JITTER: 1 to apply the ±5 point ensemble jitter (default: off)
- ALTSCORE_JITTER_SEED: integer seed for the jitter generator (optional)
- ALTSCORE_DEBUG: 1 to expose computation error detail in API responses
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is backend_altscore/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

_TRUE_VALUES = ("1", "true", "yes", "on")


def load_altscore_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH, override=False)


def env_flag(name: str, default: bool = False) -> bool:
    """Return True when env var is set to 1/true/yes/on."""
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in _TRUE_VALUES


def env_int(name: str, default: int) -> int:
    """Return env var as int; default when unset. Raises ValueError on garbage."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def env_optional_int(name: str) -> int | None:
    """Return env var as int, or None when unset."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    return env_int(name, 0)
