"""
Tests for env-driven settings.
"""

from __future__ import annotations

import pytest


def test_defaults():
    from backend_altscore.config import get_settings

    s = get_settings()
    assert s.max_batch_size == 100
    assert s.batch_workers == 1
    assert s.score_jitter is False
    assert s.jitter_seed is None
    assert s.debug is False
    assert s.model_version == "2.1.0"
    assert s.api_port == 8000


def test_env_overrides(monkeypatch):
    from backend_altscore.config import get_settings

    monkeypatch.setenv("ALTSCORE_MAX_BATCH_SIZE", "25")
    monkeypatch.setenv("ALTSCORE_BATCH_WORKERS", "4")
    monkeypatch.setenv("ALTSCORE_SCORE_JITTER", "true")
    monkeypatch.setenv("ALTSCORE_JITTER_SEED", "99")
    monkeypatch.setenv("ALTSCORE_DEBUG", "yes")
    monkeypatch.setenv("API_PORT", "9100")
    s = get_settings()
    assert (s.max_batch_size, s.batch_workers, s.jitter_seed, s.api_port) == (25, 4, 99, 9100)
    assert s.score_jitter is True
    assert s.debug is True


def test_settings_are_cached(monkeypatch):
    from backend_altscore.config import get_settings

    first = get_settings()
    monkeypatch.setenv("ALTSCORE_MAX_BATCH_SIZE", "5")
    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().max_batch_size == 5


def test_invalid_values_raise(monkeypatch):
    from backend_altscore.config import get_settings

    monkeypatch.setenv("ALTSCORE_MAX_BATCH_SIZE", "lots")
    with pytest.raises(ValueError, match="ALTSCORE_MAX_BATCH_SIZE"):
        get_settings()

    get_settings.cache_clear()
    monkeypatch.setenv("ALTSCORE_MAX_BATCH_SIZE", "0")
    with pytest.raises(ValueError, match="max_batch_size"):
        get_settings()


def test_settings_frozen():
    import dataclasses

    from backend_altscore.config import Settings

    with pytest.raises(dataclasses.FrozenInstanceError):
        Settings().debug = True  # type: ignore[misc]
