"""
Pytest fixtures for AltScore tests. Settings are rebuilt from a clean
environment for every test so env-driven behavior never leaks between tests.
"""

from __future__ import annotations

import pytest

ALTSCORE_ENV_VARS = (
    "ALTSCORE_MAX_BATCH_SIZE",
    "ALTSCORE_BATCH_WORKERS",
    "ALTSCORE_SCORE_JITTER",
    "ALTSCORE_JITTER_SEED",
    "ALTSCORE_DEBUG",
    "API_HOST",
    "API_PORT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Unset AltScore env vars and clear the cached Settings before and after each test."""
    from backend_altscore.config.settings import get_settings

    for name in ALTSCORE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def applicant_payload() -> dict[str, float]:
    """Reference applicant with strong payment and stability signals (scores 745, Good)."""
    return {
        "age": 30,
        "income": 50000,
        "employment_years": 5,
        "phone_payment_consistency": 9,
        "monthly_usage_gb": 10,
        "network_stability": 8,
        "electricity_payment_history": 9,
        "internet_payment_consistency": 8,
        "monthly_purchases": 10,
        "return_rate": 5,
        "avg_transaction_amount": 100,
        "address_stability_years": 4,
        "work_location_consistency": 8,
        "social_network_quality": 7,
        "financial_app_usage": 6,
        "budgeting_behavior": 8,
    }


@pytest.fixture
def max_payload() -> dict[str, float]:
    """Every signal at or beyond its normalization cap (all normalized values 1.0)."""
    return {
        "age": 65,
        "income": 100000,
        "employment_years": 20,
        "phone_payment_consistency": 10,
        "monthly_usage_gb": 50,
        "network_stability": 10,
        "electricity_payment_history": 10,
        "internet_payment_consistency": 10,
        "monthly_purchases": 50,
        "return_rate": 0,
        "avg_transaction_amount": 500,
        "address_stability_years": 10,
        "work_location_consistency": 10,
        "social_network_quality": 10,
        "financial_app_usage": 10,
        "budgeting_behavior": 10,
    }


@pytest.fixture
def min_payload() -> dict[str, float]:
    """Every signal at the bottom of its documented range."""
    return {
        "age": 18,
        "income": 0,
        "employment_years": 0,
        "phone_payment_consistency": 1,
        "monthly_usage_gb": 0,
        "network_stability": 1,
        "electricity_payment_history": 1,
        "internet_payment_consistency": 1,
        "monthly_purchases": 0,
        "return_rate": 100,
        "avg_transaction_amount": 0,
        "address_stability_years": 0,
        "work_location_consistency": 1,
        "social_network_quality": 1,
        "financial_app_usage": 1,
        "budgeting_behavior": 1,
    }


@pytest.fixture
def applicant(applicant_payload):
    from backend_altscore.scoring_engine import validate_applicant

    return validate_applicant(applicant_payload)


@pytest.fixture
def client():
    """FastAPI TestClient over the credit scoring app."""
    from fastapi.testclient import TestClient

    from backend_altscore.api_server.server import app

    return TestClient(app)
