"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from billing_engine.calculator import BillingCalculator, reset_default_calculator
from billing_engine.config import BillingPolicy
from billing_engine.constants import (
    ENV_PREMIUM_DISCOUNT_RATE,
    ENV_PREMIUM_THRESHOLD,
    ENV_THRESHOLD_MODE,
)
from billing_engine.metering import InMemoryBillingSink

FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_billing_env(monkeypatch: pytest.MonkeyPatch):
    """Start every test from default policy env and no cached calculator."""
    for name in (ENV_PREMIUM_THRESHOLD, ENV_PREMIUM_DISCOUNT_RATE, ENV_THRESHOLD_MODE):
        monkeypatch.delenv(name, raising=False)

    reset_default_calculator()
    yield
    reset_default_calculator()


@pytest.fixture(scope="function")
def sink() -> InMemoryBillingSink:
    """Fresh in-memory sink capturing emitted billing records."""
    return InMemoryBillingSink()


@pytest.fixture(scope="function")
def calculator(sink: InMemoryBillingSink) -> BillingCalculator:
    """Calculator with default policy, in-memory sink and fixed clock."""
    return BillingCalculator(
        policy=BillingPolicy(),
        sink=sink,
        clock=lambda: FIXED_NOW,
    )
