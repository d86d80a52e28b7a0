"""Tests for billing policy configuration."""

from decimal import Decimal

import pytest

from billing_engine.config import BillingPolicy, ThresholdMode, load_policy_from_env
from billing_engine.errors import ConfigError


def test_default_policy():
    """Test defaults: threshold 1000, rate 0.05, inclusive."""
    policy = load_policy_from_env({})

    assert policy.premium_threshold == Decimal("1000")
    assert policy.premium_discount_rate == Decimal("0.05")
    assert policy.threshold_mode == ThresholdMode.INCLUSIVE
    assert policy == BillingPolicy()


def test_policy_from_env(monkeypatch: pytest.MonkeyPatch):
    """Test reading the policy from os.environ."""
    monkeypatch.setenv("BILLING_PREMIUM_THRESHOLD", "2500")
    monkeypatch.setenv("BILLING_PREMIUM_DISCOUNT_RATE", "0.10")
    monkeypatch.setenv("BILLING_PREMIUM_THRESHOLD_MODE", " STRICT ")

    policy = load_policy_from_env()

    assert policy.premium_threshold == Decimal("2500")
    assert policy.premium_discount_rate == Decimal("0.10")
    assert policy.threshold_mode == ThresholdMode.STRICT


def test_blank_values_use_defaults():
    """Test that blank variables fall back to defaults."""
    policy = load_policy_from_env(
        {"BILLING_PREMIUM_THRESHOLD": "  ", "BILLING_PREMIUM_THRESHOLD_MODE": ""}
    )

    assert policy == BillingPolicy()


@pytest.mark.parametrize(
    "env",
    [
        {"BILLING_PREMIUM_THRESHOLD": "lots"},
        {"BILLING_PREMIUM_THRESHOLD": "-1"},
        {"BILLING_PREMIUM_THRESHOLD": "Infinity"},
        {"BILLING_PREMIUM_DISCOUNT_RATE": "1"},
        {"BILLING_PREMIUM_DISCOUNT_RATE": "-0.05"},
        {"BILLING_PREMIUM_THRESHOLD_MODE": "sometimes"},
    ],
)
def test_invalid_env_fails_fast(env):
    """Test that malformed configuration raises ConfigError."""
    with pytest.raises(ConfigError):
        load_policy_from_env(env)


def test_meets_threshold():
    """Test inclusive vs strict comparison."""
    inclusive = BillingPolicy()
    strict = BillingPolicy(threshold_mode=ThresholdMode.STRICT)

    assert inclusive.meets_threshold(Decimal("1000"))
    assert not inclusive.meets_threshold(Decimal("999.99"))
    assert not strict.meets_threshold(Decimal("1000"))
    assert strict.meets_threshold(Decimal("1000.01"))
