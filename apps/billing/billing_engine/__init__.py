"""Billing Engine - tier-discounted billing amount calculation."""

from billing_engine.calculator import BillingCalculator, compute
from billing_engine.config import BillingPolicy, ThresholdMode, load_policy_from_env
from billing_engine.errors import BillingError, ConfigError, ValidationError
from billing_engine.metering import BillingLogSink, InMemoryBillingSink, LoggingBillingSink
from billing_engine.schemas import (
    BillingLogRecord,
    BillingRequest,
    BillingResult,
    BillingStatus,
    CustomerTier,
)

__version__ = "0.1.0"

__all__ = [
    "BillingCalculator",
    "compute",
    "BillingPolicy",
    "ThresholdMode",
    "load_policy_from_env",
    "BillingError",
    "ConfigError",
    "ValidationError",
    "BillingLogSink",
    "InMemoryBillingSink",
    "LoggingBillingSink",
    "BillingLogRecord",
    "BillingRequest",
    "BillingResult",
    "BillingStatus",
    "CustomerTier",
]
