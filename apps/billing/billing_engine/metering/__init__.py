"""Billing log sinks for per-computation observability."""

from billing_engine.metering.billing_log import (
    BillingLogSink,
    InMemoryBillingSink,
    LoggingBillingSink,
)

__all__ = ["BillingLogSink", "InMemoryBillingSink", "LoggingBillingSink"]
