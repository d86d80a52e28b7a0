"""Billing amount calculation."""

from billing_engine.calculator.billing_calculator import (
    BillingCalculator,
    build_request,
    compute,
    determine_discount_rate,
    get_default_calculator,
    reset_default_calculator,
)

__all__ = [
    "BillingCalculator",
    "build_request",
    "compute",
    "determine_discount_rate",
    "get_default_calculator",
    "reset_default_calculator",
]
