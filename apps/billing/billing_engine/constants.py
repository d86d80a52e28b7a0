"""Billing Engine Constants.

Centralized defaults for the billing policy and money precision.
"""

from decimal import Decimal

# Money
AMOUNT_DECIMAL_PLACES = 2
"""Billed amounts always carry exactly 2 fractional digits (ROUND_HALF_UP)."""

ZERO_RATE = Decimal("0.00")

MAX_USAGE_AMOUNT = Decimal("1000000000000000")
"""Largest accepted usage amount (10^15). Keeps exact arithmetic bounded."""

# PREMIUM discount policy
DEFAULT_PREMIUM_THRESHOLD = Decimal("1000")
DEFAULT_PREMIUM_DISCOUNT_RATE = Decimal("0.05")
DEFAULT_THRESHOLD_MODE = "inclusive"
"""
Comparison used against DEFAULT_PREMIUM_THRESHOLD.

"inclusive" means usage >= threshold earns the discount, "strict" means
usage > threshold. Drafts of the billing rules disagree on this boundary,
so it is a policy value rather than hard-coded.
"""

# Environment variables
ENV_PREMIUM_THRESHOLD = "BILLING_PREMIUM_THRESHOLD"
ENV_PREMIUM_DISCOUNT_RATE = "BILLING_PREMIUM_DISCOUNT_RATE"
ENV_THRESHOLD_MODE = "BILLING_PREMIUM_THRESHOLD_MODE"

# Error messages returned in ERROR results
MSG_REQUIRED = "Customer ID and usage amount are required"
MSG_INVALID_TIER = "invalid customer tier"
MSG_INVALID_USAGE = "invalid usage amount"
MSG_INTERNAL_ERROR = "Internal billing error"
MSG_CONFIG_ERROR = "Billing configuration error"
