"""Utility functions and helpers."""

from billing_engine.utils.money import (
    AmountTooLargeError,
    InvalidAmountError,
    MoneyError,
    NegativeAmountError,
    apply_discount,
    format_amount,
    parse_usage_amount,
    round_half_up,
)

__all__ = [
    "AmountTooLargeError",
    "MoneyError",
    "InvalidAmountError",
    "NegativeAmountError",
    "apply_discount",
    "format_amount",
    "parse_usage_amount",
    "round_half_up",
]
