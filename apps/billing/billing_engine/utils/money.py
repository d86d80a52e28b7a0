"""Money utilities for billing amounts.

Billed amounts are Decimal values with exactly 2 decimal places, rounded
ROUND_HALF_UP (regulatory requirement).

NEVER use float or double for money calculations.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

from billing_engine.constants import AMOUNT_DECIMAL_PLACES, MAX_USAGE_AMOUNT

AmountInput = Union[str, int, Decimal]

# Headroom digits on top of what an exact result needs
PRECISION_HEADROOM = 4


class MoneyError(ValueError):
    """Base exception for money-related errors."""

    pass


class InvalidAmountError(MoneyError):
    """Raised when an amount cannot be parsed as a finite decimal."""

    pass


class NegativeAmountError(MoneyError):
    """Raised when amount is negative."""

    pass


class AmountTooLargeError(MoneyError):
    """Raised when amount exceeds maximum allowed."""

    pass


def _digits(value: Decimal) -> int:
    return len(value.as_tuple().digits)


def round_half_up(value: Decimal, places: int = AMOUNT_DECIMAL_PLACES) -> Decimal:
    """
    Round a Decimal to `places` decimal places using ROUND_HALF_UP.

    Args:
        value: Finite Decimal value
        places: Number of fractional digits to keep

    Returns:
        Decimal with exactly `places` fractional digits

    Examples:
        >>> round_half_up(Decimal("950.31635"))
        Decimal('950.32')
        >>> round_half_up(Decimal("0.005"))
        Decimal('0.01')
        >>> round_half_up(Decimal("500"))
        Decimal('500.00')
    """
    quantum = Decimal(1).scaleb(-places)

    with localcontext() as ctx:
        # quantize() raises InvalidOperation when the result needs more
        # digits than the context precision allows
        ctx.prec = max(ctx.prec, value.adjusted() + places + PRECISION_HEADROOM)
        return value.quantize(quantum, rounding=ROUND_HALF_UP)


def apply_discount(amount: Decimal, rate: Decimal) -> Decimal:
    """
    Compute amount * (1 - rate) without losing any digit.

    Examples:
        >>> apply_discount(Decimal("1000.333"), Decimal("0.05"))
        Decimal('950.31635')
    """
    factor = Decimal(1) - rate

    with localcontext() as ctx:
        ctx.prec = max(
            ctx.prec,
            _digits(amount) + _digits(factor) + PRECISION_HEADROOM,
        )
        return amount * factor


def parse_usage_amount(raw: AmountInput) -> Decimal:
    """
    Parse a caller-supplied usage amount into a non-negative Decimal.

    Args:
        raw: Amount as string (e.g. "1000.333"), int or Decimal

    Returns:
        Parsed Decimal (any zero, negative zero included, becomes Decimal("0"))

    Raises:
        InvalidAmountError: If the value is not a finite decimal (floats included)
        NegativeAmountError: If the value is negative
        AmountTooLargeError: If the value exceeds MAX_USAGE_AMOUNT
    """
    # bool is an int subclass; float would bring binary rounding drift
    if isinstance(raw, (bool, float)) or not isinstance(raw, (str, int, Decimal)):
        raise InvalidAmountError(f"Invalid amount type: {type(raw).__name__}")

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    else:
        text = raw.strip()
        if not text:
            raise InvalidAmountError("Invalid amount string: empty")
        # Decimal() also takes Python digit separators ("1_000")
        if "_" in text:
            raise InvalidAmountError(f"Invalid amount string: {raw!r}")
        try:
            value = Decimal(text)
        except InvalidOperation as e:
            raise InvalidAmountError(f"Invalid amount string: {raw!r}") from e

    if not value.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {raw!r}")

    if value < 0:
        raise NegativeAmountError(f"Amount cannot be negative: {value}")

    if value > MAX_USAGE_AMOUNT:
        raise AmountTooLargeError(f"Amount {value} exceeds maximum {MAX_USAGE_AMOUNT}")

    if value.is_zero():
        return Decimal(0)

    return value


def format_amount(amount: Decimal) -> str:
    """
    Format an amount as a 2 decimal place string.

    Examples:
        >>> format_amount(Decimal("950.31635"))
        '950.32'
        >>> format_amount(Decimal("0"))
        '0.00'
    """
    return f"{round_half_up(amount):f}"
