"""Billing amount calculation.

Flow per computation:
1. Validate raw inputs -> BillingRequest (ValidationError on bad input)
2. Discount rate from tier + usage (PREMIUM at/above threshold only)
3. raw = usage * (1 - rate), exact Decimal arithmetic
4. amount = ROUND_HALF_UP(raw, 2)
5. SUCCESS BillingResult stamped with UTC time

Errors never escape compute(): they become ERROR BillingResults. Exactly one
BillingLogRecord is emitted per computation.
"""

import functools
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from billing_engine.config import BillingPolicy, load_policy_from_env
from billing_engine.constants import (
    MAX_USAGE_AMOUNT,
    MSG_CONFIG_ERROR,
    MSG_INTERNAL_ERROR,
    MSG_INVALID_USAGE,
    MSG_REQUIRED,
    ZERO_RATE,
)
from billing_engine.errors import ConfigError, ValidationError
from billing_engine.metering import BillingLogSink, LoggingBillingSink
from billing_engine.schemas import (
    BillingLogRecord,
    BillingRequest,
    BillingResult,
    CustomerTier,
)
from billing_engine.utils.money import (
    AmountTooLargeError,
    MoneyError,
    NegativeAmountError,
    apply_discount,
    parse_usage_amount,
    round_half_up,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def build_request(customer_id: Any, customer_tier: Any, usage_amount: Any) -> BillingRequest:
    """Validate raw caller input and convert it into a BillingRequest.

    Checks run in order: required fields, tier, usage amount.

    Args:
        customer_id: Customer identifier (non-empty)
        customer_tier: Tier text, matched case-insensitively
        usage_amount: Usage as string, int or Decimal (never float)

    Returns:
        Validated BillingRequest

    Raises:
        ValidationError: On the first failing check
    """
    if _is_missing(customer_id) or _is_missing(usage_amount):
        raise ValidationError(MSG_REQUIRED)

    tier = CustomerTier.parse(customer_tier)

    try:
        usage = parse_usage_amount(usage_amount)
    except NegativeAmountError as e:
        raise ValidationError(f"{MSG_INVALID_USAGE}: must be non-negative") from e
    except AmountTooLargeError as e:
        raise ValidationError(f"{MSG_INVALID_USAGE}: exceeds maximum {MAX_USAGE_AMOUNT}") from e
    except MoneyError as e:
        raise ValidationError(f"{MSG_INVALID_USAGE}: {usage_amount!r}") from e

    try:
        return BillingRequest(
            customer_id=str(customer_id),
            customer_tier=tier,
            usage_amount=usage,
        )
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid billing request: {e}") from e


def determine_discount_rate(
    tier: CustomerTier, usage_amount: Decimal, policy: BillingPolicy
) -> Decimal:
    """Discount rate for a tier and usage amount.

    Only PREMIUM customers meeting the policy threshold get a discount;
    every other case is 0.00.
    """
    if tier == CustomerTier.PREMIUM and policy.meets_threshold(usage_amount):
        return policy.premium_discount_rate
    return ZERO_RATE


class BillingCalculator:
    """Stateless billing calculator.

    Collaborators are injected so callers (and tests) control the policy,
    where log records go, and the timestamp source.
    """

    def __init__(
        self,
        policy: Optional[BillingPolicy] = None,
        sink: Optional[BillingLogSink] = None,
        clock: Optional[Clock] = None,
    ):
        self.policy = policy or BillingPolicy()
        self.sink = sink or LoggingBillingSink()
        self.clock = clock or utc_now

    def compute(self, customer_id: Any, customer_tier: Any, usage_amount: Any) -> BillingResult:
        """Compute the billed amount from raw caller input.

        Never raises: validation failures and unexpected errors both come
        back as ERROR results.

        Args:
            customer_id: Customer identifier
            customer_tier: BASIC, PREMIUM or ENTERPRISE (any case)
            usage_amount: Non-negative decimal as string, int or Decimal

        Returns:
            BillingResult (status SUCCESS or ERROR)
        """
        try:
            request = build_request(customer_id, customer_tier, usage_amount)
            result = self._calculate(request)
        except ValidationError as e:
            result = self._failure(customer_id, str(e))
        except Exception as e:
            logger.error(
                f"Billing computation failed for customer {customer_id!r}: {e}",
                exc_info=True,
            )
            result = self._failure(customer_id, MSG_INTERNAL_ERROR)

        self._emit(result, customer_tier, usage_amount)
        return result

    def compute_request(self, request: BillingRequest) -> BillingResult:
        """Compute the billed amount for an already validated request."""
        try:
            result = self._calculate(request)
        except Exception as e:
            logger.error(
                f"Billing computation failed for customer {request.customer_id!r}: {e}",
                exc_info=True,
            )
            result = self._failure(request.customer_id, MSG_INTERNAL_ERROR)

        self._emit(result, request.customer_tier, request.usage_amount)
        return result

    def compute_many(self, rows: Iterable[Mapping[str, Any]]) -> list[BillingResult]:
        """Compute a batch of raw rows, preserving input order.

        Each row is a mapping with customer_id, customer_tier and
        usage_amount keys. A bad row only yields an ERROR for that row.
        """
        return [
            self.compute(
                row.get("customer_id"),
                row.get("customer_tier"),
                row.get("usage_amount"),
            )
            for row in rows
        ]

    def _calculate(self, request: BillingRequest) -> BillingResult:
        rate = determine_discount_rate(request.customer_tier, request.usage_amount, self.policy)
        raw_amount = apply_discount(request.usage_amount, rate)
        amount = round_half_up(raw_amount)

        return BillingResult.success(
            customer_id=request.customer_id,
            discount_rate=rate,
            amount=amount,
            computed_at=self._now(),
        )

    def _failure(self, customer_id: Any, message: str) -> BillingResult:
        return BillingResult.failure(
            customer_id="" if customer_id is None else str(customer_id),
            error_message=message,
            computed_at=self._now(),
        )

    def _now(self) -> datetime:
        """Timestamp from the injected clock, falling back to UTC now.

        A clock that raises or returns a naive datetime must not turn a
        result into an exception.
        """
        try:
            now = self.clock()
        except Exception as e:
            logger.error(f"Billing clock failed, using UTC now: {e}", exc_info=True)
            return utc_now()

        if not isinstance(now, datetime) or now.tzinfo is None or now.utcoffset() is None:
            logger.warning(
                f"Billing clock returned {now!r}, expected aware datetime; using UTC now"
            )
            return utc_now()

        return now

    def _emit(self, result: BillingResult, customer_tier: Any, usage_amount: Any) -> None:
        try:
            record = BillingLogRecord.from_result(result, customer_tier, usage_amount)
            self.sink.emit(record)
        except Exception as e:
            logger.error(
                f"Billing log sink failed for customer {result.customer_id!r}: {e}",
                exc_info=True,
            )


@functools.lru_cache(maxsize=1)
def get_default_calculator() -> BillingCalculator:
    """Calculator built from environment policy (cached).

    Raises:
        ConfigError: If the environment policy is invalid
    """
    return BillingCalculator(policy=load_policy_from_env())


def reset_default_calculator() -> None:
    """Drop the cached default calculator (e.g. after changing the environment)."""
    get_default_calculator.cache_clear()


def compute(customer_id: Any, customer_tier: Any, usage_amount: Any) -> BillingResult:
    """Compute a billing result with the default calculator.

    An invalid environment policy comes back as an ERROR result; use
    load_policy_from_env() directly to fail fast at startup instead.
    """
    try:
        calculator = get_default_calculator()
    except ConfigError as e:
        logger.error(f"Billing policy configuration is invalid: {e}", exc_info=True)
        return BillingResult.failure(
            customer_id="" if customer_id is None else str(customer_id),
            error_message=f"{MSG_CONFIG_ERROR}: {e}",
            computed_at=utc_now(),
        )

    return calculator.compute(customer_id, customer_tier, usage_amount)
