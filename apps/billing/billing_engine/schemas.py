"""Pydantic schemas for billing requests/results."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from billing_engine.constants import AMOUNT_DECIMAL_PLACES, MSG_INVALID_TIER
from billing_engine.errors import ValidationError


class CustomerTier(str, Enum):
    """Customer classification determining discount eligibility."""

    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"

    @classmethod
    def parse(cls, raw: Any) -> "CustomerTier":
        """Parse tier text case-insensitively.

        Raises:
            ValidationError: If raw is not one of BASIC, PREMIUM, ENTERPRISE
        """
        if isinstance(raw, cls):
            return raw

        if isinstance(raw, str):
            try:
                return cls(raw.strip().upper())
            except ValueError:
                pass

        raise ValidationError(f"{MSG_INVALID_TIER}: {raw!r}")


class BillingStatus(str, Enum):
    """Outcome of a billing computation."""

    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


# ============================================================================
# Input
# ============================================================================


class BillingRequest(BaseModel):
    """Validated input for a single billing computation."""

    model_config = ConfigDict(frozen=True)

    customer_id: str = Field(..., min_length=1, description="Customer identifier")
    customer_tier: CustomerTier
    usage_amount: Decimal = Field(
        ..., ge=0, strict=True, description="Billed units/currency (non-negative)"
    )

    @field_validator("customer_id")
    @classmethod
    def _customer_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("customer_id must not be blank")
        return value


# ============================================================================
# Output
# ============================================================================


class BillingResult(BaseModel):
    """Result of a billing computation.

    Never partially populated: SUCCESS carries discount_rate and amount,
    ERROR carries error_message and neither of them.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: str
    status: BillingStatus
    computed_at: datetime
    discount_rate: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def _check_complete(self) -> "BillingResult":
        if self.computed_at.tzinfo is None:
            raise ValueError("computed_at must be timezone-aware")

        if self.status == BillingStatus.SUCCESS:
            if self.discount_rate is None or self.amount is None:
                raise ValueError("SUCCESS result requires discount_rate and amount")
            if self.error_message is not None:
                raise ValueError("SUCCESS result cannot carry an error_message")
            if not (Decimal(0) <= self.discount_rate < Decimal(1)):
                raise ValueError(f"discount_rate out of range: {self.discount_rate}")
            if self.amount.as_tuple().exponent != -AMOUNT_DECIMAL_PLACES:
                raise ValueError(
                    f"amount must have exactly {AMOUNT_DECIMAL_PLACES} decimal places: "
                    f"{self.amount}"
                )
        else:
            if not self.error_message:
                raise ValueError("ERROR result requires an error_message")
            if self.discount_rate is not None or self.amount is not None:
                raise ValueError("ERROR result cannot carry discount_rate or amount")

        return self

    @classmethod
    def success(
        cls,
        customer_id: str,
        discount_rate: Decimal,
        amount: Decimal,
        computed_at: datetime,
    ) -> "BillingResult":
        return cls(
            customer_id=customer_id,
            status=BillingStatus.SUCCESS,
            discount_rate=discount_rate,
            amount=amount,
            computed_at=computed_at,
        )

    @classmethod
    def failure(
        cls, customer_id: str, error_message: str, computed_at: datetime
    ) -> "BillingResult":
        return cls(
            customer_id=customer_id,
            status=BillingStatus.ERROR,
            error_message=error_message,
            computed_at=computed_at,
        )

    @property
    def is_success(self) -> bool:
        """True when status is SUCCESS (rate and amount are set)."""
        return self.status == BillingStatus.SUCCESS

    def formatted_amount(self) -> Optional[str]:
        """Amount as a 2dp string (e.g. "950.32"), None for ERROR results."""
        if self.amount is None:
            return None
        return f"{self.amount:f}"


# ============================================================================
# Log record (one per computation)
# ============================================================================


def _raw_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class BillingLogRecord(BaseModel):
    """Structured record emitted for every computation, success or failure.

    customer_tier and usage_amount keep the caller's raw text so rejected
    inputs remain visible in the log.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: str
    customer_tier: Optional[str] = None
    usage_amount: Optional[str] = None
    status: BillingStatus
    discount_rate: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    error_message: Optional[str] = None
    computed_at: datetime

    @classmethod
    def from_result(
        cls, result: BillingResult, customer_tier: Any, usage_amount: Any
    ) -> "BillingLogRecord":
        return cls(
            customer_id=result.customer_id,
            customer_tier=_raw_text(customer_tier),
            usage_amount=_raw_text(usage_amount),
            status=result.status,
            discount_rate=result.discount_rate,
            amount=result.amount,
            error_message=result.error_message,
            computed_at=result.computed_at,
        )
