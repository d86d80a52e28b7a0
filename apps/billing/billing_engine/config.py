"""Billing policy configuration.

Policy values come from the environment with defaults from constants:
- BILLING_PREMIUM_THRESHOLD (default 1000)
- BILLING_PREMIUM_DISCOUNT_RATE (default 0.05)
- BILLING_PREMIUM_THRESHOLD_MODE: "inclusive" (>=, default) or "strict" (>)

Invalid values fail fast with ConfigError.
"""

import logging
import os
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from billing_engine.constants import (
    DEFAULT_PREMIUM_DISCOUNT_RATE,
    DEFAULT_PREMIUM_THRESHOLD,
    DEFAULT_THRESHOLD_MODE,
    ENV_PREMIUM_DISCOUNT_RATE,
    ENV_PREMIUM_THRESHOLD,
    ENV_THRESHOLD_MODE,
)
from billing_engine.errors import ConfigError

logger = logging.getLogger(__name__)


class ThresholdMode(str, Enum):
    """How usage is compared against the PREMIUM threshold."""

    INCLUSIVE = "inclusive"  # usage >= threshold
    STRICT = "strict"  # usage > threshold


class BillingPolicy(BaseModel):
    """PREMIUM discount policy."""

    model_config = ConfigDict(frozen=True)

    premium_threshold: Decimal = Field(default=DEFAULT_PREMIUM_THRESHOLD, ge=0)
    premium_discount_rate: Decimal = Field(
        default=DEFAULT_PREMIUM_DISCOUNT_RATE, ge=0, lt=1
    )
    threshold_mode: ThresholdMode = ThresholdMode(DEFAULT_THRESHOLD_MODE)

    def meets_threshold(self, usage_amount: Decimal) -> bool:
        if self.threshold_mode == ThresholdMode.STRICT:
            return usage_amount > self.premium_threshold
        return usage_amount >= self.premium_threshold


def _read_decimal(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default

    try:
        value = Decimal(raw.strip())
    except InvalidOperation as e:
        raise ConfigError(f"{name} must be a decimal number, got {raw!r}") from e

    if not value.is_finite():
        raise ConfigError(f"{name} must be finite, got {raw!r}")

    return value


def load_policy_from_env(environ: Optional[Mapping[str, str]] = None) -> BillingPolicy:
    """Build a BillingPolicy from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        BillingPolicy

    Raises:
        ConfigError: If any variable is malformed or out of range
    """
    env = os.environ if environ is None else environ

    threshold = _read_decimal(env, ENV_PREMIUM_THRESHOLD, DEFAULT_PREMIUM_THRESHOLD)
    rate = _read_decimal(env, ENV_PREMIUM_DISCOUNT_RATE, DEFAULT_PREMIUM_DISCOUNT_RATE)

    mode_raw = (env.get(ENV_THRESHOLD_MODE) or DEFAULT_THRESHOLD_MODE).strip().lower()
    try:
        mode = ThresholdMode(mode_raw)
    except ValueError as e:
        raise ConfigError(
            f"{ENV_THRESHOLD_MODE} must be one of "
            f"{[m.value for m in ThresholdMode]}, got {mode_raw!r}"
        ) from e

    try:
        policy = BillingPolicy(
            premium_threshold=threshold,
            premium_discount_rate=rate,
            threshold_mode=mode,
        )
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid billing policy: {e}") from e

    logger.debug(
        f"Loaded billing policy: threshold={policy.premium_threshold}, "
        f"rate={policy.premium_discount_rate}, mode={policy.threshold_mode.value}"
    )

    return policy
