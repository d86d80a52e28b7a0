"""Exception hierarchy for the billing engine."""


class BillingError(Exception):
    """Base exception for billing errors."""

    pass


class ValidationError(BillingError):
    """Raised when caller-supplied billing input is missing or malformed.

    Always recoverable by correcting the input. The calculator converts it
    into an ERROR BillingResult carrying `str(error)` as the message.
    """

    pass


class ConfigError(BillingError):
    """Raised when the billing policy configuration is invalid."""

    pass
