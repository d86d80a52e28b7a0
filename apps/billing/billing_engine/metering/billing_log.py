"""Billing log sinks.

Every computation emits exactly one BillingLogRecord to an injected sink.
The sink is observability only: it never affects the returned result.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

from billing_engine.schemas import BillingLogRecord, BillingStatus

logger = logging.getLogger(__name__)


class BillingLogSink(ABC):
    """Receives one record per billing computation.

    Implementations must be safe to call from multiple threads.
    """

    @abstractmethod
    def emit(self, record: BillingLogRecord) -> None:
        """Emit a single billing record."""
        pass


class LoggingBillingSink(BillingLogSink):
    """Writes billing records through stdlib logging.

    SUCCESS records log at INFO, ERROR records at WARNING. The full record
    is attached as `extra={"billing": {...}}` for structured handlers.
    """

    def __init__(self, target: Optional[logging.Logger] = None):
        self.logger = target or logger

    def emit(self, record: BillingLogRecord) -> None:
        extra = {"billing": record.model_dump(mode="json")}

        if record.status == BillingStatus.SUCCESS:
            self.logger.info(
                f"Billing computed for customer {record.customer_id}: "
                f"tier={record.customer_tier}, usage={record.usage_amount}, "
                f"discount={record.discount_rate}, amount={record.amount}",
                extra=extra,
            )
        else:
            self.logger.warning(
                f"Billing failed for customer {record.customer_id!r}: "
                f"tier={record.customer_tier}, usage={record.usage_amount}, "
                f"error={record.error_message}",
                extra=extra,
            )


class InMemoryBillingSink(BillingLogSink):
    """Collects billing records in memory (tests, embedding)."""

    def __init__(self) -> None:
        self._records: list[BillingLogRecord] = []
        self._lock = threading.Lock()

    def emit(self, record: BillingLogRecord) -> None:
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[BillingLogRecord]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
