"""Concurrency tests for the billing calculator.

The calculator holds no shared mutable state, so concurrent computations
must produce the same values as sequential ones and the sink must receive
exactly one record per call.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

from billing_engine.calculator import BillingCalculator
from billing_engine.metering import InMemoryBillingSink
from billing_engine.schemas import BillingStatus


def test_concurrent_compute_50_threads():
    """
    50 threads x 20 computations each on a shared calculator.

    Success criteria:
    - Every result matches the sequential value for its input
    - Sink holds exactly 1000 records (no lost appends)
    """
    sink = InMemoryBillingSink()
    calculator = BillingCalculator(sink=sink)

    inputs = [
        ("BASIC", "500", Decimal("500.00")),
        ("PREMIUM", "999", Decimal("999.00")),
        ("PREMIUM", "1000", Decimal("950.00")),
        ("PREMIUM", "1000.333", Decimal("950.32")),
        ("ENTERPRISE", "123456.789", Decimal("123456.79")),
    ]

    def worker(thread_id: int) -> list[tuple[Decimal, Decimal]]:
        """Run 20 computations and pair each amount with its expectation."""
        pairs = []
        for i in range(20):
            tier, usage, expected = inputs[(thread_id + i) % len(inputs)]
            result = calculator.compute(f"CUST-{thread_id}-{i}", tier, usage)
            assert result.status == BillingStatus.SUCCESS
            pairs.append((result.amount, expected))
        return pairs

    with ThreadPoolExecutor(max_workers=50) as executor:
        futures = [executor.submit(worker, i) for i in range(50)]
        all_pairs = []
        for future in as_completed(futures):
            all_pairs.extend(future.result())

    assert len(all_pairs) == 1000
    for amount, expected in all_pairs:
        assert amount == expected

    assert len(sink.records) == 1000
    assert len({r.customer_id for r in sink.records}) == 1000
