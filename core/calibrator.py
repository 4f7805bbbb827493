"""
Adaptive timing calibration.

A short warm-up batch estimates how fast a work unit runs; the estimate then
sizes one bulk batch that fills the target duration. Timing whole batches
rather than single calls keeps clock granularity out of the rate.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from core.errors import CalibrationError

DEFAULT_WARMUP_OPS = 100
DEFAULT_MIN_SAMPLE_SECONDS = 0.01


@dataclass(frozen=True)
class CalibrationResult:
    """Outcome of one calibrated measurement."""
    operations: int
    elapsed: float
    rate: float

    @classmethod
    def from_counts(cls, operations: int, elapsed: float) -> "CalibrationResult":
        return cls(operations=operations, elapsed=elapsed, rate=operations / elapsed)


def run_batch(unit: Callable[[], object], count: int, clock: Callable[[], float]) -> float:
    """Invoke *unit* *count* times and return the elapsed seconds."""
    start = clock()
    for _ in range(count):
        unit()
    return clock() - start


def calibrate(
    unit: Callable[[], object],
    target_seconds: float,
    min_sample_seconds: float = DEFAULT_MIN_SAMPLE_SECONDS,
    warmup_ops: int = DEFAULT_WARMUP_OPS,
    max_operations: Optional[int] = None,
    clock: Callable[[], float] = time.perf_counter,
) -> CalibrationResult:
    """
    Measure the steady-state rate of a repeatable work unit.

    Phase 1 runs *warmup_ops* invocations, doubling the batch until it takes
    at least *min_sample_seconds*. Phase 2 runs however many further
    invocations the warm-up rate says are needed to reach *target_seconds*.

    Args:
        unit: Zero-argument callable with roughly constant per-call cost.
        target_seconds: Total measurement duration to aim for.
        min_sample_seconds: Shortest warm-up batch trusted for a rate estimate.
        warmup_ops: Size of the first warm-up batch.
        max_operations: Upper bound on invocations of *unit*, discarded
            warm-up batches included. None means unbounded.
        clock: Monotonic time source in seconds.

    Returns:
        CalibrationResult covering the accepted warm-up batch plus the bulk batch.

    Raises:
        CalibrationError: the operation budget ran out before any batch
            measured a non-zero elapsed time.
    """
    if warmup_ops < 1:
        raise ValueError(f"warmup_ops must be at least 1 (got {warmup_ops})")
    if max_operations is not None and max_operations < 1:
        raise ValueError(f"max_operations must be at least 1 (got {max_operations})")

    invoked = 0
    batch = warmup_ops
    while True:
        if max_operations is not None:
            batch = min(batch, max_operations - invoked)
        elapsed1 = run_batch(unit, batch, clock)
        invoked += batch
        if elapsed1 >= min_sample_seconds and elapsed1 > 0:
            break
        budget_left = max_operations is None or invoked < max_operations
        if not budget_left:
            if elapsed1 > 0:
                break
            raise CalibrationError(
                f"no measurable elapsed time after {invoked} operations"
            )
        batch *= 2
    ops_warmup = batch

    rate = ops_warmup / elapsed1
    remaining = max(0, round(target_seconds * rate) - ops_warmup)
    if max_operations is not None:
        remaining = min(remaining, max_operations - invoked)

    elapsed2 = 0.0
    if remaining > 0:
        elapsed2 = run_batch(unit, remaining, clock)

    return CalibrationResult.from_counts(ops_warmup + remaining, elapsed1 + elapsed2)
