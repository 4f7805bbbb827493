"""
Throughput formatting for gsperf results.

Pure functions only; benchmarks and the CLI do the printing.
"""

from dataclasses import dataclass
from typing import List, Optional

from core.calibrator import CalibrationResult

RATE_UNITS = [("GB", 1024 ** 3), ("MB", 1024 ** 2), ("KB", 1024)]

SIZE_SUFFIXES = {"K": 1024, "M": 1024 ** 2, "G": 1024 ** 3}


@dataclass
class BenchmarkResult:
    """One measured chunk size (or one CPU run) of a benchmark."""
    label: str
    chunk_size: Optional[int]
    operations: int
    elapsed: float
    rate: float

    @property
    def bytes_per_second(self) -> Optional[float]:
        if self.chunk_size is None:
            return None
        return self.rate * self.chunk_size

    @classmethod
    def from_calibration(cls, label, chunk_size, result: CalibrationResult):
        return cls(
            label=label,
            chunk_size=chunk_size,
            operations=result.operations,
            elapsed=result.elapsed,
            rate=result.rate,
        )


def size_tag(size_bytes: int) -> str:
    """Short tag for a chunk size: 1024 -> '1K', 4 MiB -> '4M'."""
    for suffix, mult in sorted(SIZE_SUFFIXES.items(), key=lambda item: -item[1]):
        if size_bytes >= mult and size_bytes % mult == 0:
            return f"{size_bytes // mult}{suffix}"
    return str(size_bytes)


def parse_size(value) -> int:
    """Parse 4096, '4096', '4K' or '1M' into bytes."""
    if isinstance(value, bool):
        raise ValueError(f"invalid size: {value!r}")
    if isinstance(value, int):
        return value
    s = str(value).strip().upper()
    if s.endswith("B"):
        s = s[:-1]
    if s and s[-1] in SIZE_SUFFIXES:
        return int(s[:-1]) * SIZE_SUFFIXES[s[-1]]
    return int(s)


def format_bytes_rate(bytes_per_second: float) -> str:
    """Render a byte rate with a scaled unit."""
    for unit, mult in RATE_UNITS:
        if bytes_per_second >= mult:
            return f"{bytes_per_second / mult:.2f} {unit}/sec"
    return f"{bytes_per_second:.0f} bytes/sec"


def format_throughput(result: CalibrationResult, unit_size: Optional[int] = None) -> str:
    """
    Format a calibration result as a rate.

    Args:
        result: Calibration outcome.
        unit_size: Bytes moved per operation, or None to report raw ops/sec.
    """
    if unit_size is None:
        return f"{int(result.rate)}/second"
    return format_bytes_rate(result.rate * unit_size)


def format_status(result: CalibrationResult) -> str:
    """Per-chunk status suffix: '<ops> in <secs> sec'."""
    return f"{result.operations} in {result.elapsed:.2f} sec"


def format_results_table(results: List[BenchmarkResult]) -> List[str]:
    """Final table rows, one per chunk size: '<tag> reads: <rate>'."""
    rows = []
    for result in results:
        if result.chunk_size is None:
            rows.append(f"{result.label}: {int(result.rate)}/second")
        else:
            rows.append(f"{result.label} reads: {format_bytes_rate(result.bytes_per_second)}")
    return rows
