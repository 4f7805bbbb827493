"""
gsperf Benchmarks Module

Available benchmarks:
- CpuIntegerBenchmark: CRC-16 checksums per second
- CpuFloatBenchmark: floating-point kernel passes per second
- DiskPhysicalBenchmark: cold random reads of unique blocks from a large scratch file
- DiskCacheBenchmark: cached sequential wrap-around reads of a small scratch file
"""

from benchmarks.base import BenchmarkBase
from benchmarks.cpu import CpuIntegerBenchmark, CpuFloatBenchmark
from benchmarks.disk_physical import DiskPhysicalBenchmark
from benchmarks.disk_cache import DiskCacheBenchmark

# Run order when several tests are selected
BENCHMARKS = {
    "cpu_int": CpuIntegerBenchmark,
    "cpu_float": CpuFloatBenchmark,
    "disk_physical": DiskPhysicalBenchmark,
    "disk_cache": DiskCacheBenchmark,
}

__all__ = [
    'BenchmarkBase', 'CpuIntegerBenchmark', 'CpuFloatBenchmark',
    'DiskPhysicalBenchmark', 'DiskCacheBenchmark', 'BENCHMARKS',
]
