"""
CPU benchmarks - single-core integer (CRC-16) and floating-point throughput.
"""

import math

from benchmarks.base import BenchmarkBase
from core.calibrator import calibrate
from core.checksum import ccitt_crc16, finalize_crc16, CRC16_SEED
from core.reporter import BenchmarkResult, format_throughput, format_status
from utils import print_debug


class Crc16WorkUnit:
    """One CRC-16 over a fixed buffer, chaining the running CRC between calls."""

    def __init__(self, buffer_size):
        self.buf = bytes(i & 255 for i in range(buffer_size))
        self.crc = CRC16_SEED

    def __call__(self):
        self.crc = ccitt_crc16(self.buf, self.crc)

    @property
    def checksum(self):
        return finalize_crc16(self.crc)


class FloatKernelWorkUnit:
    """One multiply-add/sqrt pass over a fixed vector of floats."""

    def __init__(self, vector_size):
        self.xs = [1.0 + i / vector_size for i in range(vector_size)]
        self.acc = 0.0

    def __call__(self):
        acc = 0.0
        for x in self.xs:
            acc += math.sqrt(x * 1.000001 + 0.5) * x
        self.acc = acc


class CpuIntegerBenchmark(BenchmarkBase):
    """CRC-16 checksums per second over a 32 KiB buffer."""

    name = "cpu_int"
    description = "CPU Integer"
    banner = "Testing CPU integer performance"

    def run(self, config: dict) -> list:
        settings = config["cpu"]
        print(self.banner)

        unit = Crc16WorkUnit(settings["buffer_size"])
        result = calibrate(
            unit,
            target_seconds=settings["target_seconds"],
            min_sample_seconds=config["calibration"]["min_sample_seconds"],
            warmup_ops=settings["warmup_ops"],
        )
        print_debug(f"buffer {settings['buffer_size']} bytes, {format_status(result)}", self.verbose)
        print(f"ccitt_crc16 {unit.checksum:04X}: {format_throughput(result)}")
        return [BenchmarkResult.from_calibration("ccitt_crc16", None, result)]


class CpuFloatBenchmark(BenchmarkBase):
    """Floating-point kernel passes per second."""

    name = "cpu_float"
    description = "CPU Float"
    banner = "Testing CPU float performance"

    def run(self, config: dict) -> list:
        settings = config["cpu_float"]
        print(self.banner)

        unit = FloatKernelWorkUnit(settings["vector_size"])
        result = calibrate(
            unit,
            target_seconds=settings["target_seconds"],
            min_sample_seconds=config["calibration"]["min_sample_seconds"],
            warmup_ops=settings["warmup_ops"],
        )
        print_debug(f"vector {settings['vector_size']} floats, {format_status(result)}", self.verbose)
        print(f"float_kernel: {format_throughput(result)}")
        return [BenchmarkResult.from_calibration("float_kernel", None, result)]
