"""
Core measurement machinery plus host information for the banner.
"""

import os
import platform
import sys

from utils import print_section, color_text

from core.calibrator import CalibrationResult, calibrate
from core.sampler import BlockSampler, SampleSpace, next_block, probe_stride
from core.reporter import (
    BenchmarkResult,
    format_bytes_rate,
    format_results_table,
    format_status,
    format_throughput,
    size_tag,
)
from core.errors import (
    GsperfError,
    ConfigError,
    BenchmarkIOError,
    CacheFlushError,
    SampleSpaceExhausted,
    CalibrationError,
)


def get_system_info():
    """Collect basic facts about the host."""
    return {
        "platform": platform.platform(),
        "machine": platform.machine() or "N/A",
        "processor": platform.processor() or "N/A",
        "python": platform.python_version(),
        "cores": os.cpu_count() or "N/A",
        "sys_platform": sys.platform,
    }


def print_system_info_table(system_info):
    """Display system information in a formatted table."""
    print_section("System Information")
    fields = [
        ("Platform", system_info.get("platform", "N/A")),
        ("Machine", system_info.get("machine", "N/A")),
        ("Processor", system_info.get("processor", "N/A")),
        ("Logical Cores", system_info.get("cores", "N/A")),
        ("Python", system_info.get("python", "N/A")),
    ]

    max_field_length = max(len(field[0]) for field in fields)
    max_value_length = max(len(str(field[1])) for field in fields)

    # Print table header
    print(color_text(f"{'Field'.ljust(max_field_length)} | {'Value'.ljust(max_value_length)}", "BOLD"))
    print(color_text(f"{'-' * max_field_length}-+-{'-' * max_value_length}", "GREEN"))

    # Print table rows
    for field, value in fields:
        print(f"{color_text(field.ljust(max_field_length), 'CYAN')} | {str(value).ljust(max_value_length)}")
