"""
Base class for gsperf benchmarks.
All benchmarks must inherit from this class.
"""

from abc import ABC, abstractmethod

from core.reporter import format_results_table
from utils import print_section, print_bullet


class BenchmarkBase(ABC):
    """Abstract base class for all gsperf benchmarks."""

    name: str = ""
    description: str = ""
    banner: str = ""

    def __init__(self, verbose=False):
        self.verbose = verbose

    @abstractmethod
    def run(self, config: dict) -> list:
        """
        Execute the benchmark.

        Args:
            config: Effective gsperf configuration (see core.config).

        Returns:
            list: BenchmarkResult per chunk size, in the order measured.
        """
        pass

    def print_results(self, results):
        """Print the chunk size -> throughput table."""
        print_section(f"{self.description} Results")
        for row in format_results_table(results):
            print_bullet(row)
