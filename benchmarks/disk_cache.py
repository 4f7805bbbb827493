"""
Disk cache benchmark - repeated sequential reads of a small file that stays
in the OS filesystem cache.
"""

import os

from benchmarks.base import BenchmarkBase
from core.calibrator import calibrate
from core.reporter import BenchmarkResult, format_status, size_tag
from core.scratch import WrappedReader, create_test_file, open_for_read, remove_test_file
from utils import print_debug, print_status

PRIME_CHUNK_SIZE = 1024 * 1024


class DiskCacheBenchmark(BenchmarkBase):
    """Cached sequential reads at a range of chunk sizes."""

    name = "disk_cache"
    description = "Disk Cache"
    banner = "Testing disk cache performance"

    def _prime(self, fh, path, file_size):
        """Read the whole file once so it is resident in cache."""
        chunk = min(PRIME_CHUNK_SIZE, file_size)
        primer = WrappedReader(fh, path, chunk)
        primer.read_through(max(1, file_size // chunk))

    def run(self, config: dict) -> list:
        settings = config["disk_cache"]
        path = os.path.join(config["workdir"], settings["path"])
        print(self.banner)

        create_test_file(
            path, settings["file_size"],
            chunk_size=config["write_chunk_size"],
            progress_interval=config["progress_interval"],
        )

        results = []
        with open_for_read(path) as fh:
            self._prime(fh, path, settings["file_size"])

            for chunk_size in settings["chunk_sizes"]:
                tag = size_tag(chunk_size)
                print_status(f"Doing {tag} reads...")

                reader = WrappedReader(fh, path, chunk_size)
                reader.rewind()
                result = calibrate(
                    reader,
                    target_seconds=settings["target_seconds"],
                    min_sample_seconds=config["calibration"]["min_sample_seconds"],
                    warmup_ops=settings["warmup_ops"],
                )
                print(format_status(result))
                print_debug(f"{reader.reads} reads issued, {reader.wraps} wraps", self.verbose)
                results.append(BenchmarkResult.from_calibration(tag, chunk_size, result))

        remove_test_file(path)

        self.print_results(results)
        return results
