"""
Physical disk benchmark - random unique-block reads from a large scratch file.

The scratch file is evicted from the page cache before every chunk size, and
the block sampler never hands out the same block twice in a pass, so every
read has to reach the device.
"""

import os

from benchmarks.base import BenchmarkBase
from core.cache_flush import get_cache_flusher
from core.calibrator import calibrate
from core.errors import BenchmarkIOError, CacheFlushError
from core.reporter import BenchmarkResult, format_status, size_tag
from core.sampler import BlockSampler
from core.scratch import (
    RandomChunkReader, ensure_test_file, file_length, open_for_read,
)
from utils import print_debug, print_progress, print_status, print_warning


class DiskPhysicalBenchmark(BenchmarkBase):
    """Cold random reads at a range of chunk sizes."""

    name = "disk_physical"
    description = "Physical Disk"
    banner = "Testing physical disk performance"

    def __init__(self, verbose=False, flusher=None, rng=None):
        super().__init__(verbose)
        self.flusher = flusher if flusher is not None else get_cache_flusher()
        self.rng = rng

    def _prepare_file(self, path, settings, config):
        # Too large to recreate every run, so it is left behind for reuse
        if os.path.exists(path):
            print_debug(f"Reusing existing {path}", self.verbose)
            return
        print_progress("Creating large file (will not be deleted)...")
        ensure_test_file(
            path, settings["file_size"],
            chunk_size=config["write_chunk_size"],
            progress_interval=config["progress_interval"],
        )
        print_progress("\n")

    def _flush(self, path):
        try:
            self.flusher.flush(path)
        except CacheFlushError as e:
            print_warning(f"Cache flush failed, reads may be served from cache: {e}")

    def run(self, config: dict) -> list:
        settings = config["disk_physical"]
        path = os.path.join(config["workdir"], settings["path"])
        print(self.banner)
        self._prepare_file(path, settings, config)

        results = []
        for chunk_size in settings["chunk_sizes"]:
            tag = size_tag(chunk_size)
            self._flush(path)
            print_status(f"Doing {tag} reads...")

            with open_for_read(path) as fh:
                total_blocks = file_length(fh, path) // chunk_size
                if total_blocks < 1:
                    raise BenchmarkIOError(path, "read", f"file is smaller than one {tag} chunk")
                sampler = BlockSampler(total_blocks, self.rng)
                reader = RandomChunkReader(fh, path, chunk_size, sampler)
                result = calibrate(
                    reader,
                    target_seconds=settings["target_seconds"],
                    min_sample_seconds=config["calibration"]["min_sample_seconds"],
                    warmup_ops=settings["warmup_ops"],
                    max_operations=max(1, total_blocks // 2),
                )

            if self.verbose:
                print(f"{format_status(result)} ({sampler.probes})")
            else:
                print(format_status(result))
            print_debug(f"{sampler.drawn} of {total_blocks} blocks drawn, stride {sampler.stride}", self.verbose)
            results.append(BenchmarkResult.from_calibration(tag, chunk_size, result))

        self.print_results(results)
        return results
