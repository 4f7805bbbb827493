"""
Scratch-file management for the disk benchmarks.

Creating, opening and reading the files the disk benchmarks exercise. Every
OS-level failure, short reads and short writes included, surfaces as
BenchmarkIOError carrying the path and the operation that failed.
"""

import os

from core.errors import BenchmarkIOError
from utils import print_progress

WRITE_CHUNK_SIZE = 1024 * 1024
PROGRESS_INTERVAL = 256 * 1024 * 1024


def create_test_file(path, filesize, chunk_size=WRITE_CHUNK_SIZE,
                     progress_interval=PROGRESS_INTERVAL, progress=print_progress):
    """
    Write a scratch file of exactly *filesize* bytes in *chunk_size* pieces.

    One progress marker is emitted per *progress_interval* bytes written.
    The chunk is random data so compressing filesystems cannot shrink it.

    Raises:
        BenchmarkIOError: on create/write failure or a short write.
    """
    chunk = os.urandom(min(chunk_size, filesize)) if filesize > 0 else b""
    try:
        f = open(path, "wb", buffering=0)
    except OSError as e:
        raise BenchmarkIOError(path, "create", e) from e

    with f:
        pos = 0
        since_marker = 0
        while pos < filesize:
            buf = chunk[:filesize - pos] if filesize - pos < len(chunk) else chunk
            try:
                wrote = f.write(buf)
            except OSError as e:
                raise BenchmarkIOError(path, "write", e) from e
            if wrote != len(buf):
                raise BenchmarkIOError(path, "write", f"short write {wrote}/{len(buf)} at offset {pos}")
            pos += wrote
            since_marker += wrote
            if progress_interval and since_marker >= progress_interval:
                progress()
                since_marker -= progress_interval
    return pos


def ensure_test_file(path, filesize, **kwargs):
    """
    Create *path* unless it already exists.

    Returns:
        bool: True if the file was created, False if an existing one was reused.
    """
    if os.path.exists(path):
        return False
    create_test_file(path, filesize, **kwargs)
    return True


def open_for_read(path):
    """Open *path* unbuffered for binary reads."""
    try:
        return open(path, "rb", buffering=0)
    except OSError as e:
        raise BenchmarkIOError(path, "open", e) from e


def file_length(fh, path):
    try:
        return os.fstat(fh.fileno()).st_size
    except OSError as e:
        raise BenchmarkIOError(path, "stat", e) from e


def remove_test_file(path):
    try:
        os.remove(path)
    except OSError as e:
        raise BenchmarkIOError(path, "delete", e) from e


class RandomChunkReader:
    """Work unit: read one chunk at the block the sampler picks next."""

    def __init__(self, fh, path, chunk_size, sampler):
        self.fh = fh
        self.path = path
        self.chunk_size = chunk_size
        self.sampler = sampler
        self.buf = bytearray(chunk_size)

    def __call__(self):
        pos = self.sampler.next() * self.chunk_size
        try:
            self.fh.seek(pos)
        except OSError as e:
            raise BenchmarkIOError(self.path, f"seek to pos {pos} in", e) from e
        try:
            amt = self.fh.readinto(self.buf)
        except OSError as e:
            raise BenchmarkIOError(self.path, "read", e) from e
        if amt != self.chunk_size:
            raise BenchmarkIOError(self.path, "read", f"short read {amt}/{self.chunk_size} at pos {pos}")


class WrappedReader:
    """
    Work unit: read sequentially, wrapping back to the start at end of data.

    A read that comes up short at end of file is replaced by exactly one read
    from offset 0; the wrap itself is not an extra operation, only `wraps`
    records it.
    """

    def __init__(self, fh, path, chunk_size):
        self.fh = fh
        self.path = path
        self.chunk_size = chunk_size
        self.buf = bytearray(chunk_size)
        self.reads = 0
        self.wraps = 0

    def rewind(self):
        try:
            self.fh.seek(0)
        except OSError as e:
            raise BenchmarkIOError(self.path, "seek to start", e) from e

    def _read(self):
        try:
            amt = self.fh.readinto(self.buf)
        except OSError as e:
            raise BenchmarkIOError(self.path, "read", e) from e
        self.reads += 1
        return amt or 0

    def __call__(self):
        if self._read() == self.chunk_size:
            return
        self.rewind()
        self.wraps += 1
        amt = self._read()
        if amt != self.chunk_size:
            raise BenchmarkIOError(
                self.path, "read",
                f"short read {amt}/{self.chunk_size} after wrap (file smaller than chunk?)",
            )

    def read_through(self, iterations):
        """Read *iterations* chunks from the start; used to pull a file into cache."""
        self.rewind()
        for _ in range(iterations):
            self()
