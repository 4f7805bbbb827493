"""
Page-cache eviction before cold-read measurements.

One capability, one implementation per platform. Every implementation is
best-effort and idempotent; failures raise CacheFlushError, which callers
report as a warning and otherwise ignore.
"""

import os
import subprocess
import sys
from abc import ABC, abstractmethod

from core.errors import CacheFlushError


class CacheFlush(ABC):
    """Evict a file's cached pages (possibly more than that file's)."""

    description: str = ""

    @abstractmethod
    def flush(self, path: str) -> None:
        """
        Drop cached data for *path*.

        Raises:
            CacheFlushError: the platform refused or the tool is missing.
        """
        pass


class FadviseCacheFlush(CacheFlush):
    """Linux: fsync, then POSIX_FADV_DONTNEED across the whole file."""

    description = "posix_fadvise(DONTNEED)"

    def flush(self, path):
        try:
            fd = os.open(path, os.O_RDONLY)
        except OSError as e:
            raise CacheFlushError(f"couldn't open {path}: {e}") from e
        try:
            os.fsync(fd)
            os.posix_fadvise(fd, 0, 0, os.POSIX_FADV_DONTNEED)
        except OSError as e:
            raise CacheFlushError(f"posix_fadvise failed on {path}: {e}") from e
        finally:
            os.close(fd)


class PurgeCacheFlush(CacheFlush):
    """macOS: `purge` flushes the entire disk cache; there is no per-file option."""

    description = "purge (whole system cache)"

    def __init__(self, command=("purge",)):
        self.command = list(command)

    def flush(self, path):
        try:
            result = subprocess.run(self.command, capture_output=True, text=True)
        except OSError as e:
            raise CacheFlushError(f"couldn't run {' '.join(self.command)}: {e}") from e
        if result.returncode != 0:
            output = (result.stdout + result.stderr).strip()
            raise CacheFlushError(
                f"{' '.join(self.command)} exited {result.returncode}: {output} "
                f"(you might need to run as admin with sudo)"
            )


class NoBufferingCacheFlush(CacheFlush):
    """Windows: opening with FILE_FLAG_NO_BUFFERING discards the file's cached data."""

    description = "CreateFile(FILE_FLAG_NO_BUFFERING)"

    GENERIC_READ = 0x80000000
    FILE_SHARE_READ = 0x00000001
    FILE_SHARE_WRITE = 0x00000002
    OPEN_EXISTING = 3
    FILE_FLAG_NO_BUFFERING = 0x20000000
    INVALID_HANDLE_VALUE = -1

    def flush(self, path):
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        kernel32.CreateFileW.restype = wintypes.HANDLE
        handle = kernel32.CreateFileW(
            os.path.abspath(path),
            self.GENERIC_READ,
            self.FILE_SHARE_READ | self.FILE_SHARE_WRITE,
            None,
            self.OPEN_EXISTING,
            self.FILE_FLAG_NO_BUFFERING,
            None,
        )
        if handle is None or handle == wintypes.HANDLE(self.INVALID_HANDLE_VALUE).value:
            raise CacheFlushError(
                f"CreateFile({path}) failed: {ctypes.WinError(ctypes.get_last_error())}"
            )
        kernel32.CloseHandle(handle)


class NullCacheFlush(CacheFlush):
    """Platforms with no known eviction mechanism."""

    description = "unsupported"

    def __init__(self, platform_name=""):
        self.platform_name = platform_name

    def flush(self, path):
        raise CacheFlushError(
            f"no cache flush available on platform '{self.platform_name}'; "
            "physical reads may be served from cache"
        )


def get_cache_flusher(platform_name=None) -> CacheFlush:
    """Pick the CacheFlush implementation for *platform_name* (default: this host)."""
    if platform_name is None:
        platform_name = sys.platform
    if platform_name.startswith("linux") and hasattr(os, "posix_fadvise"):
        return FadviseCacheFlush()
    if platform_name == "darwin":
        return PurgeCacheFlush()
    if platform_name == "win32":
        return NoBufferingCacheFlush()
    return NullCacheFlush(platform_name)
