#!/usr/bin/env python3
"""
Tests for per-platform cache flush selection and failure reporting.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.cache_flush import (
    FadviseCacheFlush,
    NoBufferingCacheFlush,
    NullCacheFlush,
    PurgeCacheFlush,
    get_cache_flusher,
)
from core.errors import CacheFlushError, GsperfError


def test_platform_selection():
    assert isinstance(get_cache_flusher("darwin"), PurgeCacheFlush)
    assert isinstance(get_cache_flusher("win32"), NoBufferingCacheFlush)
    assert isinstance(get_cache_flusher("sunos5"), NullCacheFlush)


@pytest.mark.skipif(not hasattr(os, "posix_fadvise"), reason="needs posix_fadvise")
def test_linux_uses_fadvise():
    assert isinstance(get_cache_flusher("linux"), FadviseCacheFlush)


def test_unsupported_platform_raises_flush_error(tmp_path):
    flusher = NullCacheFlush("sunos5")
    with pytest.raises(CacheFlushError, match="sunos5"):
        flusher.flush(str(tmp_path / "whatever"))


def test_flush_error_is_a_gsperf_error():
    assert issubclass(CacheFlushError, GsperfError)


@pytest.mark.skipif(not hasattr(os, "posix_fadvise"), reason="needs posix_fadvise")
def test_fadvise_flush_on_real_file(tmp_path):
    path = tmp_path / "data"
    path.write_bytes(bytes(8192))

    flusher = FadviseCacheFlush()
    flusher.flush(str(path))
    flusher.flush(str(path))


@pytest.mark.skipif(not hasattr(os, "posix_fadvise"), reason="needs posix_fadvise")
def test_fadvise_flush_missing_file(tmp_path):
    with pytest.raises(CacheFlushError):
        FadviseCacheFlush().flush(str(tmp_path / "missing"))


@pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX commands")
def test_purge_failure_is_reported():
    with pytest.raises(CacheFlushError, match="exited 1"):
        PurgeCacheFlush(command=["false"]).flush("ignored")


def test_purge_missing_tool_is_reported():
    with pytest.raises(CacheFlushError, match="couldn't run"):
        PurgeCacheFlush(command=["gsperf-no-such-purge-tool"]).flush("ignored")
