#!/usr/bin/env python3
"""
Tests for scratch-file creation and the read work units.
"""

import os
import random
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.errors import BenchmarkIOError, SampleSpaceExhausted
from core.sampler import BlockSampler
from core.scratch import (
    RandomChunkReader,
    WrappedReader,
    create_test_file,
    ensure_test_file,
    open_for_read,
    remove_test_file,
)


def test_created_file_has_exact_length(tmp_path):
    path = tmp_path / "scratch"
    filesize = 10 * 1024 + 123

    written = create_test_file(str(path), filesize, chunk_size=1024, progress=lambda: None)

    assert written == filesize
    assert path.stat().st_size == filesize


def test_progress_marker_per_interval(tmp_path):
    markers = []
    create_test_file(str(tmp_path / "scratch"), 5000, chunk_size=1000,
                     progress_interval=2000, progress=lambda: markers.append("."))
    assert len(markers) == 2


def test_default_progress_goes_to_stderr(tmp_path, capsys):
    create_test_file(str(tmp_path / "scratch"), 4096, chunk_size=1024, progress_interval=1024)
    captured = capsys.readouterr()
    assert captured.err == "...."
    assert captured.out == ""


def test_ensure_reuses_existing_file(tmp_path):
    path = tmp_path / "big"
    path.write_bytes(b"x" * 100)

    assert ensure_test_file(str(path), 4096, progress=lambda: None) is False
    assert path.stat().st_size == 100

    other = tmp_path / "fresh"
    assert ensure_test_file(str(other), 4096, progress=lambda: None) is True
    assert other.stat().st_size == 4096


def test_create_in_missing_directory_is_io_error(tmp_path):
    with pytest.raises(BenchmarkIOError) as excinfo:
        create_test_file(str(tmp_path / "nope" / "scratch"), 10)
    assert excinfo.value.operation == "create"
    assert "nope" in excinfo.value.path


def test_open_and_remove_missing_file(tmp_path):
    missing = str(tmp_path / "missing")
    with pytest.raises(BenchmarkIOError) as excinfo:
        open_for_read(missing)
    assert excinfo.value.operation == "open"

    with pytest.raises(BenchmarkIOError) as excinfo:
        remove_test_file(missing)
    assert excinfo.value.operation == "delete"


def test_wrapped_reader_issues_one_extra_read_per_wrap(tmp_path):
    path = tmp_path / "small"
    path.write_bytes(bytes(4096))

    with open_for_read(str(path)) as fh:
        reader = WrappedReader(fh, str(path), 1024)
        reader.rewind()
        for _ in range(10):
            reader()

    # Calls 5 and 9 hit end of file and are replaced by one read from the start
    assert reader.wraps == 2
    assert reader.reads == 12


def test_wrapped_reader_no_wrap_on_happy_path(tmp_path):
    path = tmp_path / "small"
    path.write_bytes(bytes(8192))

    with open_for_read(str(path)) as fh:
        reader = WrappedReader(fh, str(path), 1024)
        reader.read_through(8)

    assert reader.wraps == 0
    assert reader.reads == 8


def test_wrapped_reader_partial_tail_wraps(tmp_path):
    path = tmp_path / "odd"
    path.write_bytes(bytes(2500))

    with open_for_read(str(path)) as fh:
        reader = WrappedReader(fh, str(path), 1024)
        reader.read_through(3)

    assert reader.wraps == 1
    assert reader.reads == 4


def test_wrapped_reader_file_smaller_than_chunk(tmp_path):
    path = tmp_path / "tiny"
    path.write_bytes(bytes(100))

    with open_for_read(str(path)) as fh:
        reader = WrappedReader(fh, str(path), 1024)
        with pytest.raises(BenchmarkIOError):
            reader()


def test_random_reader_visits_unique_blocks(tmp_path):
    path = tmp_path / "blocks"
    block = 512
    total_blocks = 16
    path.write_bytes(b"".join(bytes([i]) * block for i in range(total_blocks)))

    offsets = []

    class RecordingSampler(BlockSampler):
        def next(self):
            index = super().next()
            offsets.append(index)
            return index

    sampler = RecordingSampler(total_blocks, random.Random(3))
    with open_for_read(str(path)) as fh:
        reader = RandomChunkReader(fh, str(path), block, sampler)
        for _ in range(total_blocks):
            reader()
            assert reader.buf == bytes([offsets[-1]]) * block

        with pytest.raises(SampleSpaceExhausted):
            reader()

    assert sorted(offsets) == list(range(total_blocks))


def test_random_reader_short_read_is_io_error(tmp_path):
    path = tmp_path / "short"
    path.write_bytes(bytes(1500))

    class LastBlock(random.Random):
        def randrange(self, *args, **kwargs):
            return 1

    with open_for_read(str(path)) as fh:
        # Claim two 1K blocks although the second is only half there
        reader = RandomChunkReader(fh, str(path), 1024, BlockSampler(2, LastBlock()))
        with pytest.raises(BenchmarkIOError) as excinfo:
            reader()
    assert "short read" in str(excinfo.value)
