#!/usr/bin/env python3
"""
Command-line tests: flag expansion, usage handling and exit codes.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import gsperf


@pytest.fixture
def quick_yaml(tmp_path):
    path = tmp_path / "quick.yaml"
    path.write_text(
        "cpu:\n"
        "  target_seconds: 0.02\n"
        "  buffer_size: 64\n"
        "  warmup_ops: 4\n"
        "cpu_float:\n"
        "  target_seconds: 0.02\n"
        "  vector_size: 32\n"
        "disk_cache:\n"
        "  file_size: 64K\n"
        "  chunk_sizes: [1K]\n"
        "  target_seconds: 0.02\n"
    )
    return str(path)


def _selection(argv):
    return gsperf.resolve_selection(gsperf.build_parser().parse_args(argv))


@pytest.mark.parametrize("argv,expected", [
    (["--cpu-int"], ["cpu_int"]),
    (["--cpu"], ["cpu_int", "cpu_float"]),
    (["--disk"], ["disk_physical", "disk_cache"]),
    (["--all"], ["cpu_int", "cpu_float", "disk_physical", "disk_cache"]),
    (["--disk-cache", "--cpu-float"], ["cpu_float", "disk_cache"]),
    (["-v"], []),
    ([], []),
])
def test_flag_expansion(argv, expected):
    assert _selection(argv) == expected


def test_no_arguments_selects_nothing(capsys):
    assert gsperf.main([]) == 1
    out = capsys.readouterr().out
    assert "No tests selected" in out
    assert out.count("Usage: perf") == 1


@pytest.mark.parametrize("argv", [["--bogus"], ["cpu"], ["--cp"], ["--cpu-int", "extra"], ["--config"], ["-vh"], ["-hv"]])
def test_unrecognized_argument_prints_usage(argv, capsys):
    assert gsperf.main(argv) == 1
    out = capsys.readouterr().out
    assert out.startswith("Usage: perf")
    assert "No tests selected" not in out


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help_exits_zero(flag, capsys):
    assert gsperf.main([flag, "--all"]) == 0
    assert capsys.readouterr().out.startswith("Usage: perf")


def test_cpu_int_end_to_end(quick_yaml, capsys):
    assert gsperf.main(["--cpu-int", "--config", quick_yaml]) == 0
    lines = capsys.readouterr().out.splitlines()

    assert lines.count("Testing CPU integer performance") == 1
    assert len([line for line in lines if line.endswith("/second")]) == 1


def test_disk_cache_in_workdir(quick_yaml, tmp_path, capsys):
    workdir = tmp_path / "scratch"
    workdir.mkdir()

    assert gsperf.main(["--disk-cache", "--config", quick_yaml, "--workdir", str(workdir)]) == 0
    out = capsys.readouterr().out

    assert "1K reads: " in out
    assert os.listdir(workdir) == []


def test_bad_config_exits_one(tmp_path, capsys):
    path = tmp_path / "bad.yaml"
    path.write_text("cpu:\n  warmup_ops: -3\n")

    assert gsperf.main(["--cpu-int", "--config", str(path)]) == 1
    out = capsys.readouterr().out
    assert "! ERROR: Config file validation failed" in out
    assert "cpu.warmup_ops" in out


def test_undecodable_config_exits_one(tmp_path, capsys):
    path = tmp_path / "latin.yaml"
    path.write_bytes(b"cpu:\n  target_seconds: \xff\xfe\n")

    assert gsperf.main(["--cpu-int", "--config", str(path)]) == 1
    assert "! ERROR: Couldn't read config file" in capsys.readouterr().out


def test_io_error_is_fatal(quick_yaml, tmp_path, capsys):
    missing = tmp_path / "does-not-exist"

    assert gsperf.main(["--disk-cache", "--config", quick_yaml, "--workdir", str(missing)]) == 1
    out = capsys.readouterr().out
    assert "! ERROR: Couldn't create" in out
    assert "reads: " not in out


def test_verbose_prints_host_banner(quick_yaml, capsys):
    assert gsperf.main(["--cpu-int", "-v", "--config", quick_yaml]) == 0
    out = capsys.readouterr().out
    assert "System Information" in out
    assert "Selected tests: cpu_int" in out
