#!/usr/bin/env python3
"""
gsperf - simple cross-platform CPU and disk performance benchmark

Modular architecture with core functionality split into:
- utils: Console formatting helpers
- core: Calibration, block sampling, reporting, scratch files, cache flushing
- benchmarks: Individual benchmark implementations

This script serves as the user interface and coordination layer. It is the
only place that decides the process exit code.
"""

import argparse
import sys

from utils import print_error, print_info, print_header
from core import get_system_info, print_system_info_table
from core.config import build_config
from core.errors import ConfigError, GsperfError
from benchmarks import BENCHMARKS

USAGE = ("Usage: perf [--cpu] [--cpu-int] [--cpu-float]\n"
         "            [--disk] [--disk-physical] [--disk-cache]\n"
         "            [--all] [-v|--verbose] [-h|--help]\n"
         "            [--config FILE] [--workdir DIR]\n")


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad input as ConfigError instead of exiting."""

    def parse_args(self, args=None, namespace=None):
        args = sys.argv[1:] if args is None else list(args)
        # Every flag stands alone: bundled short flags like -vh are unrecognized
        for arg in args:
            if arg.startswith('-') and not arg.startswith('--') and len(arg) > 2:
                self.error(f"unrecognized arguments: {arg}")
        return super().parse_args(args, namespace)

    def error(self, message):
        raise ConfigError(message)


# ── Argument parsing ─────────────────────────────────────────────────────

def build_parser():
    """Build the argument parser with all CLI options."""
    parser = UsageArgumentParser(prog="perf", add_help=False, allow_abbrev=False)

    parser.add_argument('--cpu-int', action='store_true', default=False)
    parser.add_argument('--cpu-float', action='store_true', default=False)
    parser.add_argument('--cpu', action='store_true', default=False,
                        help='Shorthand for --cpu-int --cpu-float')

    parser.add_argument('--disk-physical', action='store_true', default=False)
    parser.add_argument('--disk-cache', action='store_true', default=False)
    parser.add_argument('--disk', action='store_true', default=False,
                        help='Shorthand for --disk-physical --disk-cache')

    parser.add_argument('--all', action='store_true', default=False,
                        help='Shorthand for --cpu --disk')
    parser.add_argument('-v', '--verbose', action='store_true', default=False)
    parser.add_argument('-h', '--help', action='store_true', default=False)

    parser.add_argument('--config', type=str, default=None,
                        help='Path to JSON or YAML tuning file')
    parser.add_argument('--workdir', type=str, default=None,
                        help='Directory for scratch files (default: current directory)')
    return parser


def resolve_selection(args):
    """Expand shorthand flags and return the selected tests in run order."""
    # --all is shorthand for all tests
    if args.all:
        args.cpu = True
        args.disk = True

    # --cpu is shorthand for all cpu tests
    if args.cpu:
        args.cpu_int = True
        args.cpu_float = True

    # --disk is shorthand for all disk tests
    if args.disk:
        args.disk_physical = True
        args.disk_cache = True

    return [name for name in BENCHMARKS if getattr(args, name)]


def usage():
    print(USAGE, end="")


def main(argv=None):
    """Parse arguments, run the selected benchmarks, return the exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except ConfigError:
        usage()
        return 1

    if args.help:
        usage()
        return 0

    selected = resolve_selection(args)
    if not selected:
        print("No tests selected")
        usage()
        return 1

    try:
        config = build_config(args.config, args.workdir)
    except ConfigError as e:
        print_error(str(e))
        for err in e.errors:
            print_error(f"  • {err}")
        return 1

    if args.verbose:
        print_header("gsperf")
        print_system_info_table(get_system_info())
        print_info(f"Selected tests: {', '.join(selected)}")

    try:
        for name in selected:
            BENCHMARKS[name](verbose=args.verbose).run(config)
    except GsperfError as e:
        print()
        print_error(str(e))
        return 1

    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
