"""
Exception hierarchy for gsperf.

Library code raises these; only the CLI entry point turns them into exit codes.
"""


class GsperfError(Exception):
    """Base class for all gsperf failures."""


class ConfigError(GsperfError):
    """Bad command-line input or configuration file."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])


class BenchmarkIOError(GsperfError):
    """A create/open/seek/read/write/delete on a scratch file failed."""

    def __init__(self, path, operation, cause):
        self.path = path
        self.operation = operation
        self.cause = cause
        super().__init__(f"Couldn't {operation} {path}: {cause}")


class CacheFlushError(GsperfError):
    """The platform could not evict a file from the page cache. Non-fatal."""


class SampleSpaceExhausted(GsperfError):
    """Every block in a sample space has already been drawn."""


class CalibrationError(GsperfError):
    """A work unit never produced a measurable elapsed time."""
