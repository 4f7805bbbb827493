"""
gsperf Utilities
Console formatting helpers shared by the CLI and every benchmark.
"""

import sys

# ANSI color codes
COLORS = {
    "HEADER": "\033[95m",
    "BLUE": "\033[94m",
    "CYAN": "\033[96m",
    "GREEN": "\033[92m",
    "YELLOW": "\033[93m",
    "RED": "\033[91m",
    "BOLD": "\033[1m",
    "UNDERLINE": "\033[4m",
    "ENDC": "\033[0m",
}


def color_text(text, color_name):
    """Apply color to text if output is a terminal"""
    if sys.stdout.isatty() and color_name in COLORS:
        return f"{COLORS[color_name]}{text}{COLORS['ENDC']}"
    return text


def print_header(title):
    """Print a formatted header with separators"""
    separator = "#" * 60
    print()
    print(color_text(separator, "BLUE"))
    print(color_text(f"# {title.center(56)} #", "BOLD"))
    print(color_text(separator, "BLUE"))
    print()


def print_section(title):
    """Print a section separator"""
    separator = "=" * 60
    print()
    print(color_text(separator, "GREEN"))
    print(color_text(f" {title} ", "BOLD"))
    print(color_text(separator, "GREEN"))
    print()


def print_warning(message):
    """Print a warning message"""
    print(color_text(f"! WARNING: {message}", "YELLOW"))


def print_error(message):
    """Print an error message"""
    print(color_text(f"! ERROR: {message}", "RED"))


def print_info(message):
    """Print an informational message"""
    print(color_text(f"* {message}", "CYAN"))


def print_bullet(message):
    """Print a bullet point"""
    print(color_text(f"• {message}", "ENDC"))


def print_debug(message, verbose):
    """Print a detail line, only when running verbose"""
    if verbose:
        print(color_text(f"  . {message}", "HEADER"))


def print_status(message):
    """Print a status fragment without ending the line"""
    print(message, end="", flush=True)


def print_progress(marker="."):
    """Print a progress marker on stderr so stdout stays parseable"""
    sys.stderr.write(marker)
    sys.stderr.flush()
