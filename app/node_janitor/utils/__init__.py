"""Utility modules for node-janitor.

This module exports commonly used utility functions.
"""

from node_janitor.utils.formatting import (
    console,
    err_console,
    format_bytes,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from node_janitor.utils.shell import CommandResult, command_exists, run_command
from node_janitor.utils.units import (
    InvalidFormatError,
    parse_duration,
    parse_duration_range,
    parse_size,
)

__all__ = [
    "CommandResult",
    "InvalidFormatError",
    "command_exists",
    "console",
    "err_console",
    "format_bytes",
    "parse_duration",
    "parse_duration_range",
    "parse_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
