"""Utility modules for monava.

This module exports commonly used utility functions.
"""

from monava.utils.formatting import (
    console,
    create_dependency_table,
    create_package_table,
    err_console,
    format_dependency_row,
    format_package_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_dependency_table",
    "create_package_table",
    "err_console",
    "format_dependency_row",
    "format_package_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
