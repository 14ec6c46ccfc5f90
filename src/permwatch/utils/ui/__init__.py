"""
Terminal output helpers.
"""

from .permission_table import (
    build_permission_table,
    console,
    format_state,
    print_change,
    print_report,
)
from .theme import THEME

__all__ = [
    "THEME",
    "build_permission_table",
    "console",
    "format_state",
    "print_change",
    "print_report",
]
