"""
Owner-loop hand-off helpers.
"""

from .main_thread import (
    call_on_main_thread,
    get_main_event_loop,
    is_main_thread,
    set_main_event_loop,
)

__all__ = [
    "call_on_main_thread",
    "get_main_event_loop",
    "is_main_thread",
    "set_main_event_loop",
]
