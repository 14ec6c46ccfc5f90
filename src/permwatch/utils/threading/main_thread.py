"""Utilities for handing work to the owning event loop from other threads."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, Optional

_main_loop: Optional[asyncio.AbstractEventLoop] = None
_main_thread_id: Optional[int] = None


def set_main_event_loop(loop: Optional[asyncio.AbstractEventLoop]) -> None:
    """Register (or clear with None) the owning event loop and its thread."""
    global _main_loop, _main_thread_id
    _main_loop = loop
    _main_thread_id = threading.get_ident() if loop is not None else None


def get_main_event_loop() -> Optional[asyncio.AbstractEventLoop]:
    return _main_loop


def is_main_thread() -> bool:
    """Return True if the current thread is the registered owner thread."""
    return _main_thread_id is not None and threading.get_ident() == _main_thread_id


def call_on_main_thread(func: Callable[..., Any], *args: Any) -> None:
    """
    Schedule a callable on the owner loop without waiting for it.

    Runs inline when already on the owner thread.

    Raises:
        RuntimeError: If no running owner loop is registered
    """
    if is_main_thread():
        func(*args)
        return

    if _main_loop is None or _main_loop.is_closed() or not _main_loop.is_running():
        raise RuntimeError("No running owner event loop registered")

    _main_loop.call_soon_threadsafe(func, *args)
