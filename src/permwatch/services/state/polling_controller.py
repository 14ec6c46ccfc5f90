"""
Display-scoped periodic rechecks for ungranted capabilities.

Any consumer that shows a capability (a settings card, a CLI watch loop,
a health endpoint) owns a display handle. While the display is active and
the capability is not granted, one poll entry rechecks it at a fixed
interval. Entries end when the capability becomes granted or the display
goes away, whichever comes first.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Tuple

from ...schemas.capability import CapabilityKind, CapabilityState, StateChange
from .permission_monitor import PermissionMonitor

logger = logging.getLogger(__name__)

EntryKey = Tuple[CapabilityKind, Hashable]


@dataclass(eq=False)
class PollEntry:
    """A scheduled recheck loop for one (kind, display handle) pair."""

    kind: CapabilityKind
    display_handle: Hashable
    interval: float
    task: Optional["asyncio.Task[None]"] = field(default=None, repr=False)
    active: bool = True
    ticks: int = 0

    def cancel(self) -> bool:
        """
        Stop scheduling further ticks. A tick already in flight still
        completes and updates state.

        Returns:
            True on the first call, False on every later call
        """
        if not self.active:
            return False
        self.active = False
        task = self.task
        if task is not None and not task.done():
            try:
                current = asyncio.current_task()
            except RuntimeError:
                current = None
            if task is not current:
                task.cancel()
        return True


class PollingController:
    """
    Owns every poll entry. Entries are never shared across display handles.

    Also remembers which displays are active so that a capability revoked
    while shown is polled again.
    """

    def __init__(self, monitor: PermissionMonitor, interval: Optional[float] = None):
        """
        Args:
            monitor: Monitor whose check() each tick invokes
            interval: Default tick interval (monitor config's poll_interval if None)
        """
        self._monitor = monitor
        self._default_interval = (
            interval if interval is not None else monitor.config.poll_interval
        )
        self._entries: Dict[EntryKey, PollEntry] = {}
        self._displays: Dict[EntryKey, float] = {}
        self._token: Optional[int] = monitor.subscribe(self._on_change)

    def start_polling(
        self,
        kind: CapabilityKind,
        display_handle: Hashable,
        interval: Optional[float] = None,
    ) -> Optional[PollEntry]:
        """
        Begin polling a capability for a display.

        An existing entry for the same (kind, display_handle) is cancelled
        and replaced. No entry is created when the capability is already
        granted.

        Returns:
            The new entry, or None if the capability is already granted
        """
        interval = self._default_interval if interval is None else interval
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")

        key = (kind, display_handle)
        self._displays[key] = interval

        existing = self._entries.get(key)
        if existing is not None:
            logger.warning(
                "Duplicate poll entry for %s on display %r; replacing it",
                kind.value,
                display_handle,
            )
            self._teardown(existing)

        if self._monitor.snapshot.is_granted(kind):
            logger.debug("%s already granted, not polling", kind.value)
            return None

        return self._spawn(key, interval)

    def stop_polling(self, display_handle: Hashable) -> int:
        """
        Cancel every entry owned by a display. Safe to call repeatedly.

        Returns:
            Number of entries cancelled by this call
        """
        for key in [k for k in self._displays if k[1] == display_handle]:
            del self._displays[key]

        stopped = 0
        for entry in self.entries(display_handle):
            if self._teardown(entry):
                stopped += 1
        if stopped:
            logger.debug(
                "Stopped %d poll entries for display %r", stopped, display_handle
            )
        return stopped

    def entries(self, display_handle: Optional[Hashable] = None) -> List[PollEntry]:
        """Active entries, optionally limited to one display."""
        return [
            entry
            for entry in self._entries.values()
            if display_handle is None or entry.display_handle == display_handle
        ]

    def is_polling(self, kind: CapabilityKind, display_handle: Hashable) -> bool:
        return (kind, display_handle) in self._entries

    def close(self) -> None:
        """Stop all polling and detach from the monitor."""
        self._displays.clear()
        for entry in list(self._entries.values()):
            self._teardown(entry)
        if self._token is not None:
            self._monitor.unsubscribe(self._token)
            self._token = None

    def _spawn(self, key: EntryKey, interval: float) -> PollEntry:
        kind, display_handle = key
        entry = PollEntry(kind=kind, display_handle=display_handle, interval=interval)
        self._entries[key] = entry
        entry.task = asyncio.get_running_loop().create_task(self._run(entry))
        logger.debug(
            "Polling %s every %.2fs for display %r",
            kind.value,
            interval,
            display_handle,
        )
        return entry

    def _teardown(self, entry: PollEntry) -> bool:
        key = (entry.kind, entry.display_handle)
        if self._entries.get(key) is entry:
            del self._entries[key]
        return entry.cancel()

    async def _run(self, entry: PollEntry) -> None:
        while entry.active:
            await asyncio.sleep(entry.interval)
            if not entry.active:
                break
            entry.ticks += 1
            # shielded so a cancelled entry's in-flight check still lands
            state = await asyncio.shield(self._monitor.check(entry.kind))
            if state == CapabilityState.GRANTED:
                logger.debug(
                    "%s granted after %d ticks, stopping poll",
                    entry.kind.value,
                    entry.ticks,
                )
                self._teardown(entry)

    def _on_change(self, change: StateChange) -> None:
        if change.new_state == CapabilityState.GRANTED:
            for entry in [e for e in self._entries.values() if e.kind == change.kind]:
                self._teardown(entry)
        elif change.old_state == CapabilityState.GRANTED:
            for key, interval in list(self._displays.items()):
                if key[0] == change.kind and key not in self._entries:
                    logger.info("%s revoked, resuming poll", change.kind.value)
                    self._spawn(key, interval)
