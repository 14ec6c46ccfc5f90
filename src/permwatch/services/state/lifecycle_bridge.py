"""
Host foreground/background transitions mapped onto full rechecks.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional, Set

from ...config import MonitorConfig
from ...utils.threading.main_thread import call_on_main_thread
from .permission_monitor import PermissionMonitor

logger = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    """Foreground transitions emitted by the host process."""

    FOREGROUND_ENTERED = "foreground_entered"
    FOREGROUND_EXITED = "foreground_exited"


class LifecycleBridge:
    """
    Debounces foreground entries into a single delayed check_all().

    The delay lets the platform's permission database settle after the
    user returns from a settings surface. Entries arriving while a recheck
    is pending are absorbed; the pending timer is not restarted.
    """

    def __init__(
        self,
        monitor: PermissionMonitor,
        settle_delay: Optional[float] = None,
        cooldown: Optional[float] = None,
    ) -> None:
        config: MonitorConfig = monitor.config
        self._monitor = monitor
        self._settle_delay = (
            config.foreground_settle_delay if settle_delay is None else settle_delay
        )
        self._cooldown = (
            config.foreground_recheck_cooldown if cooldown is None else cooldown
        )
        self._pending: Optional[asyncio.TimerHandle] = None
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._last_recheck: Optional[float] = None
        self.recheck_count = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def post(self, event: LifecycleEvent) -> None:
        """Deliver a lifecycle event. Must run on the monitor's loop."""
        if event == LifecycleEvent.FOREGROUND_ENTERED:
            self._schedule_recheck()
        else:
            logger.debug("Host left foreground; permissions may change externally")

    def post_threadsafe(self, event: LifecycleEvent) -> None:
        """Deliver a lifecycle event from any thread via the owner loop."""
        call_on_main_thread(self.post, event)

    def close(self) -> None:
        """Drop the pending recheck and cancel one in progress."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def _schedule_recheck(self) -> None:
        if self._pending is not None:
            logger.debug("Foreground recheck already pending, coalescing")
            return

        loop = asyncio.get_running_loop()
        if (
            self._cooldown > 0
            and self._last_recheck is not None
            and loop.time() - self._last_recheck < self._cooldown
        ):
            logger.debug(
                "Foreground recheck skipped, within %.2fs cooldown", self._cooldown
            )
            return

        logger.info("Host entered foreground, rechecking permissions")
        self._pending = loop.call_later(self._settle_delay, self._fire)

    def _fire(self) -> None:
        self._pending = None
        task = asyncio.ensure_future(self._recheck())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _recheck(self) -> None:
        snapshot = await self._monitor.check_all()
        self._last_recheck = asyncio.get_running_loop().time()
        self.recheck_count += 1
        missing = snapshot.missing()
        if missing:
            logger.info("Still missing: %s", ", ".join(k.value for k in missing))
