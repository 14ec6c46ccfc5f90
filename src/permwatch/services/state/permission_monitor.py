"""
Centralized capability state management.

Single source of truth for the grant state of every tracked capability.
All snapshot mutation and change dispatch happen on the event loop that
drives the monitor; blocking probe calls run in an executor and their
results are applied back on the loop, so writes land in completion order.
"""

import asyncio
import inspect
import itertools
import logging
from concurrent.futures import Executor
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Union

from ...config import MonitorConfig, get_monitor_config
from ...errors import ProbeUnavailable, RequestNotSupported
from ...schemas.capability import (
    CapabilityKind,
    CapabilityState,
    Snapshot,
    StateChange,
)
from ...utils.platform.probes import ProbeSet, default_probes, is_async_callable

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[StateChange], Union[None, Awaitable[None]]]


class PermissionMonitor:
    """
    Aggregate capability state holder.

    Provides:
    - check / check_all against the registered probes
    - request for kinds with an OS-mediated grant prompt
    - subscribe / unsubscribe for change notifications

    A change is published only when a completed probe returns a value that
    differs from the last published one.
    """

    def __init__(
        self,
        probes: Optional[ProbeSet] = None,
        config: Optional[MonitorConfig] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        """
        Initialize the monitor.

        Args:
            probes: Probe set; defaults to the running platform's probes
            config: Timing configuration; defaults to the process-wide config
            executor: Executor for blocking probes (loop default if None)
        """
        self._config = config or get_monitor_config()
        self._probes = probes or default_probes(lambda: self._config.shortcut)
        self._executor = executor
        self._snapshot = Snapshot()
        self._subscribers: Dict[int, ChangeCallback] = {}
        self._tokens = itertools.count(1)
        self._timers: Set[asyncio.TimerHandle] = set()
        self._tasks: Set[asyncio.Future] = set()

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def probes(self) -> ProbeSet:
        return self._probes

    @property
    def snapshot(self) -> Snapshot:
        """Current snapshot. Snapshots are immutable, so this is a safe copy."""
        return self._snapshot

    def state(self, kind: CapabilityKind) -> CapabilityState:
        return self._snapshot.get(kind)

    def supports_request(self, kind: CapabilityKind) -> bool:
        return self._probes[kind].can_request

    async def check(self, kind: CapabilityKind) -> CapabilityState:
        """
        Probe one capability, update the snapshot and publish any change.

        Returns:
            The state reported by this probe call
        """
        state = await self._run_probe(kind)
        self._apply(kind, state)
        return state

    async def check_all(self) -> Snapshot:
        """
        Probe every capability concurrently.

        Returns:
            Snapshot taken after all of this call's probes were applied
        """
        await asyncio.gather(*(self.check(kind) for kind in self._probes.kinds))
        return self._snapshot

    def request(self, kind: CapabilityKind, follow_up: bool = True) -> None:
        """
        Trigger the OS grant prompt for a capability and return immediately.

        The prompt's outcome is not awaited. With follow_up, a check of the
        kind is scheduled after its configured delay, since some platforms
        only update after the user leaves the settings surface.

        Raises:
            RequestNotSupported: If the kind has no OS-mediated grant flow
        """
        probe = self._probes[kind]
        if not probe.can_request:
            raise RequestNotSupported(kind)

        loop = asyncio.get_running_loop()
        logger.info("Requesting %s permission", kind.value)
        if is_async_callable(probe.request):
            future = asyncio.ensure_future(probe.request())
        else:
            future = loop.run_in_executor(self._executor, probe.request)
        self._track(future, f"request for {kind.value}")

        if follow_up:
            self.schedule_check(kind, self._config.followup_delay(kind))

    def schedule_check(self, kind: CapabilityKind, delay: float) -> asyncio.TimerHandle:
        """Schedule a single check of a capability after a delay."""
        loop = asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def _fire() -> None:
            self._timers.discard(handle)
            self._track(
                asyncio.ensure_future(self.check(kind)), f"check of {kind.value}"
            )

        handle = loop.call_later(delay, _fire)
        self._timers.add(handle)
        return handle

    def subscribe(self, callback: ChangeCallback) -> int:
        """
        Register a listener for state changes of any kind.

        Coroutine callbacks are scheduled as tasks on the loop.

        Returns:
            Token to pass to unsubscribe()
        """
        token = next(self._tokens)
        self._subscribers[token] = callback
        return token

    def unsubscribe(self, token: int) -> bool:
        """Remove a listener. Unknown or repeated tokens are a no-op."""
        return self._subscribers.pop(token, None) is not None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def close(self) -> None:
        """Cancel scheduled follow-up checks and in-flight background work."""
        for handle in list(self._timers):
            handle.cancel()
        self._timers.clear()
        for future in list(self._tasks):
            future.cancel()
        self._tasks.clear()

    async def _run_probe(self, kind: CapabilityKind) -> CapabilityState:
        probe = self._probes[kind]
        try:
            if is_async_callable(probe.query):
                result = await probe.query()
            else:
                loop = asyncio.get_running_loop()
                result = await loop.run_in_executor(self._executor, probe.query)
        except ProbeUnavailable as e:
            logger.debug("Probe for %s unavailable: %s", kind.value, e)
            return CapabilityState.UNDETERMINED
        except Exception as e:
            logger.warning("Probe for %s failed: %s", kind.value, e)
            return CapabilityState.UNDETERMINED

        if isinstance(result, bool):
            return CapabilityState.from_bool(result)
        if not isinstance(result, CapabilityState):
            logger.warning("Probe for %s returned %r", kind.value, result)
            return CapabilityState.UNDETERMINED
        return result

    def _apply(self, kind: CapabilityKind, state: CapabilityState) -> None:
        previous = self._snapshot.states.get(kind)
        states = dict(self._snapshot.states)
        states[kind] = state
        self._snapshot = Snapshot(states)

        if previous == state:
            return

        logger.debug(
            "%s: %s -> %s",
            kind.value,
            previous.value if previous else "unknown",
            state.value,
        )
        self._publish(StateChange(kind=kind, old_state=previous, new_state=state))

    def _publish(self, change: StateChange) -> None:
        for callback in list(self._subscribers.values()):
            try:
                result = callback(change)
            except Exception:
                logger.exception("State change subscriber failed")
                continue
            if inspect.isawaitable(result):
                self._track(asyncio.ensure_future(result), "state change subscriber")

    def _track(self, future: "asyncio.Future[Any]", label: str) -> None:
        self._tasks.add(future)

        def _done(fut: "asyncio.Future[Any]") -> None:
            self._tasks.discard(fut)
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                logger.warning("Background %s failed: %s", label, exc)

        future.add_done_callback(_done)
