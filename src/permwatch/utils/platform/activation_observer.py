"""
macOS host adapter translating application activation into lifecycle events.

NSWorkspace posts activation notifications for every application; only
those for the current process are forwarded. Delivery needs a running
Cocoa run loop, so this is meant for GUI hosts.
"""

import logging
import os
import platform
from typing import Any, Callable, Optional

from ...errors import ProbeUnavailable
from ...services.state.lifecycle_bridge import LifecycleEvent

logger = logging.getLogger(__name__)

_observer_class: Optional[type] = None


def _get_observer_class() -> type:
    """Define the Objective-C observer class once per process."""
    global _observer_class
    if _observer_class is not None:
        return _observer_class

    import objc
    from Foundation import NSObject

    class PermwatchActivationObserver(NSObject):
        def initWithHandler_(self, handler):
            self = objc.super(PermwatchActivationObserver, self).init()
            if self is None:
                return None
            self._handler = handler
            return self

        def didActivate_(self, notification):
            self._handler(notification, LifecycleEvent.FOREGROUND_ENTERED)

        def didDeactivate_(self, notification):
            self._handler(notification, LifecycleEvent.FOREGROUND_EXITED)

    _observer_class = PermwatchActivationObserver
    return _observer_class


class AppActivationObserver:
    """Forward this process's activation changes to a lifecycle sink."""

    def __init__(self, sink: Callable[[LifecycleEvent], Any]):
        """
        Args:
            sink: Thread-safe callable, normally LifecycleBridge.post_threadsafe
        """
        self._sink = sink
        self._observer = None
        self._center = None

    def start(self) -> None:
        if platform.system().lower() != "darwin":
            raise ProbeUnavailable("Activation notifications require macOS")
        if self._observer is not None:
            return
        try:
            from AppKit import (
                NSWorkspace,
                NSWorkspaceDidActivateApplicationNotification,
                NSWorkspaceDidDeactivateApplicationNotification,
            )
        except ImportError as e:
            raise ProbeUnavailable(f"AppKit bridge missing: {e}")

        observer = _get_observer_class().alloc().initWithHandler_(self._on_notification)
        center = NSWorkspace.sharedWorkspace().notificationCenter()
        center.addObserver_selector_name_object_(
            observer,
            "didActivate:",
            NSWorkspaceDidActivateApplicationNotification,
            None,
        )
        center.addObserver_selector_name_object_(
            observer,
            "didDeactivate:",
            NSWorkspaceDidDeactivateApplicationNotification,
            None,
        )
        self._observer = observer
        self._center = center
        logger.debug("Activation observer registered")

    def stop(self) -> None:
        if self._observer is None:
            return
        self._center.removeObserver_(self._observer)
        self._observer = None
        self._center = None
        logger.debug("Activation observer removed")

    def _on_notification(self, notification, event: LifecycleEvent) -> None:
        app = notification.userInfo().get("NSWorkspaceApplicationKey")
        if app is None or app.processIdentifier() != os.getpid():
            return
        try:
            self._sink(event)
        except RuntimeError as e:
            # raising into the Cocoa callback would abort the notification
            logger.warning("Dropped %s: %s", event.value, e)
