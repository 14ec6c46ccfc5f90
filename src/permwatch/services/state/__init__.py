"""
State management services for capability monitoring.
"""

from .permission_monitor import PermissionMonitor
from .polling_controller import PollEntry, PollingController
from .lifecycle_bridge import LifecycleBridge, LifecycleEvent

__all__ = [
    "PermissionMonitor",
    "PollEntry",
    "PollingController",
    "LifecycleBridge",
    "LifecycleEvent",
]
