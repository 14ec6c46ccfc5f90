"""
permwatch - live monitoring of OS capability grants.
"""

from .errors import (
    PermissionMonitorError,
    ProbeUnavailable,
    RequestNotSupported,
    UnknownCapability,
)
from .schemas import CapabilityKind, CapabilityState, Snapshot, StateChange
from .services.state import (
    LifecycleBridge,
    LifecycleEvent,
    PermissionMonitor,
    PollEntry,
    PollingController,
)
from .utils.platform import CapabilityProbe, ProbeSet, default_probes

__version__ = "0.1.0"

__all__ = [
    "CapabilityKind",
    "CapabilityProbe",
    "CapabilityState",
    "LifecycleBridge",
    "LifecycleEvent",
    "PermissionMonitor",
    "PermissionMonitorError",
    "PollEntry",
    "PollingController",
    "ProbeSet",
    "ProbeUnavailable",
    "RequestNotSupported",
    "Snapshot",
    "StateChange",
    "UnknownCapability",
    "default_probes",
]
