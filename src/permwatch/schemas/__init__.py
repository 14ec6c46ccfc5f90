"""
Data models for capability state and reports.
"""

from .capability import CapabilityKind, CapabilityState, Snapshot, StateChange
from .report import PermissionReport, PermissionStatusEntry

__all__ = [
    "CapabilityKind",
    "CapabilityState",
    "Snapshot",
    "StateChange",
    "PermissionReport",
    "PermissionStatusEntry",
]
