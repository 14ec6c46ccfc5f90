"""
Exception types raised by the capability monitoring core.
"""

from typing import Any


class PermissionMonitorError(Exception):
    """Base class for permwatch errors."""


class ProbeUnavailable(PermissionMonitorError):
    """The platform could not answer a capability query."""


class UnknownCapability(PermissionMonitorError, ValueError):
    """A capability name did not match any known kind."""


class RequestNotSupported(PermissionMonitorError):
    """A grant prompt was requested for a kind without an OS-mediated flow."""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"{getattr(kind, 'value', kind)} has no OS grant prompt")
