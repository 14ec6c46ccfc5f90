"""
Capability kinds, states and the snapshot handed out to consumers.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from ..errors import UnknownCapability


class CapabilityKind(str, Enum):
    """Capabilities tracked by the monitor. Each maps to exactly one probe."""

    INPUT_SHORTCUT = "input_shortcut"
    MICROPHONE = "microphone"
    ACCESSIBILITY = "accessibility"
    SCREEN_CAPTURE = "screen_capture"

    @classmethod
    def parse(cls, name: str) -> "CapabilityKind":
        """Resolve a kind from its value, accepting dashes and any case."""
        normalized = name.strip().lower().replace("-", "_")
        for kind in cls:
            if kind.value == normalized or kind.name.lower() == normalized:
                return kind
        raise UnknownCapability(
            f"Unknown capability '{name}'. Expected one of: "
            + ", ".join(k.value for k in cls)
        )


class CapabilityState(str, Enum):
    """Tri-state grant answer. UNDETERMINED is distinct from a denial."""

    GRANTED = "granted"
    NOT_GRANTED = "not_granted"
    UNDETERMINED = "undetermined"

    @classmethod
    def from_bool(cls, granted: bool) -> "CapabilityState":
        return cls.GRANTED if granted else cls.NOT_GRANTED


def _frozen(states: Mapping[CapabilityKind, CapabilityState]):
    return MappingProxyType(dict(states))


@dataclass(frozen=True)
class Snapshot:
    """Immutable, timestamped view of every tracked capability state."""

    states: Mapping[CapabilityKind, CapabilityState] = field(
        default_factory=lambda: _frozen({})
    )
    taken_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if not isinstance(self.states, MappingProxyType):
            object.__setattr__(self, "states", _frozen(self.states))

    def get(self, kind: CapabilityKind) -> CapabilityState:
        """State for a kind; kinds never published read as UNDETERMINED."""
        return self.states.get(kind, CapabilityState.UNDETERMINED)

    def is_granted(self, kind: CapabilityKind) -> bool:
        return self.get(kind) == CapabilityState.GRANTED

    def missing(self) -> List[CapabilityKind]:
        """Kinds that are not currently granted, in declaration order."""
        return [kind for kind in CapabilityKind if not self.is_granted(kind)]

    @property
    def all_granted(self) -> bool:
        return not self.missing()

    def as_dict(self) -> Dict[str, str]:
        return {kind.value: self.get(kind).value for kind in CapabilityKind}


@dataclass(frozen=True)
class StateChange:
    """A published transition. old_state is None on first publication."""

    kind: CapabilityKind
    old_state: Optional[CapabilityState]
    new_state: CapabilityState
    timestamp: float = field(default_factory=time.time)
