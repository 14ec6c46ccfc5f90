"""
Serializable permission report models.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .capability import CapabilityKind, CapabilityState, Snapshot


class PermissionStatusEntry(BaseModel):
    """
    Status of a single capability for display or JSON output.
    """

    kind: CapabilityKind = Field(description="Capability identifier")
    name: str = Field(description="Human readable capability name")
    description: str = Field(description="What the capability is used for")
    state: CapabilityState = Field(description="Current grant state")
    settings_url: Optional[str] = Field(
        default=None, description="Deep link to the OS settings surface"
    )


class PermissionReport(BaseModel):
    """
    Full report built from a snapshot.
    """

    platform: str = Field(description="Host platform the probes ran on")
    taken_at: float = Field(description="Snapshot timestamp (epoch seconds)")
    all_granted: bool = Field(description="True if every capability is granted")
    entries: List[PermissionStatusEntry] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, platform: str) -> "PermissionReport":
        from ..utils.platform.settings_links import CAPABILITY_INFO, settings_url

        entries = []
        for kind in CapabilityKind:
            info = CAPABILITY_INFO[kind]
            entries.append(
                PermissionStatusEntry(
                    kind=kind,
                    name=info["name"],
                    description=info["desc"],
                    state=snapshot.get(kind),
                    settings_url=settings_url(kind, platform),
                )
            )
        return cls(
            platform=platform,
            taken_at=snapshot.taken_at,
            all_granted=snapshot.all_granted,
            entries=entries,
        )
