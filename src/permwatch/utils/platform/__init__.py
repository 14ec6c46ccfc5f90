"""
Platform probes, settings deep links and host adapters.
"""

from .probes import (
    CapabilityProbe,
    ProbeSet,
    default_probes,
    shortcut_probe,
    unavailable_probe,
)
from .settings_links import CAPABILITY_INFO, open_settings, settings_url

__all__ = [
    "CapabilityProbe",
    "ProbeSet",
    "default_probes",
    "shortcut_probe",
    "unavailable_probe",
    "CAPABILITY_INFO",
    "open_settings",
    "settings_url",
]
