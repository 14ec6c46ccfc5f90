"""
Static lookup of capability descriptions and OS settings surfaces.
"""

import logging
import platform
import subprocess
from typing import Dict, List, Optional

from ...schemas.capability import CapabilityKind

logger = logging.getLogger(__name__)

_MACOS_PRIVACY = "x-apple.systempreferences:com.apple.preference.security?Privacy_"

CAPABILITY_INFO: Dict[CapabilityKind, Dict[str, str]] = {
    CapabilityKind.INPUT_SHORTCUT: {
        "name": "Keyboard Shortcut",
        "desc": "Global shortcut that starts and stops recording",
    },
    CapabilityKind.MICROPHONE: {
        "name": "Microphone Access",
        "desc": "Record your voice for transcription",
    },
    CapabilityKind.ACCESSIBILITY: {
        "name": "Accessibility Access",
        "desc": "Paste transcribed text at the cursor position",
    },
    CapabilityKind.SCREEN_CAPTURE: {
        "name": "Screen Recording Access",
        "desc": "Read on-screen context to improve transcripts",
    },
}

SETTINGS_URLS: Dict[str, Dict[CapabilityKind, str]] = {
    "darwin": {
        CapabilityKind.MICROPHONE: _MACOS_PRIVACY + "Microphone",
        CapabilityKind.ACCESSIBILITY: _MACOS_PRIVACY + "Accessibility",
        CapabilityKind.SCREEN_CAPTURE: _MACOS_PRIVACY + "ScreenCapture",
    },
    "windows": {
        CapabilityKind.MICROPHONE: "ms-settings:privacy-microphone",
        CapabilityKind.ACCESSIBILITY: "ms-settings:easeofaccess",
        CapabilityKind.SCREEN_CAPTURE: (
            "ms-settings:privacy-graphicscaptureprogrammatic"
        ),
    },
}

LINUX_SETTINGS_COMMANDS: Dict[CapabilityKind, List[str]] = {
    CapabilityKind.MICROPHONE: ["gnome-control-center", "sound"],
    CapabilityKind.ACCESSIBILITY: ["gnome-control-center", "universal-access"],
    CapabilityKind.SCREEN_CAPTURE: ["gnome-control-center", "privacy"],
}


def _current_os() -> str:
    return platform.system().lower()


def settings_url(kind: CapabilityKind, os_type: Optional[str] = None) -> Optional[str]:
    """Deep link to the settings surface for a kind, or None if there is none."""
    return SETTINGS_URLS.get(os_type or _current_os(), {}).get(kind)


def open_settings(kind: CapabilityKind, os_type: Optional[str] = None) -> bool:
    """
    Open the OS settings surface for a capability.

    Returns:
        True if a settings surface was launched, False if the kind has none
    """
    os_type = os_type or _current_os()

    if os_type == "linux":
        cmd = LINUX_SETTINGS_COMMANDS.get(kind)
        if not cmd:
            return False
        try:
            subprocess.run(cmd, check=False)
        except FileNotFoundError:
            subprocess.run(["unity-control-center", "universal-access"], check=False)
        return True

    url = settings_url(kind, os_type)
    if not url:
        return False

    logger.info("Opening settings for %s: %s", kind.value, url)
    if os_type == "darwin":
        subprocess.run(["open", url], check=False)
    elif os_type == "windows":
        subprocess.run(["start", url], shell=True, check=False)
    else:
        return False
    return True
