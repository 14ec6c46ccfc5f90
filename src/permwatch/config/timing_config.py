"""
Timing configuration for capability monitoring.

All timing values are in seconds. Defaults can be overridden through
environment variables (a local .env file is honoured).
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

from ..schemas.capability import CapabilityKind

ENV_PREFIX = "PERMWATCH_"


def _default_followup_delays() -> Dict[CapabilityKind, float]:
    return {
        CapabilityKind.MICROPHONE: 0.5,
        CapabilityKind.ACCESSIBILITY: 2.0,
        CapabilityKind.SCREEN_CAPTURE: 3.0,
    }


@dataclass
class MonitorConfig:
    """
    Centralized timing configuration for the monitor, poller and lifecycle bridge.
    """

    poll_interval: float = 2.0
    """Seconds between rechecks of a displayed, ungranted capability"""

    foreground_settle_delay: float = 0.5
    """Delay before the coalesced recheck after the host enters the foreground"""

    foreground_recheck_cooldown: float = 0.0
    """Minimum spacing between lifecycle rechecks (0 disables back-off)"""

    request_followup_delays: Dict[CapabilityKind, float] = field(
        default_factory=_default_followup_delays
    )
    """Delay before the follow-up check scheduled by request()"""

    default_followup_delay: float = 1.0
    """Follow-up delay for kinds missing from request_followup_delays"""

    shortcut: Optional[str] = None
    """Configured input shortcut binding, if any"""

    def followup_delay(self, kind: CapabilityKind) -> float:
        return self.request_followup_delays.get(kind, self.default_followup_delay)


def _env_float(name: str, default: float, positive: bool = False) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}")
    if positive and value <= 0:
        raise ValueError(f"{ENV_PREFIX}{name} must be positive, got {raw!r}")
    if value < 0:
        raise ValueError(f"{ENV_PREFIX}{name} must not be negative, got {raw!r}")
    return value


def load_monitor_config(dotenv: bool = True) -> MonitorConfig:
    """
    Build a configuration from environment variables.

    Recognised variables: PERMWATCH_POLL_INTERVAL, PERMWATCH_FOREGROUND_DELAY,
    PERMWATCH_FOREGROUND_COOLDOWN and PERMWATCH_SHORTCUT.

    Raises:
        ValueError: If a numeric variable cannot be parsed or is negative,
            or the poll interval is zero
    """
    if dotenv:
        load_dotenv()

    defaults = MonitorConfig()
    shortcut = os.getenv(ENV_PREFIX + "SHORTCUT") or None
    return MonitorConfig(
        poll_interval=_env_float(
            "POLL_INTERVAL", defaults.poll_interval, positive=True
        ),
        foreground_settle_delay=_env_float(
            "FOREGROUND_DELAY", defaults.foreground_settle_delay
        ),
        foreground_recheck_cooldown=_env_float(
            "FOREGROUND_COOLDOWN", defaults.foreground_recheck_cooldown
        ),
        shortcut=shortcut.strip() if shortcut else None,
    )


_config: Optional[MonitorConfig] = None


def get_monitor_config() -> MonitorConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_monitor_config()
    return _config


def set_monitor_config(config: Optional[MonitorConfig]) -> None:
    """Replace (or reset with None) the process-wide configuration."""
    global _config
    _config = config
