"""
Configuration module for monitor timing and local bindings.
"""

from .timing_config import (
    MonitorConfig,
    get_monitor_config,
    load_monitor_config,
    set_monitor_config,
)

__all__ = [
    "MonitorConfig",
    "get_monitor_config",
    "load_monitor_config",
    "set_monitor_config",
]
