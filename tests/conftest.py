"""
Pytest configuration and fixtures.
"""

import sys
import threading
from pathlib import Path

import pytest


def pytest_configure(config):
    """Configure pytest."""
    # Add src to path
    src_path = Path(__file__).parent.parent / "src"
    sys.path.insert(0, str(src_path))

    config.addinivalue_line("markers", "lifecycle: foreground/background bridge tests")
    config.addinivalue_line("markers", "polling: display-scoped polling tests")


def pytest_collection_modifyitems(config, items):
    """
    Modify test items to add helpful markers.
    """
    for item in items:
        if "lifecycle" in item.nodeid.lower():
            item.add_marker("lifecycle")
        if "polling" in item.nodeid.lower():
            item.add_marker("polling")


class ScriptedQuery:
    """
    Probe query returning a scripted sequence of answers.

    The last answer repeats once the script is exhausted. Exception
    instances in the script are raised instead of returned.
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            index = min(self.calls, len(self.answers) - 1)
            self.calls += 1
        answer = self.answers[index]
        if isinstance(answer, BaseException):
            raise answer
        return answer


class AsyncScriptedQuery(ScriptedQuery):
    """Coroutine variant with an optional per-call delay list."""

    def __init__(self, *answers, delays=None):
        super().__init__(*answers)
        self.delays = list(delays or [])

    async def __call__(self):
        import asyncio

        with self._lock:
            call = self.calls
            self.calls += 1
        if call < len(self.delays):
            await asyncio.sleep(self.delays[call])
        answer = self.answers[min(call, len(self.answers) - 1)]
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def fast_config():
    """Config with short timings so tests finish quickly."""
    from permwatch.config import MonitorConfig
    from permwatch.schemas import CapabilityKind

    return MonitorConfig(
        poll_interval=0.01,
        foreground_settle_delay=0.05,
        request_followup_delays={
            CapabilityKind.MICROPHONE: 0.05,
            CapabilityKind.SCREEN_CAPTURE: 0.05,
        },
    )


@pytest.fixture
def make_monitor(fast_config):
    """
    Build a PermissionMonitor from a kind -> query mapping.

    Kinds left out get an unavailable probe. Pass request primitives via
    the requests mapping.
    """
    from permwatch.services.state import PermissionMonitor
    from permwatch.utils.platform import CapabilityProbe, ProbeSet

    def _make(queries=None, requests=None, config=None):
        requests = requests or {}
        probes = ProbeSet(
            CapabilityProbe(kind=kind, query=query, request=requests.get(kind))
            for kind, query in (queries or {}).items()
        )
        return PermissionMonitor(probes=probes, config=config or fast_config)

    return _make
