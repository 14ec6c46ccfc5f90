"""
Platform capability probes.

A probe answers whether one capability is granted and, for kinds with an
OS-mediated grant flow, can trigger the OS prompt. Probes that cannot be
evaluated on the running platform raise ProbeUnavailable so the monitor
records them as undetermined.
"""

import importlib.util
import inspect
import logging
import platform
import subprocess
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    Iterator,
    Optional,
    Union,
)

from ...errors import ProbeUnavailable
from ...schemas.capability import CapabilityKind, CapabilityState

logger = logging.getLogger(__name__)

ProbeQuery = Callable[[], Union[CapabilityState, Awaitable[CapabilityState]]]
RequestPrimitive = Callable[[], Any]
ShortcutProvider = Callable[[], Optional[str]]

# AVAuthorizationStatus values
_AV_NOT_DETERMINED = 0
_AV_RESTRICTED = 1
_AV_DENIED = 2
_AV_AUTHORIZED = 3


@dataclass
class CapabilityProbe:
    """Query (and optional request primitive) for one capability kind."""

    kind: CapabilityKind
    query: ProbeQuery
    request: Optional[RequestPrimitive] = None

    @property
    def can_request(self) -> bool:
        return self.request is not None


def is_async_callable(func: Any) -> bool:
    """True for coroutine functions and objects with an async __call__."""
    return inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(
        getattr(func, "__call__", None)
    )


def unavailable_probe(kind: CapabilityKind, reason: str) -> CapabilityProbe:
    """Probe that always fails, used for kinds the platform cannot answer."""

    def _query() -> CapabilityState:
        raise ProbeUnavailable(f"{kind.value}: {reason}")

    return CapabilityProbe(kind=kind, query=_query)


class ProbeSet:
    """
    One probe per capability kind.

    Kinds without a supplied probe get an unavailable probe so dispatch
    never branches on platform at the call site.
    """

    def __init__(self, probes: Iterable[CapabilityProbe] = ()):
        self._probes: Dict[CapabilityKind, CapabilityProbe] = {}
        for probe in probes:
            self._probes[probe.kind] = probe
        for kind in CapabilityKind:
            if kind not in self._probes:
                self._probes[kind] = unavailable_probe(kind, "no probe registered")

    def __getitem__(self, kind: CapabilityKind) -> CapabilityProbe:
        return self._probes[kind]

    def __iter__(self) -> Iterator[CapabilityProbe]:
        return iter(self._probes.values())

    def __len__(self) -> int:
        return len(self._probes)

    @property
    def kinds(self) -> list:
        return list(self._probes)


def shortcut_probe(provider: ShortcutProvider) -> CapabilityProbe:
    """Locally determined: granted iff a binding is configured."""

    def _query() -> CapabilityState:
        binding = provider()
        return CapabilityState.from_bool(bool(binding and binding.strip()))

    return CapabilityProbe(kind=CapabilityKind.INPUT_SHORTCUT, query=_query)


def _check_macos_accessibility() -> CapabilityState:
    """Check Accessibility trust without showing the system prompt."""
    try:
        from ApplicationServices import (
            AXIsProcessTrustedWithOptions,
            kAXTrustedCheckOptionPrompt,
        )
    except ImportError as e:
        raise ProbeUnavailable(f"ApplicationServices bridge missing: {e}")

    trusted = AXIsProcessTrustedWithOptions({kAXTrustedCheckOptionPrompt: False})
    return CapabilityState.from_bool(bool(trusted))


def _check_macos_screen_capture() -> CapabilityState:
    """Check Screen Recording permission (macOS 10.15+)."""
    try:
        import Quartz
    except ImportError as e:
        raise ProbeUnavailable(f"Quartz bridge missing: {e}")

    preflight = getattr(Quartz, "CGPreflightScreenCaptureAccess", None)
    if preflight is None:
        raise ProbeUnavailable("CGPreflightScreenCaptureAccess not available")
    return CapabilityState.from_bool(bool(preflight()))


def _request_macos_screen_capture() -> None:
    import Quartz

    Quartz.CGRequestScreenCaptureAccess()


def _check_macos_microphone() -> CapabilityState:
    """Map AVCaptureDevice authorization status to a capability state."""
    try:
        from AVFoundation import AVCaptureDevice, AVMediaTypeAudio
    except ImportError as e:
        raise ProbeUnavailable(f"AVFoundation bridge missing: {e}")

    status = AVCaptureDevice.authorizationStatusForMediaType_(AVMediaTypeAudio)
    if status == _AV_AUTHORIZED:
        return CapabilityState.GRANTED
    if status in (_AV_DENIED, _AV_RESTRICTED):
        return CapabilityState.NOT_GRANTED
    if status == _AV_NOT_DETERMINED:
        return CapabilityState.UNDETERMINED
    raise ProbeUnavailable(f"Unexpected AVAuthorizationStatus {status!r}")


def _request_macos_microphone() -> None:
    from AVFoundation import AVCaptureDevice, AVMediaTypeAudio

    def _on_response(granted: bool) -> None:
        logger.debug("Microphone prompt answered: granted=%s", granted)

    AVCaptureDevice.requestAccessForMediaType_completionHandler_(
        AVMediaTypeAudio, _on_response
    )


def _check_linux_atspi() -> CapabilityState:
    """Check whether GNOME toolkit accessibility (AT-SPI) is enabled."""
    try:
        result = subprocess.run(
            [
                "gsettings",
                "get",
                "org.gnome.desktop.interface",
                "toolkit-accessibility",
            ],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise ProbeUnavailable(f"gsettings unavailable: {e}")

    if result.returncode != 0:
        raise ProbeUnavailable(result.stderr.strip() or "gsettings failed")
    return CapabilityState.from_bool("true" in result.stdout.lower())


def _check_windows_uiautomation() -> CapabilityState:
    """UI Automation is usable whenever comtypes can be imported."""
    return CapabilityState.from_bool(importlib.util.find_spec("comtypes") is not None)


def default_probes(
    shortcut_provider: Optional[ShortcutProvider] = None,
    os_type: Optional[str] = None,
) -> ProbeSet:
    """
    Build the probe set for the running platform.

    Args:
        shortcut_provider: Returns the configured shortcut binding, if any
        os_type: Override platform detection ("darwin", "linux", "windows")
    """
    os_type = os_type or platform.system().lower()
    provider = shortcut_provider or (lambda: None)
    probes = [shortcut_probe(provider)]

    if os_type == "darwin":
        probes += [
            CapabilityProbe(
                CapabilityKind.MICROPHONE,
                _check_macos_microphone,
                _request_macos_microphone,
            ),
            CapabilityProbe(CapabilityKind.ACCESSIBILITY, _check_macos_accessibility),
            CapabilityProbe(
                CapabilityKind.SCREEN_CAPTURE,
                _check_macos_screen_capture,
                _request_macos_screen_capture,
            ),
        ]
    elif os_type == "linux":
        probes.append(CapabilityProbe(CapabilityKind.ACCESSIBILITY, _check_linux_atspi))
    elif os_type == "windows":
        probes.append(
            CapabilityProbe(CapabilityKind.ACCESSIBILITY, _check_windows_uiautomation)
        )

    return ProbeSet(probes)
