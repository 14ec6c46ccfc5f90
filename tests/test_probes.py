"""
Tests for platform probes, probe sets and settings deep links.
"""

import subprocess
from types import SimpleNamespace

import pytest

from permwatch.errors import ProbeUnavailable, UnknownCapability
from permwatch.schemas import CapabilityKind, CapabilityState
from permwatch.utils.platform import (
    ProbeSet,
    default_probes,
    open_settings,
    settings_url,
    shortcut_probe,
)
from permwatch.utils.platform import probes as probes_module
from permwatch.utils.platform import settings_links


class TestProbeSet:
    """Kind coverage and shortcut probe."""

    def test_missing_kinds_are_unavailable(self):
        probe_set = ProbeSet([shortcut_probe(lambda: "ctrl+space")])

        assert len(probe_set) == len(CapabilityKind)
        with pytest.raises(ProbeUnavailable):
            probe_set[CapabilityKind.MICROPHONE].query()

    @pytest.mark.parametrize(
        "binding,expected",
        [
            ("cmd+shift+space", CapabilityState.GRANTED),
            ("", CapabilityState.NOT_GRANTED),
            ("   ", CapabilityState.NOT_GRANTED),
            (None, CapabilityState.NOT_GRANTED),
        ],
    )
    def test_shortcut_probe(self, binding, expected):
        probe = shortcut_probe(lambda: binding)

        assert probe.query() == expected
        assert not probe.can_request

    def test_unknown_platform_only_answers_shortcut(self):
        probe_set = default_probes(lambda: "f5", os_type="plan9")

        shortcut = probe_set[CapabilityKind.INPUT_SHORTCUT]
        assert shortcut.query() == CapabilityState.GRANTED
        for kind in (
            CapabilityKind.MICROPHONE,
            CapabilityKind.ACCESSIBILITY,
            CapabilityKind.SCREEN_CAPTURE,
        ):
            with pytest.raises(ProbeUnavailable):
                probe_set[kind].query()

    def test_darwin_request_capable_kinds(self):
        probe_set = default_probes(os_type="darwin")

        assert probe_set[CapabilityKind.MICROPHONE].can_request
        assert probe_set[CapabilityKind.SCREEN_CAPTURE].can_request
        assert not probe_set[CapabilityKind.ACCESSIBILITY].can_request
        assert not probe_set[CapabilityKind.INPUT_SHORTCUT].can_request


class TestLinuxAccessibility:
    """AT-SPI check through gsettings."""

    def _probe(self):
        return default_probes(os_type="linux")[CapabilityKind.ACCESSIBILITY]

    def test_enabled(self, monkeypatch):
        monkeypatch.setattr(
            probes_module.subprocess,
            "run",
            lambda *a, **k: SimpleNamespace(returncode=0, stdout="true\n", stderr=""),
        )
        assert self._probe().query() == CapabilityState.GRANTED

    def test_disabled(self, monkeypatch):
        monkeypatch.setattr(
            probes_module.subprocess,
            "run",
            lambda *a, **k: SimpleNamespace(returncode=0, stdout="false\n", stderr=""),
        )
        assert self._probe().query() == CapabilityState.NOT_GRANTED

    def test_missing_gsettings(self, monkeypatch):
        def _run(*args, **kwargs):
            raise FileNotFoundError("gsettings")

        monkeypatch.setattr(probes_module.subprocess, "run", _run)
        with pytest.raises(ProbeUnavailable):
            self._probe().query()

    def test_gsettings_timeout(self, monkeypatch):
        def _run(*args, **kwargs):
            raise subprocess.TimeoutExpired("gsettings", 5)

        monkeypatch.setattr(probes_module.subprocess, "run", _run)
        with pytest.raises(ProbeUnavailable):
            self._probe().query()


class TestSettingsLinks:
    """Deep-link lookup table."""

    def test_macos_urls(self):
        url = settings_url(CapabilityKind.SCREEN_CAPTURE, "darwin")

        assert url.startswith("x-apple.systempreferences:")
        assert url.endswith("Privacy_ScreenCapture")
        assert settings_url(CapabilityKind.INPUT_SHORTCUT, "darwin") is None

    def test_open_settings_macos(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            settings_links.subprocess, "run", lambda cmd, **kw: calls.append(cmd)
        )

        assert open_settings(CapabilityKind.MICROPHONE, "darwin") is True
        assert calls == [["open", settings_url(CapabilityKind.MICROPHONE, "darwin")]]

    def test_open_settings_without_surface(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            settings_links.subprocess, "run", lambda cmd, **kw: calls.append(cmd)
        )

        assert open_settings(CapabilityKind.INPUT_SHORTCUT, "darwin") is False
        assert open_settings(CapabilityKind.INPUT_SHORTCUT, "linux") is False
        assert calls == []

    def test_open_settings_linux(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            settings_links.subprocess, "run", lambda cmd, **kw: calls.append(cmd)
        )

        assert open_settings(CapabilityKind.ACCESSIBILITY, "linux") is True
        assert calls == [["gnome-control-center", "universal-access"]]


class TestCapabilityKindParsing:
    """Name parsing used by the CLI."""

    @pytest.mark.parametrize(
        "name", ["screen_capture", "SCREEN-CAPTURE", " Screen_Capture "]
    )
    def test_parse(self, name):
        assert CapabilityKind.parse(name) == CapabilityKind.SCREEN_CAPTURE

    def test_parse_unknown(self):
        with pytest.raises(UnknownCapability):
            CapabilityKind.parse("camera")
