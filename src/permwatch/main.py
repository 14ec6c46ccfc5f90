"""
Command line host for the capability monitor.
"""

import asyncio
import platform
import sys
from typing import Optional

from .config import get_monitor_config
from .errors import RequestNotSupported, UnknownCapability
from .schemas.capability import CapabilityKind, CapabilityState, StateChange
from .schemas.report import PermissionReport
from .services.state import PermissionMonitor, PollingController
from .utils.logging import setup_logging
from .utils.platform.settings_links import open_settings
from .utils.threading import set_main_event_loop
from .utils.ui import THEME, console, format_state, print_change, print_report

CLI_DISPLAY = "cli"
SETTINGS_FALLBACK_DELAY = 1.0


def _report(monitor: PermissionMonitor) -> PermissionReport:
    return PermissionReport.from_snapshot(monitor.snapshot, platform.system().lower())


async def run_check(as_json: bool = False) -> int:
    """Check every capability once and print the result."""
    monitor = PermissionMonitor()
    await monitor.check_all()
    report = _report(monitor)
    if as_json:
        print(report.model_dump_json(indent=2))
    else:
        print_report(report)
    return 0 if report.all_granted else 1


async def run_watch(
    interval: Optional[float] = None, timeout: Optional[float] = None
) -> int:
    """Poll every ungranted capability until all are granted."""
    set_main_event_loop(asyncio.get_running_loop())
    monitor = PermissionMonitor()
    controller = PollingController(monitor, interval=interval)
    done = asyncio.Event()

    def _on_change(change: StateChange) -> None:
        print_change(change)
        if monitor.snapshot.all_granted:
            done.set()

    try:
        await monitor.check_all()
        print_report(_report(monitor))
        if monitor.snapshot.all_granted:
            return 0

        monitor.subscribe(_on_change)
        for kind in monitor.snapshot.missing():
            controller.start_polling(kind, CLI_DISPLAY)
        console.print(
            f"\n  [{THEME['muted']}]Watching for changes (Ctrl-C to stop)...[/]"
        )

        try:
            await asyncio.wait_for(done.wait(), timeout)
        except asyncio.TimeoutError:
            return 1
        console.print(f"  [{THEME['success']}]All permissions granted[/]")
        return 0
    finally:
        controller.stop_polling(CLI_DISPLAY)
        controller.close()
        monitor.close()
        set_main_event_loop(None)


async def run_request(kind: CapabilityKind) -> int:
    """
    Trigger the OS prompt, then report the follow-up state.

    macOS shows the microphone prompt only while its status is undetermined,
    so an answered microphone request opens the settings page instead.
    Screen capture also opens its settings page shortly after the prompt
    if the grant has not landed by then.
    """
    monitor = PermissionMonitor()
    try:
        state = await monitor.check(kind)
        if state == CapabilityState.GRANTED:
            console.print(f"  {kind.value}: {format_state(state)}")
            return 0

        if kind == CapabilityKind.MICROPHONE and state != CapabilityState.UNDETERMINED:
            console.print(
                f"  [{THEME['muted']}]Prompt already answered, opening settings[/]"
            )
            open_settings(kind)
            return 0

        try:
            monitor.request(kind, follow_up=False)
        except RequestNotSupported as e:
            console.print(f"  [{THEME['error']}]✗ {e}[/]")
            return 2

        if kind == CapabilityKind.SCREEN_CAPTURE:
            await asyncio.sleep(SETTINGS_FALLBACK_DELAY)
            if await monitor.check(kind) != CapabilityState.GRANTED:
                open_settings(kind)

        await asyncio.sleep(monitor.config.followup_delay(kind))
        state = await monitor.check(kind)
        console.print(f"  {kind.value}: {format_state(state)}")
        return 0
    finally:
        monitor.close()


def _positive_float(value: str) -> float:
    import argparse

    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _parse_kind(value: str) -> CapabilityKind:
    import argparse

    try:
        return CapabilityKind.parse(value)
    except UnknownCapability as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="permwatch",
        description="Permission Watch - monitor OS capability grants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Check all capabilities once")
    check.add_argument("--json", action="store_true", help="Print a JSON report")

    watch = sub.add_parser("watch", help="Poll until every capability is granted")
    watch.add_argument(
        "--interval", type=_positive_float, default=None, help="Seconds between checks"
    )
    watch.add_argument(
        "--timeout", type=float, default=None, help="Give up after N seconds"
    )

    request = sub.add_parser("request", help="Show the OS grant prompt")
    request.add_argument("kind", type=_parse_kind)

    open_cmd = sub.add_parser("open", help="Open the settings page for a capability")
    open_cmd.add_argument("kind", type=_parse_kind)

    return parser


def cli(argv=None) -> int:
    """CLI entry point with argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        get_monitor_config()
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.command == "check":
            return asyncio.run(run_check(as_json=args.json))
        if args.command == "watch":
            return asyncio.run(run_watch(interval=args.interval, timeout=args.timeout))
        if args.command == "request":
            return asyncio.run(run_request(args.kind))
        if args.command == "open":
            if not open_settings(args.kind):
                console.print(
                    f"  [{THEME['warning']}]No settings page for {args.kind.value}[/]"
                )
                return 1
            return 0
    except KeyboardInterrupt:
        console.print(f"\n\n  [{THEME['muted']}]Goodbye[/]")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(cli())
