"""
Rich rendering of permission reports and state changes.
"""

from rich import box
from rich.console import Console
from rich.table import Table

from ...schemas.capability import CapabilityState, StateChange
from ...schemas.report import PermissionReport
from ..platform.settings_links import CAPABILITY_INFO
from .theme import THEME

STATE_MARKS = {
    CapabilityState.GRANTED: ("✓", THEME["success"]),
    CapabilityState.NOT_GRANTED: ("✗", THEME["error"]),
    CapabilityState.UNDETERMINED: ("?", THEME["warning"]),
}

console = Console()


def format_state(state: CapabilityState) -> str:
    """Markup for a state, e.g. '[#3fb950]✓ granted[/]'."""
    mark, color = STATE_MARKS[state]
    return f"[{color}]{mark} {state.value.replace('_', ' ')}[/]"


def build_permission_table(report: PermissionReport) -> Table:
    table = Table(box=box.ROUNDED, border_style=THEME["border"], show_lines=False)
    table.add_column("Capability", style=THEME["fg"])
    table.add_column("State")
    table.add_column("Used for", style=THEME["muted"])

    for entry in report.entries:
        table.add_row(entry.name, format_state(entry.state), entry.description)
    return table


def print_report(report: PermissionReport, out: Console = console) -> None:
    out.print(build_permission_table(report))
    if report.all_granted:
        out.print(f"  [{THEME['success']}]All permissions granted[/]")
        return
    for entry in report.entries:
        if entry.state != CapabilityState.GRANTED and entry.settings_url:
            out.print(f"  [{THEME['muted']}]{entry.name}:[/] {entry.settings_url}")


def print_change(change: StateChange, out: Console = console) -> None:
    name = CAPABILITY_INFO[change.kind]["name"]
    old = format_state(change.old_state) if change.old_state else "unknown"
    new = format_state(change.new_state)
    out.print(f"  [{THEME['accent']}]›[/] {name}: {old} → {new}")
