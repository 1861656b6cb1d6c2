"""``cargo-extra doctor`` — environment diagnostics command.

Reports whether this machine can run the commands cargo-extra builds:
the Python runtime, a cargo binary (honouring ``$CARGO``), rustup for
``+<channel>`` prefixes, and the OS.  Only cargo is a hard requirement.
"""

from __future__ import annotations

import platform
import sys
from typing import Any

from cargo_extra.cli import exit_codes
from cargo_extra.cli.console import console
from cargo_extra.core.command import CargoCommand
from cargo_extra.exceptions import CargoExtraError
from cargo_extra.infra.cargo_detector import detect_cargo, detect_rustup
from cargo_extra.infra.subprocess_runner import SubprocessRunner
from cargo_extra.version import __version__

_OS_NAMES: dict[str, str] = {"Darwin": "macOS"}


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _cargo_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the cargo row.

    Reports ``cargo --version`` output when the binary is found.
    """
    status_obj = detect_cargo()
    if not status_obj.found:
        return "cargo", f"{status_obj.program} not found", "[red]FAIL[/red]"
    try:
        output = SubprocessRunner().capture(
            CargoCommand(status_obj.program, ["--version"]),
        )
    except CargoExtraError:
        return "cargo", str(status_obj.path), "[yellow]WARN[/yellow]"
    return "cargo", output.strip() or str(status_obj.path), "[green]OK[/green]"


def _rustup_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the rustup row.

    Missing rustup only matters for ``+<channel>`` prefixes, so it warns.
    """
    path = detect_rustup()
    if path is None:
        return "rustup", "not found", "[yellow]WARN[/yellow]"
    return "rustup", str(path), "[green]OK[/green]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system = _OS_NAMES.get(platform.system(), platform.system())
    value = f"{system} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _cargo_extra_version_check() -> tuple[str, str, str]:
    return "cargo-extra", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\ncargo-extra doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _render_rich_table(table_class: type[Any], checks: list[tuple[str, str, str]]) -> None:
    table = table_class(title="cargo-extra doctor", header_style="bold cyan", border_style="dim")
    for column in ("Component", "Value"):
        table.add_column(column, no_wrap=column == "Component")
    table.add_column("Status", justify="center")
    for row in checks:
        table.add_row(*row)
    console.print(table)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Run every check, print the summary, and return an exit code.

    Only a missing cargo (or an unsupported Python) is fatal; a missing
    rustup or an unreadable ``cargo --version`` is reported as a warning.
    """
    checks = [
        _cargo_extra_version_check(),
        _python_version_check(),
        _cargo_check(),
        _rustup_check(),
        _os_check(),
    ]

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
    else:
        _render_rich_table(Table, checks)

    cargo_status = detect_cargo()
    if not cargo_status.found and cargo_status.install_commands:
        console.print(f"{cargo_status.program} is not installed. Install Rust with:")
        for cmd in cargo_status.install_commands:
            console.print(f"  {cmd}")

    if any(_status_plain(status) == "FAIL" for _, _, status in checks):
        console.print("Some checks failed.")
        return exit_codes.GENERAL_ERROR

    console.print("All checks passed.")
    return exit_codes.SUCCESS
