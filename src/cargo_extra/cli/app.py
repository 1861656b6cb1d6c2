"""CLI application entry point and command routing for cargo-extra.

:func:`cli` is the error boundary for the command-line tool.  It catches
:class:`~cargo_extra.exceptions.CargoExtraError`, ``KeyboardInterrupt``
and stray exceptions, prints them via Rich, and exits with a fixed code.

Commands only parse flags, delegate to
:class:`~cargo_extra.clap_cargo.ClapCargo`, and render the result.  Exit
codes are decided here and nowhere else.
"""

from __future__ import annotations

import argparse
import sys

from cargo_extra.cli import exit_codes
from cargo_extra.cli.console import configure_logging, console
from cargo_extra.clap_cargo import ClapCargo, split_slop
from cargo_extra.core.models import DependencyKind
from cargo_extra.exceptions import CargoExtraError, PackageLookupError
from cargo_extra.version import __version__

COMMANDS: tuple[str, ...] = ("args", "build", "packages", "deps", "find", "doctor")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``cargo-extra [args]``          — show the composed cargo arguments
    * ``cargo-extra build``           — run ``cargo build`` with them
    * ``cargo-extra packages``        — list the selected packages
    * ``cargo-extra deps NAME``       — list a package's dependency closure
    * ``cargo-extra find NAME``       — look a package up by exact name
    * ``cargo-extra doctor``          — environment diagnostics

    Anything after ``--`` is passed through to cargo untouched.
    """
    parser = argparse.ArgumentParser(
        prog="cargo-extra",
        description="Compose cargo arguments and query workspace metadata.",
        usage="%(prog)s [COMMAND] [NAME] [options] [-- CARGO_ARGS ...]",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="args",
        choices=COMMANDS,
        help="What to do (default: args).",
    )
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Package name for 'deps' and 'find'.",
    )
    parser.add_argument(
        "--kind",
        default=DependencyKind.NORMAL.edges,
        choices=[kind.edges for kind in DependencyKind],
        help="Dependency edges followed by 'deps' (default: normal).",
    )
    ClapCargo.add_arguments(parser)
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_args(cargo: ClapCargo) -> int:
    from cargo_extra.cli.report import render_args

    render_args(cargo.to_args(), cargo.slop, str(cargo.build_cmd()))
    return exit_codes.SUCCESS


def _handle_build(cargo: ClapCargo) -> int:
    """Spawn ``cargo build``; its exit status becomes ours."""
    command = cargo.build_cmd()
    console.print(f"[bold]Running[/bold] {command}")
    returncode = cargo.run(command)
    if returncode != exit_codes.SUCCESS:
        console.print(f"[bold red]cargo build failed[/bold red] (exit status {returncode})")
    return returncode


def _handle_packages(cargo: ClapCargo) -> int:
    from cargo_extra.cli.report import render_packages

    render_packages("Selected Packages", cargo.current_packages())
    return exit_codes.SUCCESS


def _handle_find(cargo: ClapCargo, name: str) -> int:
    package = cargo.find_package(name)
    if package is None:
        console.print(f"[yellow]No package named[/yellow] {name}")
        return exit_codes.GENERAL_ERROR
    console.print(f"[bold]{package.name}[/bold] {package.version}  {package.manifest_path}")
    return exit_codes.SUCCESS


def _handle_deps(cargo: ClapCargo, name: str, kind: DependencyKind) -> int:
    from cargo_extra.cli.report import render_packages

    package = cargo.find_package(name)
    if package is None:
        raise PackageLookupError(
            f"No package named {name}",
            hint="Run 'cargo-extra packages --workspace' to list packages.",
        )
    deps = cargo.get_deps(package, kind)
    render_packages(f"{package.name} {kind.edges} dependencies ({len(deps)})", deps)
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from cargo_extra.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the cargo-extra CLI.

    *argv* defaults to ``sys.argv[1:]``.  Tokens after the first ``--``
    are forwarded to cargo.  Domain errors propagate to :func:`cli`;
    the return value is the process exit status.
    """
    flags, slop = split_slop(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_intermixed_args(flags)
    configure_logging(verbose=args.verbose)

    command: str = args.command
    if command == "doctor":
        return _handle_doctor()

    cargo = ClapCargo.from_namespace(args, slop)
    if command == "build":
        return _handle_build(cargo)
    if command == "packages":
        return _handle_packages(cargo)
    if command in ("deps", "find"):
        if args.name is None:
            parser.error(f"'{command}' requires a package name")
        if command == "find":
            return _handle_find(cargo, args.name)
        return _handle_deps(cargo, args.name, DependencyKind.from_edges(args.kind))
    return _handle_args(cargo)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: run :func:`main` and map errors to exit codes."""
    try:
        sys.exit(main())
    except CargoExtraError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Internal error in cargo-extra.[/bold red] "
            f"{type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
