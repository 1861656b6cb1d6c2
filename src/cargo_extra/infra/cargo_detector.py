"""Infrastructure: cargo detection and platform guidance.

Locates the cargo binary (honouring ``$CARGO``) and provides
platform-specific installation guidance when it is missing.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from cargo_extra.core.toolchain import ToolchainSelector

# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CargoStatus:
    """Result of looking up cargo on PATH.

    Attributes
    ----------
    program : str
        The name or path that was looked up (``$CARGO`` or ``cargo``).
    found : bool
        Whether the program was located.
    path : Path | None
        Absolute path to the binary, or ``None``.
    install_commands : tuple[str, ...]
        Suggested shell commands for installing Rust on the current
        platform.  Empty when cargo is already present.
    """

    program: str
    found: bool
    path: Path | None
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_cargo(program: str | None = None) -> CargoStatus:
    """Look up *program* (default: ``$CARGO`` or ``cargo``).

    Returns a :class:`CargoStatus` regardless of whether cargo is
    present — the caller decides whether to abort or merely warn.
    """
    program_name = program if program is not None else ToolchainSelector.bin()
    result = shutil.which(program_name)

    if result is not None:
        return CargoStatus(
            program=program_name,
            found=True,
            path=Path(result).resolve(),
            install_commands=(),
        )

    return CargoStatus(
        program=program_name,
        found=False,
        path=None,
        install_commands=_platform_install_commands(),
    )


def detect_rustup() -> Path | None:
    """Path to ``rustup`` if installed; ``+channel`` prefixes need it."""
    result = shutil.which("rustup")
    return Path(result).resolve() if result is not None else None


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Rustlang.Rustup",
            "choco install rustup.install",
        )
    if system == "darwin":
        return (
            "curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh",
            "brew install rustup",
        )
    if system == "linux":
        return ("curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh",)
    return ("Please install Rust from https://rustup.rs",)
