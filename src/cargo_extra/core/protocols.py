"""Protocols (interfaces) consumed by the core layer.

These define the contracts that argument groups and infrastructure
adapters must satisfy.  Core code depends ONLY on these protocols —
never on concrete implementations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from cargo_extra.core.command import CargoCommand

_T_contra = TypeVar("_T_contra", contravariant=True)


class Args(Protocol):
    """Anything that serializes itself into cargo command-line tokens."""

    def to_args(self) -> list[str]:
        """Return the tokens in the fixed order cargo expects."""
        ...  # pragma: no cover


class Merge(Protocol[_T_contra]):
    """In-place combination of two argument sets of the same kind.

    ``self`` takes precedence: optional scalars keep their value when set,
    flags are OR-ed, and sequences get *other*'s items appended.
    """

    def merge(self, other: _T_contra) -> None:
        ...  # pragma: no cover


class CommandRunner(Protocol):
    """Contract for process-spawning backends.

    Implementations must map all raw ``OSError`` / ``subprocess``
    exceptions to :class:`~cargo_extra.exceptions.CargoExtraError`
    subclasses.
    """

    def capture(self, command: CargoCommand) -> str:
        """Run *command* to completion and return its stdout.

        Raises
        ------
        CargoCommandError
            When the process exits with a non-zero status.
        EnvironmentError
            When the program cannot be found.
        """
        ...  # pragma: no cover

    def run(self, command: CargoCommand) -> int:
        """Run *command* with inherited stdio and return its exit status."""
        ...  # pragma: no cover
