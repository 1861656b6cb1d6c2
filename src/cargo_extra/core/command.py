"""Process template for invoking cargo.

:class:`CargoCommand` is a pure value — building one performs no I/O.
Spawning it is the job of a :class:`~cargo_extra.core.protocols.CommandRunner`.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable
from dataclasses import dataclass, field
from os import PathLike


@dataclass(slots=True)
class CargoCommand:
    """Program, ordered arguments, and environment overrides."""

    program: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    """Variables layered on top of the parent environment when spawned."""

    def arg(self, value: str | PathLike[str]) -> CargoCommand:
        """Append one argument and return ``self`` for chaining."""
        self.args.append(str(value))
        return self

    def extend(self, values: Iterable[str | PathLike[str]]) -> CargoCommand:
        """Append several arguments in order and return ``self``."""
        self.args.extend(str(value) for value in values)
        return self

    def set_env(self, key: str, value: str) -> CargoCommand:
        self.env[key] = value
        return self

    @property
    def argv(self) -> list[str]:
        """Full argument vector, program first."""
        return [self.program, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)
