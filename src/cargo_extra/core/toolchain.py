"""Toolchain selection (``--channel``) and cargo binary resolution."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass

from cargo_extra.utils.constants import CARGO_ENV, DEFAULT_CARGO, DEFAULT_CHANNEL


@dataclass(slots=True)
class ToolchainSelector:
    """Which rustup toolchain channel to invoke cargo through.

    ``channel`` stays ``None`` unless given explicitly, so that
    serialization and merging can tell "unset" from "stable".  Use
    :meth:`channel_name` for the effective value.
    """

    channel: str | None = None

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("Toolchain")
        group.add_argument(
            "--channel",
            default=None,
            metavar="NAME",
            help="stable, beta, nightly, or a custom toolchain (default: stable)",
        )

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> ToolchainSelector:
        return cls(channel=getattr(namespace, "channel", None))

    def channel_name(self) -> str:
        return self.channel if self.channel is not None else DEFAULT_CHANNEL

    @staticmethod
    def bin() -> str:
        """Cargo binary: ``$CARGO`` when set, else ``cargo``."""
        return os.environ.get(CARGO_ENV, DEFAULT_CARGO)

    def to_args(self) -> list[str]:
        if self.channel is None:
            return []
        return ["--channel", self.channel]

    def merge(self, other: ToolchainSelector) -> None:
        if self.channel is None:
            self.channel = other.channel
