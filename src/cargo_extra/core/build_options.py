"""Build flags: target triple, profile selection, and size optimisation."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from cargo_extra.utils.constants import BUILD_STD_ARGS


@dataclass(slots=True)
class BuildOptions:
    """Flags forwarded to ``cargo build``.

    An explicit ``profile`` wins over the ``release``-derived profile
    name when resolving :meth:`profile_name`; both are still serialized.
    """

    optimize: bool = False
    """Rebuild std with ``panic_immediate_abort`` (requires nightly)."""

    target: str | None = None
    all_targets: bool = False
    link_args: bool = False
    """Ask the linker to strip the output binary."""

    release: bool = False
    profile: str | None = None

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("Build Options")
        group.add_argument(
            "--optimize",
            action="store_true",
            help="Add additional nightly features for optimizing",
        )
        group.add_argument(
            "--target",
            default=None,
            metavar="TRIPLE",
            help="Build for the target triple",
        )
        group.add_argument(
            "--all-targets",
            action="store_true",
            help="Build all targets",
        )
        group.add_argument(
            "--link-args",
            action="store_true",
            help="Strip the binary at link time",
        )
        group.add_argument(
            "-r",
            "--release",
            action="store_true",
            help="Build artifacts in release mode, with optimizations",
        )
        group.add_argument(
            "--profile",
            default=None,
            metavar="PROFILE_NAME",
            help="Build artifacts with the specified profile",
        )

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> BuildOptions:
        return cls(
            optimize=bool(getattr(namespace, "optimize", False)),
            target=getattr(namespace, "target", None),
            all_targets=bool(getattr(namespace, "all_targets", False)),
            link_args=bool(getattr(namespace, "link_args", False)),
            release=bool(getattr(namespace, "release", False)),
            profile=getattr(namespace, "profile", None),
        )

    def profile_name(self) -> str:
        """Effective profile directory name under the target directory."""
        if self.profile is not None:
            return self.profile
        return "release" if self.release else "debug"

    def to_args(self) -> list[str]:
        args: list[str] = []
        if self.optimize:
            args.extend(BUILD_STD_ARGS)
        if self.target is not None:
            args.append("--target")
            args.append(self.target)
        if self.all_targets:
            args.append("--all-targets")
        if self.release:
            args.append("--release")
        if self.profile is not None:
            args.append("--profile")
            args.append(self.profile)
        return args

    def merge(self, other: BuildOptions) -> None:
        self.optimize = self.optimize or other.optimize
        if self.target is None:
            self.target = other.target
        self.all_targets = self.all_targets or other.all_targets
        self.link_args = self.link_args or other.link_args
        self.release = self.release or other.release
        if self.profile is None:
            self.profile = other.profile
