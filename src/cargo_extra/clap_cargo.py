"""The :class:`ClapCargo` aggregate — every argument group plus metadata access.

This module is the composition root for library users: it combines the
core argument groups with the subprocess-backed runner from ``infra``.
Embed it in a host CLI with :meth:`ClapCargo.add_arguments` /
:meth:`ClapCargo.from_namespace`, or parse a whole argument vector with
:meth:`ClapCargo.parse_args`::

    cargo = ClapCargo.parse_args(["--release", "-p", "app", "--", "-v"])
    cmd = cargo.build_cmd()  # cargo +stable build --package app --release -- -v

Thread safety
-------------
Argument groups are plain mutable values and are not synchronised.  The
metadata cache is: concurrent first calls to :meth:`ClapCargo.metadata`
on one instance run ``cargo metadata`` exactly once.
"""

from __future__ import annotations

import argparse
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from cargo_extra.core.args import Features, Manifest, Workspace
from cargo_extra.core.build_options import BuildOptions
from cargo_extra.core.command import CargoCommand
from cargo_extra.core.metadata_service import MetadataService
from cargo_extra.core.models import DependencyKind, Metadata, Package, Target
from cargo_extra.core.package_lookup import find_package
from cargo_extra.core.protocols import CommandRunner
from cargo_extra.core.toolchain import ToolchainSelector
from cargo_extra.exceptions import ManifestPathError
from cargo_extra.infra.subprocess_runner import SubprocessRunner
from cargo_extra.utils.constants import (
    DEFAULT_CARGO,
    DEFAULT_MANIFEST,
    DEFAULT_WASM_TRIPLE,
    METADATA_FORMAT_VERSION,
    NIGHTLY_CHANNEL,
    RUSTFLAGS_ENV,
    STRIP_LINK_ARGS,
)

SLOP_SEPARATOR: str = "--"


def split_slop(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split *argv* at the first ``--`` into ``(flags, passthrough)``.

    The separator itself belongs to neither half.
    """
    tokens = list(argv)
    if SLOP_SEPARATOR not in tokens:
        return tokens, []
    index = tokens.index(SLOP_SEPARATOR)
    return tokens[:index], tokens[index + 1:]


@dataclass
class ClapCargo:
    """All cargo argument groups plus passthrough arguments (``slop``).

    ``slop`` is kept out of :meth:`to_args`; it is appended after a
    literal ``--`` only when a command is built.  The toolchain group is
    also left out of :meth:`to_args` because the channel is applied as a
    ``+<channel>`` program prefix, not as a cargo flag.
    """

    features: Features = field(default_factory=Features)
    manifest: Manifest = field(default_factory=Manifest)
    workspace: Workspace = field(default_factory=Workspace)
    toolchain: ToolchainSelector = field(default_factory=ToolchainSelector)
    build: BuildOptions = field(default_factory=BuildOptions)
    slop: list[str] = field(default_factory=list)
    """Extra arguments passed to cargo after ``--``."""

    runner: CommandRunner | None = field(default=None, compare=False, repr=False)
    """Process backend; defaults to :class:`SubprocessRunner`."""

    _runner: CommandRunner = field(init=False, compare=False, repr=False)
    _metadata_service: MetadataService = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self._runner = self.runner if self.runner is not None else SubprocessRunner()
        self._metadata_service = MetadataService(self._runner)

    # ------------------------------------------------------------------
    # Argument parsing
    # ------------------------------------------------------------------

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Register every group's flags on *parser*."""
        Features.add_arguments(parser)
        Manifest.add_arguments(parser)
        Workspace.add_arguments(parser)
        ToolchainSelector.add_arguments(parser)
        BuildOptions.add_arguments(parser)

    @classmethod
    def from_namespace(
        cls,
        namespace: argparse.Namespace,
        slop: Iterable[str] = (),
        *,
        runner: CommandRunner | None = None,
    ) -> ClapCargo:
        return cls(
            features=Features.from_namespace(namespace),
            manifest=Manifest.from_namespace(namespace),
            workspace=Workspace.from_namespace(namespace),
            toolchain=ToolchainSelector.from_namespace(namespace),
            build=BuildOptions.from_namespace(namespace),
            slop=list(slop),
            runner=runner,
        )

    @classmethod
    def build_parser(cls, prog: str | None = None) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=prog,
            usage="%(prog)s [options] [-- CARGO_ARGS ...]",
        )
        cls.add_arguments(parser)
        return parser

    @classmethod
    def parse_args(
        cls,
        argv: Sequence[str],
        *,
        prog: str | None = None,
        runner: CommandRunner | None = None,
    ) -> ClapCargo:
        """Parse *argv* (without the program name).

        Everything after the first ``--`` becomes :attr:`slop` verbatim.
        Invalid flags make :mod:`argparse` exit with status 2.
        """
        flags, slop = split_slop(argv)
        namespace = cls.build_parser(prog).parse_args(flags)
        return cls.from_namespace(namespace, slop, runner=runner)

    # ------------------------------------------------------------------
    # Serialize / merge
    # ------------------------------------------------------------------

    def to_args(self) -> list[str]:
        """Cargo flags in the order workspace, features, build, manifest."""
        args = self.workspace.to_args()
        args.extend(self.features.to_args())
        args.extend(self.build.to_args())
        args.extend(self.manifest.to_args())
        return args

    def merge(self, other: ClapCargo) -> None:
        """Fold *other* into ``self``; values already set on ``self`` win."""
        self.features.merge(other.features)
        self.manifest.merge(other.manifest)
        self.workspace.merge(other.workspace)
        self.toolchain.merge(other.toolchain)
        self.build.merge(other.build)
        self.slop.extend(other.slop)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def channel(self) -> str:
        """Toolchain channel: ``nightly`` when optimizing, else the selected one."""
        if self.build.optimize:
            return NIGHTLY_CHANNEL
        return self.toolchain.channel_name()

    def cargo_cmd(self) -> CargoCommand:
        """Bare cargo invocation with toolchain prefix and linker env applied.

        The ``+<channel>`` prefix is only added when the binary is the
        plain ``cargo`` rustup proxy; an explicit ``$CARGO`` path points at
        a concrete toolchain that would reject it.
        """
        cmd = CargoCommand(self.toolchain.bin())
        if cmd.program.lower() == DEFAULT_CARGO:
            cmd.arg(f"+{self.channel()}")
        if self.build.link_args or self.build.optimize:
            cmd.set_env(RUSTFLAGS_ENV, STRIP_LINK_ARGS)
        return cmd

    def add_args_to_cmd(self, cmd: CargoCommand) -> CargoCommand:
        """Append :meth:`to_args`, then ``--`` and the slop if there is any."""
        cmd.extend(self.to_args())
        if self.slop:
            cmd.arg(SLOP_SEPARATOR)
            cmd.extend(self.slop)
        return cmd

    def build_cmd(self) -> CargoCommand:
        return self.add_args_to_cmd(self.cargo_cmd().arg("build"))

    def run(self, cmd: CargoCommand) -> int:
        """Spawn *cmd* with inherited stdio; return its exit status."""
        return self._runner.run(cmd)

    def metadata_cmd(self) -> CargoCommand:
        """``cargo metadata`` for the current manifest and feature selection."""
        cmd = CargoCommand(self.toolchain.bin())
        cmd.extend(["metadata", "--format-version", METADATA_FORMAT_VERSION])
        cmd.extend(self.manifest.metadata_args())
        cmd.extend(self.features.metadata_args())
        return cmd

    def tree_cmd(self, package: Package, dep_kind: DependencyKind) -> CargoCommand:
        """Flat ``cargo tree`` of *package* restricted to *dep_kind* edges."""
        cmd = CargoCommand(self.toolchain.bin())
        cmd.extend(
            [
                "tree",
                "--prefix",
                "none",
                "--edges",
                dep_kind.edges,
                "--manifest-path",
                package.manifest_path,
            ]
        )
        return cmd

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def metadata(self) -> Metadata:
        """Metadata for the CLI's context, fetched once per instance.

        The manifest and feature flags in effect on the first successful
        call decide the query; later changes to them are not observed.
        """
        return self._metadata_service.metadata(self.metadata_cmd())

    def manifest_path(self) -> Path:
        """Configured manifest path, made absolute against the working directory."""
        path = self.manifest.manifest_path
        if path is None:
            path = Path(DEFAULT_MANIFEST)
        if path.is_absolute():
            return path
        try:
            return Path.cwd() / path
        except OSError as exc:
            raise ManifestPathError(
                f"Cannot resolve manifest path {path}: {exc}",
                hint="Pass an absolute --manifest-path.",
            ) from exc

    def target_dir(self) -> Path:
        """Directory where build artifacts will go."""
        return Path(self.metadata().target_directory)

    def current_packages(self) -> list[Package]:
        """Packages selected by the workspace flags."""
        selected, _excluded = self.workspace.partition_packages(self.metadata())
        return selected

    def packages(self) -> list[Package]:
        """Every package in the resolved graph."""
        return list(self.metadata().packages)

    def find_package(self, name: str) -> Package | None:
        """Package named exactly *name*, or ``None``.

        Raises
        ------
        SimilarPackageError
            When only a ``-``/``_``/case variant of *name* exists.
        """
        return find_package(self.packages(), name)

    def get_deps(
        self,
        package: Package,
        dep_kind: DependencyKind = DependencyKind.NORMAL,
    ) -> list[Package]:
        """Packages *package* depends on transitively through *dep_kind* edges.

        ``DependencyKind.UNKNOWN`` selects every edge kind.
        """
        return self._metadata_service.dependencies(
            self.metadata_cmd(),
            self.tree_cmd(package, dep_kind),
            package,
        )

    def built_bin(self, target: Target) -> Path:
        """Expected path of *target*'s ``.wasm`` artifact."""
        triple = self.build.target or DEFAULT_WASM_TRIPLE
        return (
            self.target_dir()
            / triple
            / self.build.profile_name()
            / target.wasm_bin_name
        )
