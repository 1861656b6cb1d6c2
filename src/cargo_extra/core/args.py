"""Argument groups for package selection, features, and the manifest.

Each group is a small mutable dataclass that knows how to:

* bind its fields to an :mod:`argparse` parser (:meth:`add_arguments`),
* rebuild itself from the parsed namespace (:meth:`from_namespace`),
* serialize back into cargo tokens (:meth:`to_args`), and
* fold another instance into itself (:meth:`merge`, ``self`` wins).

Serialization order is fixed per group; repeated flags appear once per
sequence element, in insertion order.
"""

from __future__ import annotations

import argparse
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from cargo_extra.core.models import Metadata, Package

_FEATURE_SEPARATOR = re.compile(r"[\s,]+")


def _split_features(values: Iterable[str] | None) -> list[str]:
    """Flatten repeated ``--features`` values, splitting on spaces and commas."""
    if not values:
        return []
    return [
        feature
        for value in values
        for feature in _FEATURE_SEPARATOR.split(value)
        if feature
    ]


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Features:
    """Feature selection flags.

    ``all_features`` and an explicit ``features`` list may both be set;
    no conflict check is made and both are serialized.
    """

    all_features: bool = False
    no_default_features: bool = False
    features: list[str] = field(default_factory=list)

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("Feature Selection")
        group.add_argument(
            "-F",
            "--features",
            action="append",
            default=None,
            metavar="FEATURES",
            help="Space or comma separated list of features to activate",
        )
        group.add_argument(
            "--all-features",
            action="store_true",
            help="Activate all available features",
        )
        group.add_argument(
            "--no-default-features",
            action="store_true",
            help="Do not activate the `default` feature",
        )

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> Features:
        return cls(
            all_features=bool(getattr(namespace, "all_features", False)),
            no_default_features=bool(getattr(namespace, "no_default_features", False)),
            features=_split_features(getattr(namespace, "features", None)),
        )

    def to_args(self) -> list[str]:
        args: list[str] = []
        if self.all_features:
            args.append("--all-features")
        if self.no_default_features:
            args.append("--no-default-features")
        if self.features:
            args.append("--features")
            args.append(" ".join(self.features))
        return args

    def metadata_args(self) -> list[str]:
        """Feature flags forwarded to ``cargo metadata``.

        Forwarding matters: optional dependencies only show up in the
        resolved graph when the features enabling them are active.
        """
        args: list[str] = []
        if self.all_features:
            args.append("--all-features")
        if self.no_default_features:
            args.append("--no-default-features")
        if self.features:
            args.append("--features")
            args.append(",".join(self.features))
        return args

    def merge(self, other: Features) -> None:
        self.all_features = self.all_features or other.all_features
        self.no_default_features = self.no_default_features or other.no_default_features
        self.features.extend(other.features)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Manifest:
    """Path to the ``Cargo.toml`` to operate on.

    ``None`` means "``./Cargo.toml`` relative to the working directory";
    resolution happens in the aggregate, not here.
    """

    manifest_path: Path | None = None

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("Manifest")
        group.add_argument(
            "--manifest-path",
            type=Path,
            default=None,
            metavar="PATH",
            help="Path to Cargo.toml",
        )

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> Manifest:
        return cls(manifest_path=getattr(namespace, "manifest_path", None))

    def to_args(self) -> list[str]:
        if self.manifest_path is None:
            return []
        return ["--manifest-path", str(self.manifest_path)]

    def metadata_args(self) -> list[str]:
        """Manifest flags forwarded to ``cargo metadata``."""
        return self.to_args()

    def merge(self, other: Manifest) -> None:
        if self.manifest_path is None:
            self.manifest_path = other.manifest_path


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Workspace:
    """Package selection flags.  ``workspace`` and ``all`` are synonyms."""

    package: list[str] = field(default_factory=list)
    workspace: bool = False
    all: bool = False
    exclude: list[str] = field(default_factory=list)

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("Package Selection")
        group.add_argument(
            "-p",
            "--package",
            action="append",
            default=None,
            metavar="SPEC",
            help="Package to process (repeatable)",
        )
        group.add_argument(
            "--workspace",
            action="store_true",
            help="Process all packages in the workspace",
        )
        group.add_argument(
            "--all",
            action="store_true",
            help=argparse.SUPPRESS,
        )
        group.add_argument(
            "--exclude",
            action="append",
            default=None,
            metavar="SPEC",
            help="Exclude packages from being processed (repeatable)",
        )

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> Workspace:
        return cls(
            package=list(getattr(namespace, "package", None) or []),
            workspace=bool(getattr(namespace, "workspace", False)),
            all=bool(getattr(namespace, "all", False)),
            exclude=list(getattr(namespace, "exclude", None) or []),
        )

    def to_args(self) -> list[str]:
        args: list[str] = []
        if self.workspace or self.all:
            args.append("--workspace")
        for package in self.package:
            args.append("--package")
            args.append(package)
        for exclude in self.exclude:
            args.append("--exclude")
            args.append(exclude)
        return args

    def merge(self, other: Workspace) -> None:
        self.package.extend(other.package)
        self.workspace = self.workspace or other.workspace
        self.all = self.all or other.all
        self.exclude.extend(other.exclude)

    def partition_packages(
        self,
        metadata: Metadata,
    ) -> tuple[list[Package], list[Package]]:
        """Split *metadata*'s packages into ``(selected, excluded)``.

        Selection mode
        --------------
        * ``--workspace`` / ``--all`` → every workspace member.
        * ``--package`` → members whose name is listed.
        * neither → the resolve root, or every member for a virtual
          workspace.

        Only workspace members are ever selected, and ``--exclude`` names
        are removed in every mode.  Name patterns are not supported.
        """
        members = set(metadata.workspace_members)
        if self.workspace or self.all:
            base_ids = members
        elif self.package:
            wanted = set(self.package)
            base_ids = {pkg.id for pkg in metadata.packages if pkg.name in wanted}
        elif metadata.resolve_root is not None:
            base_ids = {metadata.resolve_root}
        else:
            base_ids = members

        excluded_names = set(self.exclude)
        selected: list[Package] = []
        excluded: list[Package] = []
        for package in metadata.packages:
            if (
                package.id in members
                and package.id in base_ids
                and package.name not in excluded_names
            ):
                selected.append(package)
            else:
                excluded.append(package)
        return selected, excluded
