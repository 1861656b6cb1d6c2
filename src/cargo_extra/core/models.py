"""Domain models for the cargo metadata graph.

All models are **frozen** dataclasses — immutable value objects parsed
from ``cargo metadata --format-version 1`` output.  Only the fields this
library reads are modelled; everything else in the JSON is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Dependency kind
# ---------------------------------------------------------------------------

class DependencyKind(str, Enum):
    """Classification of a dependency edge.

    ``UNKNOWN`` doubles as "all kinds" when selecting ``cargo tree`` edges.
    """

    NORMAL = "normal"
    DEVELOPMENT = "dev"
    BUILD = "build"
    UNKNOWN = "unknown"

    @classmethod
    def from_metadata(cls, raw: object) -> DependencyKind:
        """Map the JSON ``kind`` field (``null``, ``"dev"``, ``"build"``)."""
        if raw is None or raw == "normal":
            return cls.NORMAL
        if raw == "dev":
            return cls.DEVELOPMENT
        if raw == "build":
            return cls.BUILD
        return cls.UNKNOWN

    @classmethod
    def from_edges(cls, edges: str) -> DependencyKind:
        """Inverse of :attr:`edges` — ``"all"`` maps to ``UNKNOWN``."""
        for kind in cls:
            if kind.edges == edges:
                return kind
        raise ValueError(f"Unknown dependency edge kind: {edges}")

    @property
    def edges(self) -> str:
        """Value for ``cargo tree --edges``."""
        if self is DependencyKind.UNKNOWN:
            return "all"
        return self.value


# ---------------------------------------------------------------------------
# Package graph
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Dependency:
    """A declared dependency of a package (not yet resolved)."""

    name: str
    kind: DependencyKind
    req: str = "*"
    optional: bool = False


@dataclass(frozen=True, slots=True)
class Target:
    """A build target (lib, bin, example, ...) of a package."""

    name: str
    kind: tuple[str, ...]
    src_path: str

    @property
    def wasm_bin_name(self) -> str:
        """File name of the ``.wasm`` artifact rustc emits for this target."""
        return f"{self.name.replace('-', '_')}.wasm"


@dataclass(frozen=True, slots=True)
class Package:
    """A package node in the metadata graph."""

    id: str
    """Opaque package id, unique within one metadata result."""

    name: str

    version: str

    manifest_path: str
    """Absolute path to the package's ``Cargo.toml``."""

    dependencies: tuple[Dependency, ...] = ()

    targets: tuple[Target, ...] = ()

    @property
    def key(self) -> str:
        """Lookup key matching ``cargo tree`` output (``name`` + ``v`` + version)."""
        return f"{self.name}v{self.version}"

    def dependencies_of_kind(self, kind: DependencyKind) -> list[Dependency]:
        """Declared dependencies filtered by *kind* (``UNKNOWN`` = all)."""
        if kind is DependencyKind.UNKNOWN:
            return list(self.dependencies)
        return [dep for dep in self.dependencies if dep.kind is kind]


@dataclass(frozen=True, slots=True)
class Metadata:
    """Read-only view of a ``cargo metadata`` result."""

    packages: tuple[Package, ...]

    workspace_members: tuple[str, ...]
    """Package ids of the workspace members."""

    target_directory: str
    """Build-artifact directory reported by cargo."""

    workspace_root: str = ""

    resolve_root: str | None = None
    """Package id of the root package, or ``None`` for a virtual workspace."""

    def workspace_packages(self) -> list[Package]:
        """Packages that are members of the workspace, in metadata order."""
        members = set(self.workspace_members)
        return [package for package in self.packages if package.id in members]
