"""cargo-extra — composable cargo argument groups and metadata helpers.

Mirrors the flag surface of ``cargo build`` as mergeable, serializable
argument groups and exposes a small set of metadata queries (target
directory, package selection, dependency closures) on top of
``cargo metadata`` and ``cargo tree``.
"""

from cargo_extra.clap_cargo import ClapCargo
from cargo_extra.core.args import Features, Manifest, Workspace
from cargo_extra.core.build_options import BuildOptions
from cargo_extra.core.command import CargoCommand
from cargo_extra.core.models import Dependency, DependencyKind, Metadata, Package, Target
from cargo_extra.core.toolchain import ToolchainSelector
from cargo_extra.version import __version__

__all__: list[str] = [
    "BuildOptions",
    "CargoCommand",
    "ClapCargo",
    "Dependency",
    "DependencyKind",
    "Features",
    "Manifest",
    "Metadata",
    "Package",
    "Target",
    "ToolchainSelector",
    "Workspace",
    "__version__",
]
