"""Core / service layer — argument groups, models, and metadata logic.

Rules
-----
* No ``print()`` calls.
* No process spawning; commands are built here and run by ``infra``.
* No imports from ``cli`` or ``infra``.
"""

from cargo_extra.core.args import Features, Manifest, Workspace
from cargo_extra.core.build_options import BuildOptions
from cargo_extra.core.command import CargoCommand
from cargo_extra.core.metadata_service import MetadataService
from cargo_extra.core.models import Dependency, DependencyKind, Metadata, Package, Target
from cargo_extra.core.protocols import Args, CommandRunner, Merge
from cargo_extra.core.toolchain import ToolchainSelector

__all__: list[str] = [
    "Args",
    "BuildOptions",
    "CargoCommand",
    "CommandRunner",
    "Dependency",
    "DependencyKind",
    "Features",
    "Manifest",
    "Merge",
    "Metadata",
    "MetadataService",
    "Package",
    "Target",
    "ToolchainSelector",
    "Workspace",
]
