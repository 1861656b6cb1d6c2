"""Core metadata service — one-shot ``cargo metadata`` cache and dependency lookup.

The service owns the only mutable shared state in the library: the
parsed metadata and its ``name-version`` index.  Both are populated at
most once per service instance.

Guarantees
----------
* First access is serialised behind a lock; concurrent first callers
  run the query once and all observe the same result.
* A failed first fetch caches nothing — the next call retries.
* Once populated, the cache is never refreshed, even if the command
  that would be built has changed.
* Only :class:`~cargo_extra.exceptions.CargoExtraError` subclasses escape.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any

from cargo_extra.core.command import CargoCommand
from cargo_extra.core.models import Dependency, DependencyKind, Metadata, Package, Target
from cargo_extra.core.package_lookup import (
    build_package_index,
    parse_tree_output,
    resolve_dependency_keys,
)
from cargo_extra.core.protocols import CommandRunner
from cargo_extra.exceptions import (
    CargoCommandError,
    CargoExtraError,
    DependencyTreeError,
    MetadataQueryError,
    append_rustup_suggestion,
)

logger = logging.getLogger(__name__)


class MetadataService:
    """Lazily fetches, parses, and caches cargo metadata.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self._runner: CommandRunner = runner
        self._lock = threading.Lock()
        self._metadata: Metadata | None = None
        self._index: dict[str, Package] = {}

    @property
    def is_populated(self) -> bool:
        return self._metadata is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def metadata(self, command: CargoCommand) -> Metadata:
        """Return the cached metadata, running *command* on first use.

        *command* is ignored once the cache is populated.

        Raises
        ------
        MetadataQueryError
            When cargo fails or its output cannot be parsed.
        EnvironmentError
            When cargo cannot be found.
        """
        cached = self._metadata
        if cached is not None:
            return cached
        with self._lock:
            if self._metadata is None:
                metadata = self.parse_metadata(self._fetch(command))
                self._index = build_package_index(metadata.packages)
                self._metadata = metadata
                logger.debug(
                    "cached metadata for %d packages (target dir %s)",
                    len(metadata.packages),
                    metadata.target_directory,
                )
            return self._metadata

    def dependencies(
        self,
        metadata_command: CargoCommand,
        tree_command: CargoCommand,
        package: Package,
    ) -> list[Package]:
        """Resolve the packages listed by *tree_command* for *package*.

        Tree lines naming packages absent from the metadata are logged
        and skipped; *package* itself is never part of the result.

        Raises
        ------
        DependencyTreeError
            When ``cargo tree`` fails for *package*.
        """
        self.metadata(metadata_command)
        try:
            stdout = self._runner.capture(tree_command)
        except CargoCommandError as exc:
            raise DependencyTreeError(
                f"failed to run cargo tree on {package.name}: {exc}",
                hint=exc.hint,
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc
        except CargoExtraError:
            raise
        except Exception as exc:
            raise DependencyTreeError(
                f"Unexpected error running cargo tree on {package.name}: {exc}",
            ) from exc
        keys = parse_tree_output(stdout)
        return resolve_dependency_keys(keys, self._index, package)

    # ------------------------------------------------------------------
    # Runner delegation (safe boundary)
    # ------------------------------------------------------------------

    def _fetch(self, command: CargoCommand) -> dict[str, Any]:
        """Run ``cargo metadata`` and decode its JSON document."""
        try:
            stdout = self._runner.capture(command)
        except CargoCommandError as exc:
            raise MetadataQueryError(
                f"cargo metadata failed: {exc}",
                hint=exc.hint or append_rustup_suggestion(
                    "Check that the manifest path points at a valid Cargo.toml.",
                ),
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc
        except CargoExtraError:
            raise
        except Exception as exc:
            raise MetadataQueryError(
                f"Unexpected error running cargo metadata: {exc}",
            ) from exc

        try:
            info: object = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise MetadataQueryError(
                f"cargo metadata returned invalid JSON: {exc}",
            ) from exc
        if not isinstance(info, dict):
            raise MetadataQueryError(
                "cargo metadata returned an unexpected data structure.",
            )
        return info

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @classmethod
    def parse_metadata(cls, info: dict[str, Any]) -> Metadata:
        """Convert a decoded ``cargo metadata`` document into :class:`Metadata`."""
        raw_packages = info.get("packages")
        packages = tuple(
            cls._parse_package(entry)
            for entry in (raw_packages if isinstance(raw_packages, list) else [])
            if isinstance(entry, dict)
        )
        resolve = info.get("resolve")
        root = resolve.get("root") if isinstance(resolve, dict) else None
        return Metadata(
            packages=packages,
            workspace_members=tuple(str(m) for m in info.get("workspace_members") or ()),
            target_directory=str(info.get("target_directory", "")),
            workspace_root=str(info.get("workspace_root", "")),
            resolve_root=str(root) if root is not None else None,
        )

    @classmethod
    def _parse_package(cls, raw: dict[str, Any]) -> Package:
        return Package(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            version=str(raw.get("version", "")),
            manifest_path=str(raw.get("manifest_path", "")),
            dependencies=tuple(
                cls._parse_dependency(dep)
                for dep in raw.get("dependencies") or ()
                if isinstance(dep, dict)
            ),
            targets=tuple(
                cls._parse_target(target)
                for target in raw.get("targets") or ()
                if isinstance(target, dict)
            ),
        )

    @staticmethod
    def _parse_dependency(raw: dict[str, Any]) -> Dependency:
        return Dependency(
            name=str(raw.get("name", "")),
            kind=DependencyKind.from_metadata(raw.get("kind")),
            req=str(raw.get("req", "*")),
            optional=bool(raw.get("optional", False)),
        )

    @staticmethod
    def _parse_target(raw: dict[str, Any]) -> Target:
        return Target(
            name=str(raw.get("name", "")),
            kind=tuple(str(k) for k in raw.get("kind") or ()),
            src_path=str(raw.get("src_path", "")),
        )
