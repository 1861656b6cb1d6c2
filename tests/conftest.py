"""Shared pytest fixtures and configuration for the cargo-extra test suite.

Guidelines
----------
* No test spawns a real cargo — processes are faked at the runner boundary.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state; ``$CARGO`` is cleared for every test.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any

import pytest

from cargo_extra.core.command import CargoCommand

WORKSPACE_ROOT = "/ws"


def _package_id(name: str, version: str = "0.1.0") -> str:
    return f"path+file://{WORKSPACE_ROOT}/{name}#{name}@{version}"


def _path_dep(name: str, kind: str | None = None) -> dict[str, Any]:
    return {"name": name, "req": "*", "kind": kind, "optional": False}


def _package(
    name: str,
    deps: list[dict[str, Any]],
    *,
    version: str = "0.1.0",
    manifest_dir: str | None = None,
) -> dict[str, Any]:
    directory = manifest_dir or f"{WORKSPACE_ROOT}/{name}"
    return {
        "id": _package_id(name, version),
        "name": name,
        "version": version,
        "manifest_path": f"{directory}/Cargo.toml",
        "dependencies": deps,
        "targets": [
            {
                "name": name,
                "kind": ["cdylib"],
                "src_path": f"{directory}/src/lib.rs",
            }
        ],
    }


def sample_metadata_json() -> dict[str, Any]:
    """A four-member virtual workspace chained zero ← single ← double ← triple.

    ``serde`` is a registry crate used only as a dev-dependency of
    ``triple-dep``.
    """
    serde = _package("serde", [], version="1.0.200", manifest_dir="/registry/serde-1.0.200")
    serde["id"] = "registry+https://github.com/rust-lang/crates.io-index#serde@1.0.200"
    packages = [
        _package("zero-dep", []),
        _package("single-dep", [_path_dep("zero-dep")]),
        _package("double-dep", [_path_dep("single-dep")]),
        _package(
            "triple-dep",
            [_path_dep("double-dep"), _path_dep("serde", "dev")],
        ),
        serde,
    ]
    members = [p["id"] for p in packages if p["name"] != "serde"]
    return {
        "packages": packages,
        "workspace_members": members,
        "resolve": {"nodes": [], "root": None},
        "target_directory": f"{WORKSPACE_ROOT}/target",
        "workspace_root": WORKSPACE_ROOT,
        "version": 1,
    }


SAMPLE_TREES: dict[str, str] = {
    f"{WORKSPACE_ROOT}/zero-dep/Cargo.toml": "zero-dep v0.1.0 (/ws/zero-dep)\n",
    f"{WORKSPACE_ROOT}/single-dep/Cargo.toml": (
        "single-dep v0.1.0 (/ws/single-dep)\n"
        "zero-dep v0.1.0 (/ws/zero-dep)\n"
    ),
    f"{WORKSPACE_ROOT}/double-dep/Cargo.toml": (
        "double-dep v0.1.0 (/ws/double-dep)\n"
        "single-dep v0.1.0 (/ws/single-dep)\n"
        "zero-dep v0.1.0 (/ws/zero-dep)\n"
    ),
    f"{WORKSPACE_ROOT}/triple-dep/Cargo.toml": (
        "triple-dep v0.1.0 (/ws/triple-dep)\n"
        "double-dep v0.1.0 (/ws/double-dep)\n"
        "single-dep v0.1.0 (/ws/single-dep)\n"
        "zero-dep v0.1.0 (/ws/zero-dep)\n"
        "zero-dep v0.1.0 (/ws/zero-dep) (*)\n"
    ),
}


class FakeRunner:
    """In-memory :class:`CommandRunner` keyed on the cargo subcommand.

    ``metadata_failures`` are raised (in order) before the metadata JSON
    is served; ``trees`` maps a manifest path to ``cargo tree`` stdout.
    """

    def __init__(
        self,
        metadata: dict[str, Any] | str | None = None,
        *,
        trees: dict[str, str] | None = None,
        metadata_failures: list[Exception] | None = None,
        returncode: int = 0,
    ) -> None:
        if metadata is None:
            metadata = sample_metadata_json()
        self.metadata_stdout = metadata if isinstance(metadata, str) else json.dumps(metadata)
        self.trees = dict(SAMPLE_TREES if trees is None else trees)
        self.metadata_failures = list(metadata_failures or [])
        self.returncode = returncode
        self.captured: list[CargoCommand] = []
        self.ran: list[CargoCommand] = []

    def subcommands(self) -> list[str]:
        return [cmd.args[0] for cmd in self.captured]

    def capture(self, command: CargoCommand) -> str:
        self.captured.append(command)
        subcommand = command.args[0]
        if subcommand == "metadata":
            if self.metadata_failures:
                raise self.metadata_failures.pop(0)
            return self.metadata_stdout
        if subcommand == "tree":
            manifest = command.args[command.args.index("--manifest-path") + 1]
            return self.trees.get(manifest, "")
        raise AssertionError(f"unexpected command: {command}")

    def run(self, command: CargoCommand) -> int:
        self.ran.append(command)
        return self.returncode


@pytest.fixture(autouse=True)
def _clear_cargo_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CARGO", raising=False)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture(autouse=True)
def _reset_cargo_extra_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("cargo_extra")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
