"""Tests for the domain value objects (core/models.py, core/command.py)."""

from __future__ import annotations

import dataclasses

import pytest

from cargo_extra.core.command import CargoCommand
from cargo_extra.core.models import (
    Dependency,
    DependencyKind,
    Metadata,
    Package,
    Target,
)


def _pkg(name: str, version: str = "0.1.0", **kwargs: object) -> Package:
    return Package(
        id=f"{name}@{version}",
        name=name,
        version=version,
        manifest_path=f"/ws/{name}/Cargo.toml",
        **kwargs,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# DependencyKind
# ---------------------------------------------------------------------------

class TestDependencyKind:
    @pytest.mark.parametrize(
        ("raw", "kind"),
        [
            (None, DependencyKind.NORMAL),
            ("normal", DependencyKind.NORMAL),
            ("dev", DependencyKind.DEVELOPMENT),
            ("build", DependencyKind.BUILD),
            ("proc-macro", DependencyKind.UNKNOWN),
        ],
    )
    def test_from_metadata(self, raw: object, kind: DependencyKind) -> None:
        assert DependencyKind.from_metadata(raw) is kind

    def test_edges(self) -> None:
        assert [kind.edges for kind in DependencyKind] == ["normal", "dev", "build", "all"]

    def test_from_edges_inverts_edges(self) -> None:
        for kind in DependencyKind:
            assert DependencyKind.from_edges(kind.edges) is kind

    def test_from_edges_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="features"):
            DependencyKind.from_edges("features")


# ---------------------------------------------------------------------------
# Package graph
# ---------------------------------------------------------------------------

class TestPackage:
    def test_key_matches_tree_output(self) -> None:
        assert _pkg("serde", "1.0.200").key == "serdev1.0.200"

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            _pkg("a").name = "b"  # type: ignore[misc]

    def test_dependencies_of_kind(self) -> None:
        package = _pkg(
            "app",
            dependencies=(
                Dependency("log", DependencyKind.NORMAL),
                Dependency("cc", DependencyKind.BUILD),
                Dependency("insta", DependencyKind.DEVELOPMENT),
            ),
        )
        assert [d.name for d in package.dependencies_of_kind(DependencyKind.BUILD)] == ["cc"]
        assert len(package.dependencies_of_kind(DependencyKind.UNKNOWN)) == 3


class TestTarget:
    def test_wasm_bin_name_uses_underscores(self) -> None:
        target = Target(name="my-plugin", kind=("cdylib",), src_path="/ws/src/lib.rs")
        assert target.wasm_bin_name == "my_plugin.wasm"


class TestMetadata:
    def test_workspace_packages_in_metadata_order(self) -> None:
        a, b, c = _pkg("a"), _pkg("b"), _pkg("c")
        metadata = Metadata(
            packages=(a, b, c),
            workspace_members=(c.id, a.id),
            target_directory="/ws/target",
        )
        assert metadata.workspace_packages() == [a, c]
        assert metadata.resolve_root is None


# ---------------------------------------------------------------------------
# CargoCommand
# ---------------------------------------------------------------------------

class TestCargoCommand:
    def test_chaining(self) -> None:
        cmd = CargoCommand("cargo").arg("+stable").arg("build").extend(["-p", "app"])
        assert cmd.argv == ["cargo", "+stable", "build", "-p", "app"]

    def test_env_overrides(self) -> None:
        cmd = CargoCommand("cargo").set_env("RUSTFLAGS", "-C link-args=-s")
        assert cmd.env == {"RUSTFLAGS": "-C link-args=-s"}

    def test_str_is_shell_quoted(self) -> None:
        cmd = CargoCommand("cargo", ["build", "--features", "a b"])
        assert str(cmd) == "cargo build --features 'a b'"
