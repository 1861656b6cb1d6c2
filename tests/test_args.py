"""Tests for the argument groups (core/args.py, toolchain.py, build_options.py).

Pure tests — no processes, no filesystem.  These verify:

* ``to_args`` output order per group
* ``merge`` precedence (self wins, flags OR-ed, sequences appended)
* argparse binding round-trip through ``from_namespace``
* workspace package partitioning
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from cargo_extra.core.args import Features, Manifest, Workspace
from cargo_extra.core.build_options import BuildOptions
from cargo_extra.core.metadata_service import MetadataService
from cargo_extra.core.toolchain import ToolchainSelector
from conftest import sample_metadata_json


def _parse(group: type, argv: list[str]) -> object:
    parser = argparse.ArgumentParser()
    group.add_arguments(parser)
    return group.from_namespace(parser.parse_args(argv))


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------

class TestFeatures:
    def test_default_emits_nothing(self) -> None:
        assert Features().to_args() == []

    def test_all_flags(self) -> None:
        features = Features(all_features=True, no_default_features=True, features=["a", "b"])
        assert features.to_args() == [
            "--all-features",
            "--no-default-features",
            "--features",
            "a b",
        ]

    def test_all_features_does_not_suppress_explicit_list(self) -> None:
        features = Features(all_features=True, features=["serde"])
        assert features.to_args() == ["--all-features", "--features", "serde"]

    def test_metadata_args_comma_joined(self) -> None:
        features = Features(no_default_features=True, features=["a", "b"])
        assert features.metadata_args() == ["--no-default-features", "--features", "a,b"]

    def test_merge(self) -> None:
        left = Features(features=["a"])
        left.merge(Features(all_features=True, features=["b", "a"]))
        assert left == Features(all_features=True, features=["a", "b", "a"])

    def test_parse_splits_spaces_and_commas(self) -> None:
        features = _parse(Features, ["-F", "a b", "--features", "c,d", "--all-features"])
        assert features == Features(all_features=True, features=["a", "b", "c", "d"])


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class TestManifest:
    def test_unset_emits_nothing(self) -> None:
        assert Manifest().to_args() == []

    def test_set(self) -> None:
        manifest = Manifest(manifest_path=Path("crates/app/Cargo.toml"))
        assert manifest.to_args() == ["--manifest-path", "crates/app/Cargo.toml"]

    def test_merge_keeps_own_path(self) -> None:
        manifest = Manifest(manifest_path=Path("a/Cargo.toml"))
        manifest.merge(Manifest(manifest_path=Path("b/Cargo.toml")))
        assert manifest.manifest_path == Path("a/Cargo.toml")

    def test_merge_adopts_other_path(self) -> None:
        manifest = Manifest()
        manifest.merge(Manifest(manifest_path=Path("b/Cargo.toml")))
        assert manifest.manifest_path == Path("b/Cargo.toml")

    def test_parse(self) -> None:
        manifest = _parse(Manifest, ["--manifest-path", "x/Cargo.toml"])
        assert manifest == Manifest(manifest_path=Path("x/Cargo.toml"))


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------

class TestWorkspace:
    def test_order(self) -> None:
        workspace = Workspace(package=["b", "a"], workspace=True, exclude=["c"])
        assert workspace.to_args() == [
            "--workspace",
            "--package",
            "b",
            "--package",
            "a",
            "--exclude",
            "c",
        ]

    @pytest.mark.parametrize("flags", [{"workspace": True}, {"all": True}])
    def test_all_is_synonym(self, flags: dict[str, bool]) -> None:
        assert Workspace(**flags).to_args() == ["--workspace"]

    def test_merge_appends_without_dedup(self) -> None:
        workspace = Workspace(package=["a"], exclude=["x"])
        workspace.merge(Workspace(package=["a", "b"], all=True, exclude=["y"]))
        assert workspace == Workspace(
            package=["a", "a", "b"],
            workspace=False,
            all=True,
            exclude=["x", "y"],
        )

    def test_parse(self) -> None:
        workspace = _parse(Workspace, ["-p", "a", "--package", "b", "--all", "--exclude", "c"])
        assert workspace == Workspace(package=["a", "b"], all=True, exclude=["c"])


class TestPartitionPackages:
    @staticmethod
    def _names(packages: list) -> list[str]:
        return [p.name for p in packages]

    def test_default_virtual_workspace_selects_members(self) -> None:
        metadata = MetadataService.parse_metadata(sample_metadata_json())
        selected, excluded = Workspace().partition_packages(metadata)
        assert self._names(selected) == ["zero-dep", "single-dep", "double-dep", "triple-dep"]
        assert self._names(excluded) == ["serde"]

    def test_default_uses_resolve_root(self) -> None:
        info = sample_metadata_json()
        info["resolve"]["root"] = info["packages"][1]["id"]
        metadata = MetadataService.parse_metadata(info)
        selected, _ = Workspace().partition_packages(metadata)
        assert self._names(selected) == ["single-dep"]

    def test_workspace_with_exclude(self) -> None:
        metadata = MetadataService.parse_metadata(sample_metadata_json())
        selected, _ = Workspace(workspace=True, exclude=["zero-dep"]).partition_packages(metadata)
        assert self._names(selected) == ["single-dep", "double-dep", "triple-dep"]

    def test_explicit_packages(self) -> None:
        metadata = MetadataService.parse_metadata(sample_metadata_json())
        selected, excluded = Workspace(package=["triple-dep", "double-dep"]).partition_packages(metadata)
        assert self._names(selected) == ["double-dep", "triple-dep"]
        assert self._names(excluded) == ["zero-dep", "single-dep", "serde"]

    def test_explicit_non_member_is_not_selected(self) -> None:
        metadata = MetadataService.parse_metadata(sample_metadata_json())
        selected, excluded = Workspace(package=["serde"]).partition_packages(metadata)
        assert selected == []
        assert "serde" in self._names(excluded)


# ---------------------------------------------------------------------------
# ToolchainSelector
# ---------------------------------------------------------------------------

class TestToolchainSelector:
    def test_default_channel_is_stable_but_not_serialized(self) -> None:
        toolchain = ToolchainSelector()
        assert toolchain.channel_name() == "stable"
        assert toolchain.to_args() == []

    def test_explicit_channel(self) -> None:
        toolchain = _parse(ToolchainSelector, ["--channel", "beta"])
        assert toolchain.channel_name() == "beta"
        assert toolchain.to_args() == ["--channel", "beta"]

    def test_merge(self) -> None:
        toolchain = ToolchainSelector()
        toolchain.merge(ToolchainSelector(channel="nightly"))
        toolchain.merge(ToolchainSelector(channel="beta"))
        assert toolchain.channel == "nightly"

    def test_bin_default(self) -> None:
        assert ToolchainSelector.bin() == "cargo"

    def test_bin_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CARGO", "/opt/rust/bin/cargo")
        assert ToolchainSelector.bin() == "/opt/rust/bin/cargo"


# ---------------------------------------------------------------------------
# BuildOptions
# ---------------------------------------------------------------------------

class TestBuildOptions:
    def test_full_order(self) -> None:
        build = BuildOptions(
            optimize=True,
            target="wasm32-unknown-unknown",
            all_targets=True,
            link_args=True,
            release=True,
            profile="custom",
        )
        assert build.to_args() == [
            "-Z=build-std=std,panic_abort",
            "-Z=build-std-features=panic_immediate_abort",
            "--target",
            "wasm32-unknown-unknown",
            "--all-targets",
            "--release",
            "--profile",
            "custom",
        ]

    def test_link_args_is_not_a_cargo_flag(self) -> None:
        assert BuildOptions(link_args=True).to_args() == []

    @pytest.mark.parametrize(
        ("build", "expected"),
        [
            (BuildOptions(), "debug"),
            (BuildOptions(release=True), "release"),
            (BuildOptions(release=True, profile="custom"), "custom"),
            (BuildOptions(profile="bench"), "bench"),
        ],
    )
    def test_profile_name(self, build: BuildOptions, expected: str) -> None:
        assert build.profile_name() == expected

    def test_merge_self_wins(self) -> None:
        build = BuildOptions(target="x86_64-unknown-linux-gnu", profile="custom")
        build.merge(
            BuildOptions(
                optimize=True,
                target="wasm32-unknown-unknown",
                link_args=True,
                release=True,
                profile="other",
            )
        )
        assert build == BuildOptions(
            optimize=True,
            target="x86_64-unknown-linux-gnu",
            link_args=True,
            release=True,
            profile="custom",
        )

    def test_parse_short_release(self) -> None:
        build = _parse(BuildOptions, ["-r", "--target", "t"])
        assert build == BuildOptions(release=True, target="t")
