"""Names and fixed values shared by the core and infrastructure layers."""

from __future__ import annotations

CARGO_ENV: str = "CARGO"
"""Environment variable overriding the cargo binary path."""

DEFAULT_CARGO: str = "cargo"
"""Binary name used when ``$CARGO`` is unset.  Only this name accepts a
``+<channel>`` toolchain prefix (it is the rustup proxy)."""

DEFAULT_CHANNEL: str = "stable"

NIGHTLY_CHANNEL: str = "nightly"

RUSTFLAGS_ENV: str = "RUSTFLAGS"

STRIP_LINK_ARGS: str = "-C link-args=-s"
"""Linker flags requesting a stripped binary."""

BUILD_STD_ARGS: tuple[str, ...] = (
    "-Z=build-std=std,panic_abort",
    "-Z=build-std-features=panic_immediate_abort",
)
"""Nightly-only flags emitted when ``--optimize`` is set."""

DEFAULT_MANIFEST: str = "./Cargo.toml"

DEFAULT_WASM_TRIPLE: str = "wasm32-unknown-unknown"

METADATA_FORMAT_VERSION: str = "1"
