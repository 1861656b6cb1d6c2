"""Single source of truth for the cargo-extra version string."""

__version__: str = "0.1.0"
