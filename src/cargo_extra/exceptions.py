"""Custom exception hierarchy for cargo-extra.

All exceptions that cross layer boundaries must inherit from
:class:`CargoExtraError`.  Raw ``OSError`` / ``subprocess`` failures
must NEVER propagate beyond the infrastructure layer — they are caught
and re-raised as a typed subclass defined here.

Hierarchy
---------
CargoExtraError
├── CargoCommandError
│   ├── MetadataQueryError
│   └── DependencyTreeError
├── PackageLookupError
│   └── SimilarPackageError
├── ManifestPathError
└── EnvironmentError
"""

from __future__ import annotations


class CargoExtraError(Exception):
    """Base exception for all cargo-extra errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Process execution -----------------------------------------------------

class CargoCommandError(CargoExtraError):
    """Raised when a spawned cargo command exits unsuccessfully."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode: int | None = returncode
        self.stderr: str = stderr


class MetadataQueryError(CargoCommandError):
    """Raised when ``cargo metadata`` fails or returns unusable output."""


class DependencyTreeError(CargoCommandError):
    """Raised when ``cargo tree`` fails for a package."""


# --- Package lookup --------------------------------------------------------

class PackageLookupError(CargoExtraError):
    """Raised when a package cannot be resolved by name."""


class SimilarPackageError(PackageLookupError):
    """Raised when no exact match exists but a near match does.

    The near match is never returned in place of the requested name;
    the caller must disambiguate explicitly.
    """

    def __init__(self, name: str, similar: str) -> None:
        super().__init__(
            f"Found similar package for {name} ~ {similar}",
            hint=f"Did you mean '{similar}'?",
        )
        self.name: str = name
        self.similar: str = similar


# --- Paths -----------------------------------------------------------------

class ManifestPathError(CargoExtraError):
    """Raised when the manifest path cannot be resolved."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(CargoExtraError):
    """Raised when a required runtime dependency is not available."""


def append_rustup_suggestion(hint: str) -> str:
    """Append toolchain-update guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating your toolchain:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    rustup update",
        )
    )
