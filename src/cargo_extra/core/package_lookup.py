"""Pure package lookup helpers.

Every function in this module is a **pure** transformation over already
parsed metadata or captured process output — no I/O, deterministic, and
trivially unit-testable.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from cargo_extra.core.models import Package
from cargo_extra.exceptions import SimilarPackageError

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^0-9A-Za-z]+")
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


# ---------------------------------------------------------------------------
# Name normalisation
# ---------------------------------------------------------------------------

def normalize_name(name: str) -> str:
    """Shouty-kebab form of *name*: ``my_crate``, ``My-Crate``, ``MyCrate`` → ``MY-CRATE``."""
    words: list[str] = []
    for chunk in _NON_ALNUM.split(name):
        if chunk:
            words.extend(word for word in _CASE_BOUNDARY.split(chunk) if word)
    return "-".join(word.upper() for word in words)


def find_package(packages: Iterable[Package], name: str) -> Package | None:
    """Return the package called exactly *name*, or ``None``.

    Raises
    ------
    SimilarPackageError
        When there is no exact match but a package matches after
        normalisation (``-``/``_`` and case differences).  The near match
        is reported, never returned.
    """
    wanted = normalize_name(name)
    similar: str | None = None
    for package in packages:
        if package.name == name:
            return package
        if similar is None and normalize_name(package.name) == wanted:
            similar = package.name
    if similar is not None:
        raise SimilarPackageError(name, similar)
    return None


# ---------------------------------------------------------------------------
# cargo tree output
# ---------------------------------------------------------------------------

def build_package_index(packages: Iterable[Package]) -> dict[str, Package]:
    """Map ``name + "v" + version`` to each package."""
    return {package.key: package for package in packages}


def parse_tree_output(stdout: str) -> list[str]:
    """Turn ``cargo tree --prefix none`` output into package keys.

    Each line reads ``name vX.Y.Z [(source)] [(*)]``; the first two
    whitespace-separated tokens are concatenated into a key.  Lines with
    fewer than two tokens (blank lines, ``[dev-dependencies]`` headers)
    are skipped.
    """
    keys: list[str] = []
    for line in stdout.splitlines():
        tokens = line.split()
        if len(tokens) < 2:
            if tokens:
                logger.debug("ignoring cargo tree line %r", line)
            continue
        keys.append(tokens[0] + tokens[1])
    return keys


def resolve_dependency_keys(
    keys: Sequence[str],
    index: dict[str, Package],
    package: Package,
) -> list[Package]:
    """Map tree keys back to packages.

    Unknown keys are logged and skipped, *package* itself is dropped,
    and repeated entries collapse to their first occurrence.
    """
    resolved: list[Package] = []
    seen: set[str] = {package.id}
    for key in keys:
        found = index.get(key)
        if found is None:
            logger.warning(
                "skipping dependency %s of %s: not in metadata",
                key,
                package.name,
            )
            continue
        if found.id in seen:
            continue
        seen.add(found.id)
        resolved.append(found)
    return resolved
