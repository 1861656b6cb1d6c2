"""Infrastructure layer — external system integration.

This layer wraps all interaction with the operating system: spawning
cargo and locating binaries on PATH.  Every raw ``OSError`` must be
caught here and re-raised as a
:class:`~cargo_extra.exceptions.CargoExtraError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from cargo_extra.infra.cargo_detector import CargoStatus, detect_cargo, detect_rustup
from cargo_extra.infra.subprocess_runner import SubprocessRunner

__all__: list[str] = [
    "CargoStatus",
    "SubprocessRunner",
    "detect_cargo",
    "detect_rustup",
]
