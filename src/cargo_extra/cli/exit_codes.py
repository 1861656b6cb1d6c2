"""Process exit statuses returned by :func:`cargo_extra.cli.app.cli`."""

from __future__ import annotations

SUCCESS: int = 0

GENERAL_ERROR: int = 1
"""A :class:`~cargo_extra.exceptions.CargoExtraError` reached the boundary
(this includes a failing ``cargo build``)."""

UNEXPECTED_ERROR: int = 2
"""Any other exception.  Matches argparse's status for usage errors."""

KEYBOARD_INTERRUPT: int = 130
"""128 + SIGINT."""
