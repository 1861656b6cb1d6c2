"""``subprocess`` backed implementation of :class:`~cargo_extra.core.protocols.CommandRunner`.

This module is the **only** place in the codebase that spawns processes.
``OSError`` and non-zero exits are caught here and re-raised as typed
:class:`~cargo_extra.exceptions.CargoExtraError` subclasses — nothing raw
escapes the infrastructure boundary.

Calls block until the child exits; there is no timeout.
"""

from __future__ import annotations

import logging
import os
import subprocess

from cargo_extra.core.command import CargoCommand
from cargo_extra.exceptions import CargoCommandError, EnvironmentError

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Concrete :class:`CommandRunner` using :func:`subprocess.run`.

    This class satisfies the protocol structurally — no explicit
    inheritance required.
    """

    @staticmethod
    def _environ(command: CargoCommand) -> dict[str, str] | None:
        """Parent environment with *command*'s overrides applied.

        Returns ``None`` (inherit unchanged) when there are no overrides.
        """
        if not command.env:
            return None
        return {**os.environ, **command.env}

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def capture(self, command: CargoCommand) -> str:
        """Run *command*, returning stdout as text.

        Raises
        ------
        CargoCommandError
            When the process exits with a non-zero status.  The trimmed
            stderr is carried on the exception and shown as the hint.
        EnvironmentError
            When the program does not exist.
        """
        logger.debug("capturing %s", command)
        try:
            completed = subprocess.run(
                command.argv,
                env=self._environ(command),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise self._not_found(command) from exc
        except OSError as exc:
            raise CargoCommandError(
                f"Failed to start {command.program}: {exc}",
            ) from exc

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            raise CargoCommandError(
                f"`{command}` exited with status {completed.returncode}",
                hint=stderr or None,
                returncode=completed.returncode,
                stderr=stderr,
            )
        return completed.stdout or ""

    def run(self, command: CargoCommand) -> int:
        """Run *command* with inherited stdio; return its exit status."""
        logger.debug("running %s", command)
        try:
            completed = subprocess.run(
                command.argv,
                env=self._environ(command),
                check=False,
            )
        except FileNotFoundError as exc:
            raise self._not_found(command) from exc
        except OSError as exc:
            raise CargoCommandError(
                f"Failed to start {command.program}: {exc}",
            ) from exc
        return completed.returncode

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _not_found(command: CargoCommand) -> EnvironmentError:
        return EnvironmentError(
            f"{command.program} is not installed or not on PATH.",
            hint="Install Rust from https://rustup.rs or set $CARGO.",
        )
