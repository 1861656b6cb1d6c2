"""Allow ``python -m cargo_extra`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m cargo_extra`` behaves identically to the ``cargo-extra``
console script.
"""

from __future__ import annotations

from cargo_extra.cli.app import cli

if __name__ == "__main__":
    cli()
