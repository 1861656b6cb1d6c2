"""Constants shared across layers (binary names, env vars, fixed cargo flags).

Nothing here performs I/O, so ``core``, ``infra`` and ``cli`` may all
import from this package.
"""
