"""Allow ``python -m now_certs`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m now_certs`` behaves identically to the ``now-certs``
console script.
"""

from __future__ import annotations

from now_certs.cli.app import cli

if __name__ == "__main__":
    cli()
