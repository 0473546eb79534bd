"""Allow ``python -m weex_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m weex_cli`` behaves identically to the ``weex``
console script.
"""

from __future__ import annotations

from weex_cli.cli.app import cli

if __name__ == "__main__":
    cli()
