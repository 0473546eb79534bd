"""weex-cli — bootstrap front-end for the weex toolkit.

Resolves, installs and launches the separately-versioned
``@weex-cli/core`` package that carries the actual commands.
"""

from weex_cli.version import __version__

__all__: list[str] = ["__version__"]
