"""Rich-based spinner shown while the installer runs.

npm gives no machine-readable progress, so the bootstrap only shows an
indeterminate spinner with the package being installed and the time
elapsed.

Design
------
* :class:`InstallSpinner` manages a Rich Progress context.
* Falls back to a no-op when Rich is unavailable.
* Stop is idempotent.
* No ``print()`` — Rich handles all rendering.
"""

from __future__ import annotations

from typing import Any

from weex_cli.cli.console import get_rich_console
from weex_cli.exceptions import PrerequisiteError


class InstallSpinner:
    """Context manager wrapping a transient Rich spinner.

    Usage::

        with InstallSpinner("@weex-cli/core@latest"):
            installer.install(...)
    """

    def __init__(self, description: str) -> None:
        self._description: str = description
        self._progress: Any = None
        self._started: bool = False

        try:
            from rich.progress import (
                Progress,
                SpinnerColumn,
                TextColumn,
                TimeElapsedColumn,
            )

            console = get_rich_console()
        except (ModuleNotFoundError, PrerequisiteError):
            return

        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> InstallSpinner:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the spinner (no-op without Rich)."""
        if self._progress is None or self._started:
            return
        self._progress.add_task(self._description, total=None)
        self._progress.start()
        self._started = True

    def stop(self) -> None:
        """Stop the spinner (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False
