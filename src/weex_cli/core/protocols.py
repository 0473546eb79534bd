"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from weex_cli.core.models import BootstrapConfig, CoreContext


ConfirmPrompt = Callable[[str], "bool | None"]
"""Yes/no question asked before an upgrade.  ``None`` means declined."""


class RegistryClient(Protocol):
    """Contract for looking up published package versions."""

    def latest_version(self, name: str) -> str:
        """Return the latest published version of *name*.

        Implementations perform a single request with a bounded timeout
        and no automatic retry.

        Raises
        ------
        RegistryLookupError
            On timeout, transport failure, a non-2xx response, or a
            body without a ``version`` field.
        """
        ...  # pragma: no cover


class Installer(Protocol):
    """Contract for materializing a package on disk."""

    def install(
        self,
        name: str,
        version: str,
        *,
        root: Path,
        trash: Path,
        force: bool = False,
        registry: str | None = None,
    ) -> None:
        """Install ``name@version`` under *root*.

        Raises
        ------
        InstallError
            When the package could not be installed for any reason.
        """
        ...  # pragma: no cover


class CommandExecutor(Protocol):
    """One way of running the core (from source or compiled)."""

    def is_available(self, config: BootstrapConfig) -> bool:
        """Whether this executor's entry point exists on disk."""
        ...  # pragma: no cover

    def run(self, context: CoreContext) -> int:
        """Run the core with *context* and return its exit code.

        Raises
        ------
        CoreLoadError
            When the entry point is missing or cannot be started.
        """
        ...  # pragma: no cover


class CompletionHandler(Protocol):
    """Handles the reserved ``completion`` command."""

    def __call__(self, argv: tuple[str, ...]) -> int:
        ...  # pragma: no cover
