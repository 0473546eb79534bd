"""Bootstrap orchestration — resolve, install, dispatch, repair once.

Flow for one invocation:

1. Read local state and ask the resolution engine for a decision.
2. Apply the decision through the installer.  Install failures are
   reported as warnings; the run continues with whatever core is on
   disk.
3. Dispatch to the core.
4. If the core could not be loaded and no repair has run yet, resolve
   again in repair mode, apply, and dispatch a second time.  A second
   load failure raises :class:`CoreUnavailableError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from weex_cli.cli.console import console, escape
from weex_cli.cli.progress import InstallSpinner
from weex_cli.core.dispatch import Dispatcher
from weex_cli.core.models import (
    BootstrapConfig,
    DecisionKind,
    DispatchResult,
    LocalState,
    ResolutionDecision,
)
from weex_cli.core.protocols import Installer
from weex_cli.core.resolution import REPAIR_COMMAND, VersionResolutionEngine
from weex_cli.exceptions import (
    CoreUnavailableError,
    LocalStateError,
    WeexCliError,
    append_repair_suggestion,
)

logger = logging.getLogger(__name__)

MAX_REPAIR_ATTEMPTS: int = 1

StateReader = Callable[[BootstrapConfig], LocalState]


class Bootstrap:
    """Wires the engine, installer and dispatcher for a single run.

    Parameters
    ----------
    config:
        The immutable configuration for this run.
    engine:
        Decides what (if anything) to install.
    installer:
        Any object satisfying :class:`~weex_cli.core.protocols.Installer`.
    dispatcher:
        Hands control to the core or to completion.
    read_state:
        Reads :class:`LocalState` from disk; re-invoked after installs.
    """

    def __init__(
        self,
        config: BootstrapConfig,
        engine: VersionResolutionEngine,
        installer: Installer,
        dispatcher: Dispatcher,
        read_state: StateReader,
    ) -> None:
        self._config = config
        self._engine = engine
        self._installer = installer
        self._dispatcher = dispatcher
        self._read_state = read_state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def prepare(
        self,
        command: str | None,
        repair_arg: str | None = None,
        *,
        force: bool = False,
    ) -> ResolutionDecision:
        """Resolve and apply one decision; returns the decision taken.

        Unreadable local state is fatal except for ``repair``, which then
        reinstalls with *force* so the unreadable copy goes to the trash.
        """
        try:
            state = self._read_state(self._config)
        except LocalStateError as exc:
            if command != REPAIR_COMMAND:
                raise
            logger.debug("ignoring unreadable local state for repair: %s", exc)
            state = LocalState(core=None)
            force = True
        decision = self._engine.resolve(command, repair_arg, self._config, state)
        logger.debug("resolution decision: %s", decision)
        self.apply(decision, force=force)
        return decision

    def run(
        self,
        command: str | None,
        repair_arg: str | None = None,
        *,
        wants_compiled: bool = False,
        force: bool = False,
    ) -> int:
        """Prepare the core and run *command*; returns the exit code."""
        decision = self.prepare(command, repair_arg, force=force)
        repaired = decision.kind is DecisionKind.REPAIR_INSTALL

        repair_attempts = 0
        while True:
            result = self._dispatch(command, wants_compiled)
            if not result.load_failed:
                return result.exit_code

            if repaired or repair_attempts >= MAX_REPAIR_ATTEMPTS:
                raise self._unavailable(result)

            repair_attempts += 1
            console.status(
                f"The core could not be loaded, repairing {self._config.core_name} ..."
            )
            self.prepare(REPAIR_COMMAND, None, force=force)
            repaired = True

    # ------------------------------------------------------------------
    # Decision application
    # ------------------------------------------------------------------

    def apply(self, decision: ResolutionDecision, *, force: bool = False) -> None:
        """Run the installer for *decision*; failures become warnings."""
        name, version = decision.name, decision.version
        if not decision.needs_install or name is None or version is None:
            return

        self._announce(decision)
        spec = f"{name}@{version}"
        try:
            with InstallSpinner(f"Installing {spec}"):
                self._installer.install(
                    name,
                    version,
                    root=self._config.core_root,
                    trash=self._config.trash,
                    force=force,
                    registry=self._config.registry,
                )
        except WeexCliError as exc:
            logger.warning("installing %s failed: %s", spec, exc)
            console.warning(
                escape(f"Could not install {spec}: {exc}"),
                escape(exc.hint) if exc.hint else None,
            )
            return

        console.print(f"[green]Installed {escape(spec)}[/green]")

    def _announce(self, decision: ResolutionDecision) -> None:
        if decision.kind is DecisionKind.INSTALL:
            console.status("Start installing Core, please wait ...")
        elif decision.kind is DecisionKind.UPGRADE:
            console.status(
                f"Upgrading Core from {decision.previous_version} -> "
                f"{decision.version}, please wait ..."
            )
        else:
            console.status(f"Start repair {decision.name}, please wait ...")

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, command: str | None, wants_compiled: bool) -> DispatchResult:
        state = self._read_state(self._config)
        return self._dispatcher.dispatch(
            self._config,
            state,
            command,
            wants_compiled=wants_compiled,
        )

    def _unavailable(self, result: DispatchResult) -> CoreUnavailableError:
        error = CoreUnavailableError(
            f"{self._config.core_name} is not available: {result.error}",
            hint=append_repair_suggestion(
                f"Check your network and the registry: {self._config.registry}"
            ),
        )
        error.__cause__ = result.error
        return error
