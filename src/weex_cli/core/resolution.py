"""Version resolution engine — decides whether the core must be installed.

Combines the command intent, the local state and (only when needed)
the registry into exactly one :class:`ResolutionDecision`.

Guarantees
----------
* No ``print()``, no filesystem access; the registry and the
  confirmation prompt are injected.
* Registry and prompt failures never escape — they normalize to
  ``SKIP``.
* Resolution is idempotent for unchanged inputs.
"""

from __future__ import annotations

import logging

import semantic_version

from weex_cli.core.models import (
    BootstrapConfig,
    LocalState,
    RepairTarget,
    ResolutionDecision,
)
from weex_cli.core.protocols import ConfirmPrompt, RegistryClient
from weex_cli.exceptions import RegistryLookupError

logger = logging.getLogger(__name__)

REPAIR_COMMAND: str = "repair"
LATEST: str = "latest"


def parse_repair_target(arg: str | None, core_name: str) -> RepairTarget:
    """Parse a ``name@version`` repair argument.

    A leading ``@`` is an npm scope marker, not a version separator:
    ``@weex-cli/core@2.0.0`` → (``@weex-cli/core``, ``2.0.0``) while
    ``@weex-cli/core`` → (``@weex-cli/core``, ``latest``).
    """
    if not arg:
        return RepairTarget(core_name, LATEST)

    name, sep, version = arg.rpartition("@")
    if not sep or not name or not version:
        return RepairTarget(arg.rstrip("@") or core_name, LATEST)
    return RepairTarget(name, version)


def is_newer(remote: str, local: str) -> bool:
    """Return True when *remote* is strictly greater than *local*.

    Raises
    ------
    ValueError
        If either string is not a valid semantic version.
    """
    return semantic_version.Version(remote) > semantic_version.Version(local)


def upgrade_message(remote: str, local: str) -> str:
    return (
        f"New version detected {remote}, the local version is {local}, "
        "upgrade now?"
    )


class VersionResolutionEngine:
    """Produces one :class:`ResolutionDecision` per call.

    Parameters
    ----------
    registry:
        Any object satisfying :class:`RegistryClient`.  Only consulted
        when a core is already installed.
    confirm:
        Yes/no prompt used only on the upgrade path.
    """

    def __init__(self, registry: RegistryClient, confirm: ConfirmPrompt) -> None:
        self._registry: RegistryClient = registry
        self._confirm: ConfirmPrompt = confirm

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        command: str | None,
        repair_arg: str | None,
        config: BootstrapConfig,
        local_state: LocalState,
    ) -> ResolutionDecision:
        if command == REPAIR_COMMAND:
            return self._resolve_repair(repair_arg, config)

        core = local_state.core
        local_version = core.version if core is not None and core.is_complete else None
        if local_version is None:
            logger.debug("no usable core at %s, installing", config.core_path)
            return ResolutionDecision.install(
                config.core_name,
                config.requested_core_version,
            )

        return self._resolve_upgrade(config, local_version)

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_repair(
        repair_arg: str | None,
        config: BootstrapConfig,
    ) -> ResolutionDecision:
        target = parse_repair_target(repair_arg, config.core_name)
        if target.name != config.core_name:
            # Non-core modules are repaired by the core itself.
            logger.debug("repair target %s is not the core, skipping", target.name)
            return ResolutionDecision.skip()
        logger.debug("start repair %s@%s", target.name, target.version)
        return ResolutionDecision.repair_install(config.core_name, target.version)

    def _resolve_upgrade(
        self,
        config: BootstrapConfig,
        local_version: str,
    ) -> ResolutionDecision:
        try:
            remote_version = self._registry.latest_version(config.core_name)
        except RegistryLookupError as exc:
            logger.debug("latest version lookup failed: %s", exc)
            return ResolutionDecision.skip()

        try:
            newer = is_newer(remote_version, local_version)
        except ValueError as exc:
            logger.debug("cannot compare versions: %s", exc)
            return ResolutionDecision.skip()

        if not newer:
            logger.debug(
                "local core %s is up to date (registry: %s)",
                local_version,
                remote_version,
            )
            return ResolutionDecision.skip()

        try:
            confirmed = self._confirm(upgrade_message(remote_version, local_version))
        except KeyboardInterrupt:
            logger.debug("upgrade prompt interrupted")
            return ResolutionDecision.skip()

        if not confirmed:
            logger.debug("upgrade to %s declined", remote_version)
            return ResolutionDecision.skip()

        return ResolutionDecision.upgrade(
            config.core_name,
            remote_version,
            local_version,
        )
