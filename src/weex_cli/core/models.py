"""Domain models for weex-cli.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Bootstrap configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BootstrapConfig:
    """Everything the bootstrap knows before touching disk or network.

    Built once by :func:`~weex_cli.core.environment.resolve_config` and
    read-only thereafter.
    """

    core_name: str
    """Package identifier of the core (``@weex-cli/core``)."""

    core_root: Path
    """Install prefix; packages land in ``<core_root>/node_modules``."""

    core_path: Path
    """Directory of the installed core package."""

    module_root: Path
    """Directory holding locally installed weex modules."""

    module_config_file_name: str
    """File name of the module registry under :attr:`module_root`."""

    global_config_file_name: str
    """File name of the global config under :attr:`home`."""

    home: Path
    """Bootstrap home directory (``~/.wx``)."""

    trash: Path
    """Where replaced packages are moved on forced installs."""

    registry: str
    """Base URL of the npm-compatible registry."""

    requested_core_version: str = "latest"
    """Version installed when no core is present yet."""

    argv: tuple[str, ...] = ()
    """Raw command-line argument vector (without the program name)."""

    @property
    def core_package_json(self) -> Path:
        return self.core_path / "package.json"

    @property
    def module_config_path(self) -> Path:
        return self.module_root / self.module_config_file_name

    @property
    def global_config_path(self) -> Path:
        return self.home / self.global_config_file_name


# ---------------------------------------------------------------------------
# Local state
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CoreMetadata:
    """``name`` / ``version`` pair read from the core's ``package.json``."""

    name: str | None
    version: str | None

    @property
    def is_complete(self) -> bool:
        """True when both fields carry a non-empty value."""
        return bool(self.name) and bool(self.version)


@dataclass(frozen=True, slots=True)
class LocalState:
    """Snapshot of the on-disk state relevant to one bootstrap run."""

    core: CoreMetadata | None
    """Installed core descriptor, or ``None`` when not installed."""

    modules: dict[str, Any] = field(default_factory=dict)
    """Module name → module metadata, ``{}`` when no registry file."""


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RepairTarget:
    """Package named on the ``repair`` command line."""

    name: str
    version: str


class DecisionKind(enum.Enum):
    SKIP = "skip"
    INSTALL = "install"
    UPGRADE = "upgrade"
    REPAIR_INSTALL = "repair-install"


@dataclass(frozen=True, slots=True)
class ResolutionDecision:
    """The single outcome of one resolution pass.

    Use the ``skip`` / ``install`` / ``upgrade`` / ``repair_install``
    constructors rather than building instances by hand so that
    ``name`` and ``version`` are always set for actionable kinds.
    """

    kind: DecisionKind
    name: str | None = None
    version: str | None = None
    previous_version: str | None = None
    """Locally installed version, only set for upgrades."""

    @classmethod
    def skip(cls) -> ResolutionDecision:
        return cls(DecisionKind.SKIP)

    @classmethod
    def install(cls, name: str, version: str) -> ResolutionDecision:
        return cls(DecisionKind.INSTALL, name, version)

    @classmethod
    def upgrade(
        cls,
        name: str,
        version: str,
        previous_version: str,
    ) -> ResolutionDecision:
        return cls(DecisionKind.UPGRADE, name, version, previous_version)

    @classmethod
    def repair_install(cls, name: str, version: str) -> ResolutionDecision:
        return cls(DecisionKind.REPAIR_INSTALL, name, version)

    @property
    def needs_install(self) -> bool:
        return self.kind is not DecisionKind.SKIP


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class ExecutionMode(enum.Enum):
    SOURCE = "source"
    COMPILED = "compiled"


@dataclass(frozen=True, slots=True)
class CoreContext:
    """Accumulated bootstrap data handed to the core entry point."""

    config: BootstrapConfig
    modules: dict[str, Any]
    argv: tuple[str, ...]

    def to_payload(self) -> dict[str, Any]:
        """Serialize using the key names the core expects."""
        config = self.config
        return {
            "coreName": config.core_name,
            "coreRoot": str(config.core_root),
            "corePath": str(config.core_path),
            "moduleRoot": str(config.module_root),
            "registry": config.registry,
            "moduleConfigFileName": config.module_config_file_name,
            "globalConfigFileName": config.global_config_file_name,
            "home": str(config.home),
            "trash": str(config.trash),
            "modules": self.modules,
            "argv": list(self.argv),
        }


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of handing control to the core (or to completion)."""

    exit_code: int
    mode: ExecutionMode | None = None
    """``None`` when the command never reached an executor."""

    error: Exception | None = None
    """The :class:`~weex_cli.exceptions.CoreLoadError` on load failure."""

    @property
    def load_failed(self) -> bool:
        return self.error is not None
