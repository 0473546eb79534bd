"""Core / service layer — pure decision logic and data models.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* Collaborators (registry, installer, executors, prompts) are injected
  through the protocols in :mod:`weex_cli.core.protocols`.
"""

from weex_cli.core.dispatch import Dispatcher, select_execution_mode
from weex_cli.core.environment import resolve_config
from weex_cli.core.models import (
    BootstrapConfig,
    CoreContext,
    CoreMetadata,
    DecisionKind,
    DispatchResult,
    ExecutionMode,
    LocalState,
    RepairTarget,
    ResolutionDecision,
)
from weex_cli.core.protocols import CommandExecutor, Installer, RegistryClient
from weex_cli.core.resolution import VersionResolutionEngine, parse_repair_target

__all__: list[str] = [
    "BootstrapConfig",
    "CommandExecutor",
    "CoreContext",
    "CoreMetadata",
    "DecisionKind",
    "DispatchResult",
    "Dispatcher",
    "ExecutionMode",
    "Installer",
    "LocalState",
    "RegistryClient",
    "RepairTarget",
    "ResolutionDecision",
    "VersionResolutionEngine",
    "parse_repair_target",
    "resolve_config",
    "select_execution_mode",
]
