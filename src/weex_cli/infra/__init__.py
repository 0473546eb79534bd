"""Infrastructure layer — external system integration.

This layer wraps all interaction with the npm registry, the ``npm``
and ``node`` executables, the filesystem and the operating system.
Every raw third-party exception must be caught here and re-raised as a
:class:`~weex_cli.exceptions.WeexCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from weex_cli.infra.local_state import find_user_home, read_local_state
from weex_cli.infra.node_executor import CompiledExecutor, SourceExecutor
from weex_cli.infra.node_runtime import NodeStatus, detect_node, require_node
from weex_cli.infra.npm_installer import NpmInstaller
from weex_cli.infra.npm_registry import NpmRegistryClient
from weex_cli.infra.privileges import downgrade_root, sudo_allowed

__all__: list[str] = [
    "CompiledExecutor",
    "NodeStatus",
    "NpmInstaller",
    "NpmRegistryClient",
    "SourceExecutor",
    "detect_node",
    "downgrade_root",
    "find_user_home",
    "read_local_state",
    "require_node",
    "sudo_allowed",
]
