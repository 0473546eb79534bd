"""Infrastructure: Node.js detection and platform guidance.

The core runs on Node.js, so the bootstrap refuses to start without a
recent enough ``node`` on the system PATH.

Rules
-----
* Detection via :func:`shutil.which` plus a single ``node --version``.
* No permanent PATH modification.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import semantic_version

from weex_cli.exceptions import NodeNotFoundError, NodeVersionError

MINIMUM_NODE_VERSION: semantic_version.Version = semantic_version.Version("7.6.0")

_VERSION_PROBE_TIMEOUT: float = 10.0


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NodeStatus:
    """Result of a Node.js detection probe.

    Attributes
    ----------
    found : bool
        Whether ``node`` was located on PATH.
    path : Path | None
        Absolute path to the ``node`` binary, or ``None``.
    version : str | None
        Reported version without the leading ``v``, or ``None`` if the
        probe failed.
    install_commands : tuple[str, ...]
        Suggested shell commands for installing Node.js on the current
        platform.  Empty when ``node`` is already present.
    """

    found: bool
    path: Path | None
    version: str | None
    install_commands: tuple[str, ...]

    @property
    def is_new_enough(self) -> bool:
        if self.version is None:
            return False
        try:
            return semantic_version.Version.coerce(self.version) >= MINIMUM_NODE_VERSION
        except ValueError:
            return False


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def _probe_version(node: Path) -> str | None:
    try:
        completed = subprocess.run(
            [str(node), "--version"],
            capture_output=True,
            text=True,
            timeout=_VERSION_PROBE_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if completed.returncode != 0:
        return None
    reported = completed.stdout.strip()
    return reported.lstrip("v") or None


def detect_node() -> NodeStatus:
    """Probe the system for a ``node`` binary.

    Returns a :class:`NodeStatus` regardless of whether Node.js is
    present — the caller decides whether to abort or merely warn.
    """
    result = shutil.which("node")

    if result is not None:
        resolved = Path(result).resolve()
        return NodeStatus(
            found=True,
            path=resolved,
            version=_probe_version(resolved),
            install_commands=(),
        )

    return NodeStatus(
        found=False,
        path=None,
        version=None,
        install_commands=_platform_install_commands(),
    )


def require_node() -> Path:
    """Locate a usable ``node`` or raise.

    Raises
    ------
    NodeNotFoundError
        When ``node`` is not on PATH.
    NodeVersionError
        When the installed version is older than
        :data:`MINIMUM_NODE_VERSION` or cannot be determined.
    """
    status = detect_node()
    if not status.found or status.path is None:
        hint_lines: list[str] = []
        if status.install_commands:
            hint_lines.append("Install Node.js using one of:")
            hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise NodeNotFoundError(
            "Node.js is not installed or not on PATH.",
            hint="\n".join(hint_lines) if hint_lines else None,
        )
    if not status.is_new_enough:
        raise NodeVersionError(
            f"Node.js {MINIMUM_NODE_VERSION.major}.{MINIMUM_NODE_VERSION.minor}+ "
            f"is required to run. You have {status.version or 'an unknown version'}.",
            hint="Upgrade Node.js from https://nodejs.org/",
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install OpenJS.NodeJS.LTS",
            "choco install nodejs-lts",
        )
    if system == "linux":
        return (
            "sudo apt install nodejs npm",
            "sudo dnf install nodejs",
            "sudo pacman -S nodejs npm",
        )
    if system == "darwin":
        return ("brew install node",)
    return ("Please install Node.js from https://nodejs.org/",)
