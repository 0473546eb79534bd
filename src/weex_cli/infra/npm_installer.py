"""npm backed implementation of :class:`~weex_cli.core.protocols.Installer`.

This module is the **only** place in the codebase that invokes ``npm``.
Packages are installed with ``npm install <name>@<version> --prefix
<root>`` so they land in ``<root>/node_modules/<name>``.  All failures
are re-raised as :class:`~weex_cli.exceptions.InstallError`.

Known limitation: no locking is performed.  Two concurrent ``weex``
invocations installing into the same root can corrupt each other.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import time
from pathlib import Path

from weex_cli.exceptions import InstallError

logger = logging.getLogger(__name__)

_OUTPUT_TAIL_LINES: int = 15


def _trash_name(name: str) -> str:
    """Flatten a scoped package name into a single path segment."""
    return re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("_")


class NpmInstaller:
    """Installs packages by shelling out to ``npm``.

    Parameters
    ----------
    npm:
        Explicit path to the npm executable.  Looked up on PATH when
        omitted.
    """

    def __init__(self, npm: str | None = None) -> None:
        self._npm: str | None = npm

    def _npm_executable(self) -> str:
        npm = self._npm or shutil.which("npm")
        if npm is None:
            raise InstallError(
                "npm is not installed or not on PATH.",
                hint="npm ships with Node.js: https://nodejs.org/",
            )
        return npm

    @staticmethod
    def build_command(
        npm: str,
        name: str,
        version: str,
        *,
        root: Path,
        force: bool = False,
        registry: str | None = None,
    ) -> list[str]:
        command = [npm, "install", f"{name}@{version}", "--prefix", str(root)]
        if registry:
            command += ["--registry", registry]
        if force:
            command.append("--force")
        return command

    @staticmethod
    def move_to_trash(package_dir: Path, trash: Path, name: str) -> Path:
        """Move an existing package directory aside before reinstalling."""
        trash.mkdir(parents=True, exist_ok=True)
        destination = trash / f"{_trash_name(name)}-{time.strftime('%Y%m%d%H%M%S')}"
        shutil.move(str(package_dir), str(destination))
        logger.debug("moved %s to %s", package_dir, destination)
        return destination

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

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

        With *force*, an already installed copy is moved into *trash*
        first so that npm starts from a clean directory.

        Raises
        ------
        InstallError
            When npm is missing, cannot be started, or exits non-zero.
        """
        npm = self._npm_executable()
        command = self.build_command(
            npm,
            name,
            version,
            root=root,
            force=force,
            registry=registry,
        )

        try:
            root.mkdir(parents=True, exist_ok=True)
            package_dir = root / "node_modules" / name
            if force and package_dir.exists():
                self.move_to_trash(package_dir, trash, name)
        except OSError as exc:
            raise InstallError(f"Cannot prepare {root}: {exc}") from exc

        logger.debug("running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise InstallError(f"Could not start npm: {exc}") from exc

        if completed.returncode != 0:
            output = (completed.stderr or completed.stdout or "").strip().splitlines()
            tail = "\n".join(output[-_OUTPUT_TAIL_LINES:])
            raise InstallError(
                f"npm install {name}@{version} failed with exit code "
                f"{completed.returncode}.",
                hint=tail or None,
            )
        logger.debug("installed %s@%s into %s", name, version, root)
