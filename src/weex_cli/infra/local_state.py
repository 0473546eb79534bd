"""Infrastructure: reading persisted bootstrap state from disk.

Two files matter to the bootstrap:

* ``<core_path>/package.json`` — descriptor of the installed core.
* ``<module_root>/stores.json`` — registry of installed weex modules.

Absent files are normal (fresh machine) and yield empty sentinels.
A file that exists but does not parse is corruption and is raised as
:class:`~weex_cli.exceptions.LocalStateError` — installing on top of a
state we cannot read would only make it worse.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from weex_cli.core.models import BootstrapConfig, CoreMetadata, LocalState
from weex_cli.exceptions import LocalStateError

logger = logging.getLogger(__name__)


def find_user_home() -> Path | None:
    """Return the current user's home directory, or ``None``."""
    try:
        home = Path.home()
    except RuntimeError:
        return None
    return home if str(home) else None


def read_json(path: Path) -> Any | None:
    """Parse *path* as JSON, returning ``None`` when it does not exist.

    Raises
    ------
    LocalStateError
        When the file exists but cannot be read or parsed.
    """
    if not path.is_file():
        return None
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise LocalStateError(
            f"Corrupt JSON in {path}: {exc}",
            hint=f"Remove {path} and run the command again to rebuild it.",
        ) from exc
    except OSError as exc:
        raise LocalStateError(f"Cannot read {path}: {exc}") from exc


def _require_object(path: Path, data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise LocalStateError(
            f"Expected a JSON object in {path}, got {type(data).__name__}.",
            hint=f"Remove {path} and run the command again to rebuild it.",
        )
    return data


def read_core_metadata(config: BootstrapConfig) -> CoreMetadata | None:
    path = config.core_package_json
    data = read_json(path)
    if data is None:
        logger.debug("no core descriptor at %s", path)
        return None
    package = _require_object(path, data)
    name = package.get("name")
    version = package.get("version")
    return CoreMetadata(
        name=str(name) if name else None,
        version=str(version) if version else None,
    )


def read_module_registry(config: BootstrapConfig) -> dict[str, Any]:
    path = config.module_config_path
    data = read_json(path)
    if data is None:
        return {}
    return _require_object(path, data)


def read_local_state(config: BootstrapConfig) -> LocalState:
    """Read both state files; see the module docstring for semantics."""
    return LocalState(
        core=read_core_metadata(config),
        modules=read_module_registry(config),
    )
