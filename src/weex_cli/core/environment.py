"""Environment resolution — flags + environment → :class:`BootstrapConfig`.

Every field follows the same precedence: explicit flag, then
environment variable, then a default computed from the home directory.
Nothing here touches the filesystem; the caller supplies the home
directory.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from weex_cli.core.models import BootstrapConfig
from weex_cli.exceptions import HomeDirectoryNotFoundError


CORE_NAME: str = "@weex-cli/core"
HOME_PREFIX: str = ".wx"
DEFAULT_REGISTRY: str = "https://registry.npm.taobao.org"
MODULE_CONFIG_FILE_NAME: str = "stores.json"
GLOBAL_CONFIG_FILE_NAME: str = "config.json"

ENV_CORE_PATH: str = "WEEX_CORE_PATH"
ENV_MODULE_PATH: str = "WEEX_MODULE_PATH"
ENV_CORE_VERSION: str = "WEEX_CORE_VERSION"
ENV_REGISTRY: str = "NPM_REGISTRY"


def _first(*candidates: str | None) -> str | None:
    """Return the first non-empty candidate."""
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def resolve_config(
    *,
    environ: Mapping[str, str],
    home_dir: Path | None,
    registry_flag: str | None = None,
    argv: tuple[str, ...] = (),
) -> BootstrapConfig:
    """Build the immutable configuration for one run.

    Parameters
    ----------
    environ:
        Environment mapping (normally ``os.environ``).
    home_dir:
        The user's home directory, or ``None`` if it could not be
        determined.
    registry_flag:
        Value of ``--registry`` when given on the command line.
    argv:
        Raw argument vector forwarded to the core.

    Raises
    ------
    HomeDirectoryNotFoundError
        When *home_dir* is missing; every path derives from it.
    """
    if not home_dir:
        raise HomeDirectoryNotFoundError(
            "can not find HOME directory.",
            hint="Set the HOME environment variable and try again.",
        )

    home = Path(home_dir) / HOME_PREFIX
    core_root = home / "core"
    core_path = Path(
        _first(environ.get(ENV_CORE_PATH))
        or core_root / "node_modules" / CORE_NAME
    )
    module_root = Path(
        _first(environ.get(ENV_MODULE_PATH)) or home / "weex_modules"
    )
    registry = _first(registry_flag, environ.get(ENV_REGISTRY)) or DEFAULT_REGISTRY

    return BootstrapConfig(
        core_name=CORE_NAME,
        core_root=core_root,
        core_path=core_path,
        module_root=module_root,
        module_config_file_name=MODULE_CONFIG_FILE_NAME,
        global_config_file_name=GLOBAL_CONFIG_FILE_NAME,
        home=home,
        trash=home / "trash",
        registry=registry.rstrip("/"),
        requested_core_version=_first(environ.get(ENV_CORE_VERSION)) or "latest",
        argv=tuple(argv),
    )
