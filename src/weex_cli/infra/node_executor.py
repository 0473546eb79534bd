"""Node.js backed implementations of :class:`~weex_cli.core.protocols.CommandExecutor`.

Both executors start ``node`` with a tiny launcher script that loads the
core entry module, instantiates its default export with the bootstrap
context and calls ``start()``.  The context travels as JSON in the
``WEEX_CORE_DATA`` environment variable; stdio is inherited so the core
talks to the terminal directly.

* :class:`SourceExecutor` — ``<core>/src/cli/cli`` through ``ts-node``.
* :class:`CompiledExecutor` — ``<core>/lib/cli/cli.js``.

A launcher that cannot load the entry module writes
:data:`LOAD_FAILED_MARKER` to the status file named by
``WEEX_LOAD_STATUS`` before exiting, which is mapped back to
:class:`~weex_cli.exceptions.CoreLoadError`.  The child's exit code is
never interpreted, so every code the core returns reaches the caller
untouched.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
from collections.abc import Mapping
from pathlib import Path

from weex_cli.core.models import BootstrapConfig, CoreContext
from weex_cli.exceptions import CoreLoadError, append_repair_suggestion

logger = logging.getLogger(__name__)

CORE_DATA_ENV: str = "WEEX_CORE_DATA"
LOAD_STATUS_ENV: str = "WEEX_LOAD_STATUS"
LOAD_FAILED_MARKER: str = "load-failed"

_LAUNCHER_PRELUDE = f"""
const entry = process.argv[1];
function loadFailed(error) {{
  console.error(error && error.stack ? error.stack : String(error));
  require('fs').writeFileSync(process.env.{LOAD_STATUS_ENV}, '{LOAD_FAILED_MARKER}');
  process.exit(1);
}}
"""

_START_CORE = f"""
let Cli;
try {{
  const mod = require(entry);
  Cli = mod.default || mod;
}} catch (error) {{
  loadFailed(error);
}}
new Cli(JSON.parse(process.env.{CORE_DATA_ENV})).start();
"""

COMPILED_LAUNCHER: str = _LAUNCHER_PRELUDE + _START_CORE

SOURCE_LAUNCHER: str = (
    _LAUNCHER_PRELUDE
    + "const project = process.argv[2];\n"
    "try {\n"
    "  const tsNode = require.resolve('ts-node', { paths: [require('path').dirname(project), process.cwd()] });\n"
    "  require(tsNode).register({ project });\n"
    "} catch (error) {\n"
    "  loadFailed(error);\n"
    "}\n"
    + _START_CORE
)


def _read_status(status_file: Path) -> str | None:
    try:
        return status_file.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None


class _NodeExecutor:
    """Shared spawning logic; subclasses decide entry point and launcher."""

    launcher: str = COMPILED_LAUNCHER

    def __init__(
        self,
        node: Path | str = "node",
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._node: str = str(node)
        self._environ: Mapping[str, str] | None = environ

    # -- hooks ---------------------------------------------------------

    def entry_point(self, config: BootstrapConfig) -> Path:
        raise NotImplementedError

    def entry_exists(self, config: BootstrapConfig) -> bool:
        return self.entry_point(config).is_file()

    def launcher_args(self, config: BootstrapConfig) -> list[str]:
        return [str(self.entry_point(config))]

    # -- protocol ------------------------------------------------------

    def is_available(self, config: BootstrapConfig) -> bool:
        return self.entry_exists(config)

    def build_command(self, context: CoreContext) -> list[str]:
        return [
            self._node,
            "-e",
            self.launcher,
            *self.launcher_args(context.config),
            *context.argv,
        ]

    def build_env(self, context: CoreContext, status_file: Path) -> dict[str, str]:
        env = dict(os.environ if self._environ is None else self._environ)
        env[CORE_DATA_ENV] = json.dumps(context.to_payload())
        env[LOAD_STATUS_ENV] = str(status_file)
        return env

    def run(self, context: CoreContext) -> int:
        """Run the core and return the child's exit code.

        Raises
        ------
        CoreLoadError
            When the entry point is missing, ``node`` cannot be started,
            or the launcher reports that the module failed to load.
        """
        entry = self.entry_point(context.config)
        if not self.entry_exists(context.config):
            raise CoreLoadError(
                f"Core entry point not found: {entry}",
                hint=append_repair_suggestion(
                    "The core may be missing or incompletely installed."
                ),
            )

        with tempfile.TemporaryDirectory(prefix="weex-") as status_dir:
            status_file = Path(status_dir) / "load-status"
            try:
                completed = subprocess.run(
                    self.build_command(context),
                    env=self.build_env(context, status_file),
                    check=False,
                )
            except OSError as exc:
                raise CoreLoadError(f"Could not start node: {exc}") from exc
            load_failed = _read_status(status_file) == LOAD_FAILED_MARKER

        if load_failed:
            raise CoreLoadError(
                f"Core at {entry} failed to load.",
                hint=append_repair_suggestion("See the Node.js error output above."),
            )
        return completed.returncode


class CompiledExecutor(_NodeExecutor):
    """Runs the prebuilt JavaScript shipped in ``lib/``."""

    def entry_point(self, config: BootstrapConfig) -> Path:
        return config.core_path / "lib" / "cli" / "cli.js"


class SourceExecutor(_NodeExecutor):
    """Runs the TypeScript sources in ``src/`` on the fly via ``ts-node``.

    Available whenever the core checkout has a ``src`` directory.
    """

    launcher = SOURCE_LAUNCHER

    def entry_point(self, config: BootstrapConfig) -> Path:
        # Extension-less so Node resolves .ts through ts-node or a .js file.
        return config.core_path / "src" / "cli" / "cli"

    def entry_exists(self, config: BootstrapConfig) -> bool:
        base = self.entry_point(config)
        return any(
            base.with_name(base.name + suffix).is_file()
            for suffix in (".ts", ".js")
        )

    def is_available(self, config: BootstrapConfig) -> bool:
        return (config.core_path / "src").is_dir()

    def launcher_args(self, config: BootstrapConfig) -> list[str]:
        return [
            str(self.entry_point(config)),
            str(config.core_path / "tsconfig.json"),
        ]
