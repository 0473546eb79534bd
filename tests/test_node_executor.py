"""Tests for the Node.js executors (infra/node_executor.py).

``subprocess.run`` is mocked; entry points are created under
``tmp_path`` through ``WEEX_CORE_PATH``-style configs.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from weex_cli.core.models import BootstrapConfig, CoreContext
from weex_cli.exceptions import CoreLoadError
from weex_cli.infra.node_executor import (
    CORE_DATA_ENV,
    LOAD_FAILED_MARKER,
    LOAD_STATUS_ENV,
    CompiledExecutor,
    SourceExecutor,
)


def _context(config: BootstrapConfig) -> CoreContext:
    return CoreContext(config=config, modules={"m": {}}, argv=config.argv)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


class TestCompiledExecutor:
    def test_entry_point(self, config: BootstrapConfig) -> None:
        entry = CompiledExecutor().entry_point(config)
        assert entry == config.core_path / "lib" / "cli" / "cli.js"

    def test_missing_entry_raises_load_error(self, config: BootstrapConfig) -> None:
        with pytest.raises(CoreLoadError, match="not found"):
            CompiledExecutor().run(_context(config))

    @patch("weex_cli.infra.node_executor.subprocess.run")
    def test_runs_node_with_context(
        self, mock_run: MagicMock, config: BootstrapConfig,
    ) -> None:
        entry = _touch(config.core_path / "lib" / "cli" / "cli.js")
        mock_run.return_value = subprocess.CompletedProcess([], 0)

        code = CompiledExecutor("/usr/bin/node", environ={"PATH": "/bin"}).run(
            _context(config),
        )

        assert code == 0
        command = mock_run.call_args.args[0]
        assert command[0] == "/usr/bin/node"
        assert command[1] == "-e"
        assert command[3] == str(entry)
        assert tuple(command[4:]) == config.argv

        env = mock_run.call_args.kwargs["env"]
        assert env["PATH"] == "/bin"
        payload = json.loads(env[CORE_DATA_ENV])
        assert payload["corePath"] == str(config.core_path)
        assert payload["modules"] == {"m": {}}

    @patch("weex_cli.infra.node_executor.subprocess.run")
    def test_exit_code_passes_through(
        self, mock_run: MagicMock, config: BootstrapConfig,
    ) -> None:
        _touch(config.core_path / "lib" / "cli" / "cli.js")
        mock_run.return_value = subprocess.CompletedProcess([], 5)
        assert CompiledExecutor(environ={}).run(_context(config)) == 5

    @patch("weex_cli.infra.node_executor.subprocess.run")
    def test_launcher_load_failure(
        self, mock_run: MagicMock, config: BootstrapConfig,
    ) -> None:
        _touch(config.core_path / "lib" / "cli" / "cli.js")

        def _fail_to_load(command: list[str], *, env: dict[str, str], check: bool) -> object:
            Path(env[LOAD_STATUS_ENV]).write_text(LOAD_FAILED_MARKER, encoding="utf-8")
            return subprocess.CompletedProcess(command, 1)

        mock_run.side_effect = _fail_to_load
        with pytest.raises(CoreLoadError, match="failed to load"):
            CompiledExecutor(environ={}).run(_context(config))

    @patch("weex_cli.infra.node_executor.subprocess.run")
    def test_loaded_core_exit_78_is_not_a_load_failure(
        self, mock_run: MagicMock, config: BootstrapConfig,
    ) -> None:
        _touch(config.core_path / "lib" / "cli" / "cli.js")
        mock_run.return_value = subprocess.CompletedProcess([], 78)

        assert CompiledExecutor(environ={}).run(_context(config)) == 78

    @patch("weex_cli.infra.node_executor.subprocess.run")
    def test_status_file_is_removed_after_run(
        self, mock_run: MagicMock, config: BootstrapConfig,
    ) -> None:
        _touch(config.core_path / "lib" / "cli" / "cli.js")
        mock_run.return_value = subprocess.CompletedProcess([], 0)

        CompiledExecutor(environ={}).run(_context(config))

        status_file = Path(mock_run.call_args.kwargs["env"][LOAD_STATUS_ENV])
        assert not status_file.parent.exists()

    def test_launchers_report_through_status_file(self) -> None:
        for launcher in (CompiledExecutor.launcher, SourceExecutor.launcher):
            assert LOAD_STATUS_ENV in launcher
            assert "process.exit(78)" not in launcher

    @patch("weex_cli.infra.node_executor.subprocess.run")
    def test_node_spawn_failure(
        self, mock_run: MagicMock, config: BootstrapConfig,
    ) -> None:
        _touch(config.core_path / "lib" / "cli" / "cli.js")
        mock_run.side_effect = FileNotFoundError("node")
        with pytest.raises(CoreLoadError, match="Could not start node"):
            CompiledExecutor(environ={}).run(_context(config))


class TestSourceExecutor:
    def test_available_only_with_src_tree(self, config: BootstrapConfig) -> None:
        executor = SourceExecutor()
        assert executor.is_available(config) is False
        (config.core_path / "src").mkdir(parents=True)
        assert executor.is_available(config) is True

    def test_ts_entry_counts(self, config: BootstrapConfig) -> None:
        _touch(config.core_path / "src" / "cli" / "cli.ts")
        assert SourceExecutor().entry_exists(config) is True

    def test_src_without_entry_raises(self, config: BootstrapConfig) -> None:
        (config.core_path / "src").mkdir(parents=True)
        with pytest.raises(CoreLoadError):
            SourceExecutor().run(_context(config))

    @patch("weex_cli.infra.node_executor.subprocess.run")
    def test_passes_tsconfig(self, mock_run: MagicMock, config: BootstrapConfig) -> None:
        _touch(config.core_path / "src" / "cli" / "cli.ts")
        mock_run.return_value = subprocess.CompletedProcess([], 0)

        SourceExecutor(environ={}).run(_context(config))

        command = mock_run.call_args.args[0]
        assert "ts-node" in command[2]
        assert command[3] == str(config.core_path / "src" / "cli" / "cli")
        assert command[4] == str(config.core_path / "tsconfig.json")
