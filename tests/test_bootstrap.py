"""Tests for bootstrap orchestration (cli/bootstrap.py).

The engine, installer, dispatcher and state reader are all mocked.
These tests verify:

* Decisions are applied through the installer with the configured paths
* Install failures are non-fatal warnings
* A failed dispatch re-enters repair exactly once
* A second failure surfaces as ``CoreUnavailableError``
"""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

from weex_cli.cli.bootstrap import Bootstrap
from weex_cli.core.environment import CORE_NAME
from weex_cli.core.models import (
    BootstrapConfig,
    DecisionKind,
    DispatchResult,
    ExecutionMode,
    LocalState,
    ResolutionDecision,
)
from weex_cli.exceptions import (
    CoreLoadError,
    CoreUnavailableError,
    InstallError,
    LocalStateError,
)

_OK = DispatchResult(exit_code=0, mode=ExecutionMode.COMPILED)
_FAILED = DispatchResult(
    exit_code=1,
    mode=ExecutionMode.COMPILED,
    error=CoreLoadError("Core entry point not found"),
)


def _bootstrap(
    config: BootstrapConfig,
    decisions: list[ResolutionDecision],
    results: list[DispatchResult],
) -> tuple[Bootstrap, MagicMock, MagicMock, MagicMock, MagicMock]:
    engine = MagicMock()
    engine.resolve.side_effect = decisions
    installer = MagicMock()
    dispatcher = MagicMock()
    dispatcher.dispatch.side_effect = results
    read_state = MagicMock(return_value=LocalState(core=None))
    bootstrap = Bootstrap(config, engine, installer, dispatcher, read_state)
    return bootstrap, engine, installer, dispatcher, read_state


class TestApply:
    def test_skip_does_not_install(self, config: BootstrapConfig) -> None:
        bootstrap, _, installer, _, _ = _bootstrap(config, [], [])
        bootstrap.apply(ResolutionDecision.skip())
        installer.install.assert_not_called()

    def test_install_uses_config_paths(self, config: BootstrapConfig) -> None:
        bootstrap, _, installer, _, _ = _bootstrap(config, [], [])
        bootstrap.apply(ResolutionDecision.install(CORE_NAME, "latest"), force=True)

        installer.install.assert_called_once_with(
            CORE_NAME,
            "latest",
            root=config.core_root,
            trash=config.trash,
            force=True,
            registry=config.registry,
        )

    def test_upgrade_is_announced(
        self, config: BootstrapConfig, capsys: pytest.CaptureFixture[str],
    ) -> None:
        bootstrap, _, installer, _, _ = _bootstrap(config, [], [])
        bootstrap.apply(ResolutionDecision.upgrade(CORE_NAME, "1.3.0", "1.2.0"))

        installer.install.assert_called_once()
        err = capsys.readouterr().err
        assert "1.2.0 -> 1.3.0" in err

    def test_install_failure_is_a_warning(
        self, config: BootstrapConfig, capsys: pytest.CaptureFixture[str],
    ) -> None:
        bootstrap, _, installer, _, _ = _bootstrap(config, [], [])
        installer.install.side_effect = InstallError("npm exploded", hint="npm ERR! 404")

        bootstrap.apply(ResolutionDecision.install(CORE_NAME, "latest"))

        err = capsys.readouterr().err
        assert "Warning" in err
        assert "npm exploded" in err


    def test_decision_without_target_does_not_install(self, config: BootstrapConfig) -> None:
        bootstrap, _, installer, _, _ = _bootstrap(config, [], [])
        bootstrap.apply(ResolutionDecision(DecisionKind.INSTALL))
        installer.install.assert_not_called()


class TestRun:
    def test_skip_then_dispatch(self, config: BootstrapConfig) -> None:
        bootstrap, engine, installer, dispatcher, _ = _bootstrap(
            config, [ResolutionDecision.skip()], [DispatchResult(exit_code=4)],
        )

        assert bootstrap.run("compile") == 4
        engine.resolve.assert_called_once()
        installer.install.assert_not_called()
        dispatcher.dispatch.assert_called_once()

    def test_flags_reach_dispatcher(self, config: BootstrapConfig) -> None:
        bootstrap, _, _, dispatcher, _ = _bootstrap(
            config, [ResolutionDecision.skip()], [_OK],
        )
        bootstrap.run("compile", wants_compiled=True)
        assert dispatcher.dispatch.call_args.kwargs == {"wants_compiled": True}

    def test_state_is_reread_after_install(self, config: BootstrapConfig) -> None:
        bootstrap, _, _, _, read_state = _bootstrap(
            config, [ResolutionDecision.install(CORE_NAME, "latest")], [_OK],
        )
        bootstrap.run("compile")
        assert read_state.call_count == 2

    def test_install_failure_still_dispatches(self, config: BootstrapConfig) -> None:
        bootstrap, _, installer, dispatcher, _ = _bootstrap(
            config, [ResolutionDecision.install(CORE_NAME, "latest")], [_OK],
        )
        installer.install.side_effect = InstallError("offline")

        assert bootstrap.run("compile") == 0
        dispatcher.dispatch.assert_called_once()

    def test_load_failure_repairs_once_then_succeeds(self, config: BootstrapConfig) -> None:
        bootstrap, engine, installer, dispatcher, _ = _bootstrap(
            config,
            [
                ResolutionDecision.skip(),
                ResolutionDecision.repair_install(CORE_NAME, "latest"),
            ],
            [_FAILED, _OK],
        )

        assert bootstrap.run("compile", force=True) == 0
        assert engine.resolve.call_args_list[1] == call(
            "repair", None, config, LocalState(core=None),
        )
        installer.install.assert_called_once()
        assert installer.install.call_args.kwargs["force"] is True
        assert dispatcher.dispatch.call_count == 2

    def test_second_failure_raises(self, config: BootstrapConfig) -> None:
        bootstrap, engine, installer, dispatcher, _ = _bootstrap(
            config,
            [
                ResolutionDecision.install(CORE_NAME, "latest"),
                ResolutionDecision.repair_install(CORE_NAME, "latest"),
            ],
            [_FAILED, _FAILED],
        )

        with pytest.raises(CoreUnavailableError) as exc_info:
            bootstrap.run("compile")

        assert engine.resolve.call_count == 2
        assert installer.install.call_count == 2
        assert dispatcher.dispatch.call_count == 2
        assert exc_info.value.hint is not None
        assert "weex repair" in exc_info.value.hint
        assert isinstance(exc_info.value.__cause__, CoreLoadError)

    def test_explicit_core_repair_is_not_repeated(self, config: BootstrapConfig) -> None:
        bootstrap, engine, installer, dispatcher, _ = _bootstrap(
            config,
            [ResolutionDecision.repair_install(CORE_NAME, "latest")],
            [_FAILED],
        )

        with pytest.raises(CoreUnavailableError):
            bootstrap.run("repair")

        engine.resolve.assert_called_once()
        installer.install.assert_called_once()
        dispatcher.dispatch.assert_called_once()

    def test_non_core_repair_may_still_repair_core(self, config: BootstrapConfig) -> None:
        bootstrap, engine, _, _, _ = _bootstrap(
            config,
            [
                ResolutionDecision.skip(),
                ResolutionDecision.repair_install(CORE_NAME, "latest"),
            ],
            [_FAILED, _OK],
        )

        assert bootstrap.run("repair", "other-module@2.1.0") == 0
        assert engine.resolve.call_count == 2

    def test_core_exit_code_78_is_not_repaired(self, config: BootstrapConfig) -> None:
        bootstrap, engine, installer, dispatcher, _ = _bootstrap(
            config,
            [ResolutionDecision.skip()],
            [DispatchResult(exit_code=78, mode=ExecutionMode.COMPILED)],
        )

        assert bootstrap.run("compile") == 78
        engine.resolve.assert_called_once()
        installer.install.assert_not_called()
        dispatcher.dispatch.assert_called_once()


_CORRUPT = LocalStateError("Corrupt JSON in package.json")


class TestUnreadableState:
    def test_repair_proceeds_with_forced_install(self, config: BootstrapConfig) -> None:
        bootstrap, engine, installer, _, read_state = _bootstrap(
            config, [ResolutionDecision.repair_install(CORE_NAME, "latest")], [],
        )
        read_state.side_effect = _CORRUPT

        decision = bootstrap.prepare("repair")

        assert decision == ResolutionDecision.repair_install(CORE_NAME, "latest")
        engine.resolve.assert_called_once_with("repair", None, config, LocalState(core=None))
        installer.install.assert_called_once()
        assert installer.install.call_args.kwargs["force"] is True

    def test_repair_then_dispatch(self, config: BootstrapConfig) -> None:
        bootstrap, _, installer, dispatcher, read_state = _bootstrap(
            config, [ResolutionDecision.repair_install(CORE_NAME, "latest")], [_OK],
        )
        read_state.side_effect = [_CORRUPT, LocalState(core=None)]

        assert bootstrap.run("repair") == 0
        installer.install.assert_called_once()
        dispatcher.dispatch.assert_called_once()

    def test_normal_run_propagates(self, config: BootstrapConfig) -> None:
        bootstrap, engine, installer, dispatcher, read_state = _bootstrap(
            config, [ResolutionDecision.skip()], [_OK],
        )
        read_state.side_effect = _CORRUPT

        with pytest.raises(LocalStateError):
            bootstrap.run("compile")

        engine.resolve.assert_not_called()
        installer.install.assert_not_called()
        dispatcher.dispatch.assert_not_called()
