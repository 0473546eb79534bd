"""Dispatcher — hands control to the resolved core implementation.

The execution mode is a pure function of on-disk state and flags; the
executors themselves are injected.  Load failures come back as a
:class:`DispatchResult` instead of an exception so the caller can
decide whether to re-enter repair.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from weex_cli.core.models import (
    BootstrapConfig,
    CoreContext,
    DispatchResult,
    ExecutionMode,
    LocalState,
)
from weex_cli.core.protocols import CommandExecutor, CompletionHandler
from weex_cli.exceptions import CoreLoadError

logger = logging.getLogger(__name__)

COMPLETION_COMMAND: str = "completion"

# Mirrors cli.exit_codes.GENERAL_ERROR; core must not import from cli.
_LOAD_FAILURE_EXIT_CODE: int = 1


def select_execution_mode(source_present: bool, wants_compiled: bool) -> ExecutionMode:
    """Run from source only when a source tree exists and nobody asked otherwise."""
    if source_present and not wants_compiled:
        return ExecutionMode.SOURCE
    return ExecutionMode.COMPILED


class Dispatcher:
    """Routes a command to completion or to one of the core executors.

    Parameters
    ----------
    executors:
        One :class:`CommandExecutor` per :class:`ExecutionMode`.
    completion:
        Handler for the reserved ``completion`` command.
    """

    def __init__(
        self,
        executors: Mapping[ExecutionMode, CommandExecutor],
        completion: CompletionHandler,
    ) -> None:
        self._executors: dict[ExecutionMode, CommandExecutor] = dict(executors)
        self._completion: CompletionHandler = completion

    def select_mode(self, config: BootstrapConfig, wants_compiled: bool) -> ExecutionMode:
        source = self._executors.get(ExecutionMode.SOURCE)
        source_present = source is not None and source.is_available(config)
        return select_execution_mode(source_present, wants_compiled)

    def dispatch(
        self,
        config: BootstrapConfig,
        local_state: LocalState,
        command: str | None,
        *,
        wants_compiled: bool = False,
    ) -> DispatchResult:
        if command == COMPLETION_COMMAND:
            return DispatchResult(exit_code=self._completion(config.argv))

        mode = self.select_mode(config, wants_compiled)
        executor = self._executors[mode]
        context = CoreContext(
            config=config,
            modules=dict(local_state.modules),
            argv=config.argv,
        )
        logger.debug("dispatching %r in %s mode", command, mode.value)

        try:
            code = executor.run(context)
        except CoreLoadError as exc:
            logger.debug("core load failed: %s", exc)
            return DispatchResult(
                exit_code=_LOAD_FAILURE_EXIT_CODE,
                mode=mode,
                error=exc,
            )
        return DispatchResult(exit_code=code, mode=mode)
