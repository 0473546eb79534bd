"""CLI application entry point for weex-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~weex_cli.exceptions.WeexCliError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* Only bootstrap flags are parsed here; everything else on the command
  line belongs to the core and is forwarded untouched.
* Prerequisite checks (Node.js, root, home directory) run before any
  resolution and are fatal.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from weex_cli.cli import exit_codes
from weex_cli.cli.console import console, escape
from weex_cli.exceptions import WeexCliError
from weex_cli.version import __version__

if TYPE_CHECKING:
    from weex_cli.cli.bootstrap import Bootstrap
    from weex_cli.core.models import BootstrapConfig
    from weex_cli.core.protocols import ConfirmPrompt

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the bootstrap flag parser.

    ``--help`` is deliberately not handled here: the core owns help
    output for every command.
    """
    parser = argparse.ArgumentParser(
        prog="weex",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--compiled",
        action="store_true",
        help="Run the prebuilt core even when a source tree is present.",
    )
    parser.add_argument(
        "--registry",
        default=None,
        help="npm registry used to look up and install the core.",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Force reinstallation when installing the core.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show bootstrap debug logging.",
    )
    return parser


def split_positionals(extras: Sequence[str]) -> tuple[str | None, str | None]:
    """Return ``(command, first_argument)`` from the unparsed tokens."""
    positionals = [token for token in extras if not token.startswith("-")]
    command = positionals[0] if positionals else None
    first_arg = positionals[1] if len(positionals) > 1 else None
    return command, first_arg


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def check_prerequisites(environ: Mapping[str, str]) -> Path:
    """Run the fatal pre-bootstrap checks; returns the ``node`` path."""
    from weex_cli.infra.node_runtime import require_node
    from weex_cli.infra.privileges import downgrade_root, sudo_allowed

    node = require_node()
    if sudo_allowed(environ):
        console.print("root privileges downgrade skipped")
    else:
        downgrade_root(environ)
    return node


def select_confirm(command: str | None) -> ConfirmPrompt:
    """Pick the upgrade prompt for *command*.

    ``completion`` never prompts: its stdout is the generated script.
    """
    from weex_cli.cli.prompt import confirm_upgrade, decline_upgrade
    from weex_cli.core.dispatch import COMPLETION_COMMAND

    return decline_upgrade if command == COMPLETION_COMMAND else confirm_upgrade


def build_bootstrap(
    config: BootstrapConfig,
    node: Path,
    command: str | None = None,
) -> Bootstrap:
    """Assemble the production collaborators around *config*."""
    from weex_cli.cli.bootstrap import Bootstrap
    from weex_cli.cli.completion import start_completion
    from weex_cli.core.dispatch import Dispatcher
    from weex_cli.core.models import ExecutionMode
    from weex_cli.core.resolution import VersionResolutionEngine
    from weex_cli.infra.local_state import read_local_state
    from weex_cli.infra.node_executor import CompiledExecutor, SourceExecutor
    from weex_cli.infra.npm_installer import NpmInstaller
    from weex_cli.infra.npm_registry import NpmRegistryClient

    engine = VersionResolutionEngine(
        NpmRegistryClient(config.registry),
        select_confirm(command),
    )
    dispatcher = Dispatcher(
        {
            ExecutionMode.SOURCE: SourceExecutor(node),
            ExecutionMode.COMPILED: CompiledExecutor(node),
        },
        start_completion,
    )
    return Bootstrap(config, engine, NpmInstaller(), dispatcher, read_local_state)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the weex CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code; the core's own exit code when it ran.
    """
    from weex_cli.cli.logs import configure_logging, debug_requested
    from weex_cli.core.environment import resolve_config
    from weex_cli.infra.local_state import find_user_home

    raw_argv = list(sys.argv[1:] if argv is None else argv)
    args, extras = _build_parser().parse_known_args(raw_argv)
    command, first_arg = split_positionals(extras)

    environ = os.environ
    configure_logging(debug_requested(environ, args.verbose))
    logger.debug("weex-cli %s, argv=%s", __version__, raw_argv)

    node = check_prerequisites(environ)
    config = resolve_config(
        environ=environ,
        home_dir=find_user_home(),
        registry_flag=args.registry,
        argv=tuple(raw_argv),
    )

    bootstrap = build_bootstrap(config, node, command)
    return bootstrap.run(
        command,
        first_arg,
        wants_compiled=args.compiled,
        force=args.force,
    )


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except WeexCliError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        logger.debug("unexpected error", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
