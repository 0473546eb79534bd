"""Interactive upgrade confirmation for the CLI layer.

Provides the concrete :data:`~weex_cli.core.protocols.ConfirmPrompt`
injected into the resolution engine.  questionary is imported lazily so
non-interactive paths never need it.
"""

from __future__ import annotations

import sys
from typing import Any

from weex_cli.exceptions import PrerequisiteError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive confirmation."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise PrerequisiteError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def confirm_upgrade(message: str) -> bool | None:
    """Ask a yes/no question, defaulting to yes.

    Returns
    -------
    bool | None
        The answer, ``False`` when stdin is not a terminal, or ``None``
        when the user cancelled (Ctrl+C / Esc).
    """
    if not sys.stdin.isatty():
        return False

    questionary = _import_questionary()
    answer: bool | None = questionary.confirm(message, default=True).ask()
    return answer


def decline_upgrade(message: str) -> bool:
    """Non-interactive stand-in for :func:`confirm_upgrade`; keeps the installed core."""
    return False
