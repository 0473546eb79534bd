"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of Rich so the
prerequisite checks and the error boundary keep working even when
Rich is not importable.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from weex_cli.exceptions import PrerequisiteError

_MARKUP = re.compile(r"\[/?[a-z ]+\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``PrerequisiteError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise PrerequisiteError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True)


def strip_markup(text: str) -> str:
    """Drop simple ``[style]...[/style]`` tags for plain output."""
    return _MARKUP.sub("", text)


def escape(text: str) -> str:
    """Escape Rich markup in untrusted text (npm output, paths)."""
    try:
        from rich.markup import escape as rich_escape
    except ModuleNotFoundError:
        return text
    return rich_escape(text)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except PrerequisiteError:
            print(
                *(strip_markup(o) if isinstance(o, str) else o for o in objects),
                file=sys.stderr,
            )
            return
        rich_console.print(*objects)

    def status(self, message: str) -> None:
        self.print(f"[yellow]{message}[/yellow]")

    def warning(self, message: str, hint: str | None = None) -> None:
        self.print(f"[bold yellow]Warning:[/bold yellow] {message}")
        if hint:
            self.print(f"[yellow]Hint:[/yellow] {hint}")


console = _ConsoleProxy()
