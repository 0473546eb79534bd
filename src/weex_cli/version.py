"""Single source of truth for the bootstrap version string."""

from __future__ import annotations

__version__: str = "2.0.0"
