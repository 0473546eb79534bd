"""Shared pytest fixtures and configuration for the weex-cli test suite.

Guidelines
----------
* No internet access in any test.
* ``requests``, ``npm`` and ``node`` must be mocked at the infra boundary.
* Core tests must be pure — no side effects.
* Filesystem state lives under ``tmp_path`` only.
"""

from __future__ import annotations

import json
from pathlib import Path
from collections.abc import Callable
from typing import Any

import pytest

from weex_cli.core.environment import resolve_config
from weex_cli.core.models import BootstrapConfig


@pytest.fixture
def config(tmp_path: Path) -> BootstrapConfig:
    """A configuration rooted in a throwaway home directory."""
    return resolve_config(
        environ={},
        home_dir=tmp_path,
        argv=("compile", "src", "dist"),
    )


def _write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Helper writing *data* as JSON to *path*, creating parents."""
    return _write_json
