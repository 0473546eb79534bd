"""npm registry backed implementation of :class:`~weex_cli.core.protocols.RegistryClient`.

This module is the **only** place in the codebase that imports
``requests``.  Every transport or payload problem is re-raised as
:class:`~weex_cli.exceptions.RegistryLookupError` — nothing raw escapes
the infrastructure boundary.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from weex_cli.exceptions import RegistryLookupError
from weex_cli.version import __version__

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT: float = 60.0
"""Seconds before the latest-version lookup is abandoned."""


class NpmRegistryClient:
    """Looks up ``<registry>/<name>/latest`` once, without retries.

    Usage::

        client = NpmRegistryClient("https://registry.npmjs.org")
        version = client.latest_version("@weex-cli/core")
    """

    def __init__(
        self,
        registry: str,
        *,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._registry: str = registry.rstrip("/")
        self._timeout: float = timeout
        self._session: requests.Session | None = session

    def latest_url(self, name: str) -> str:
        # Scoped names keep their slash: the registry accepts both forms.
        return f"{self._registry}/{name}/latest"

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def latest_version(self, name: str) -> str:
        """Return the ``version`` field of the ``latest`` dist-tag document.

        Raises
        ------
        RegistryLookupError
            On timeout, connection failure, HTTP error, non-JSON body,
            or a body without ``version``.
        """
        url = self.latest_url(name)
        body = self._get_json(url)

        version = body.get("version") if isinstance(body, dict) else None
        if not version or not isinstance(version, str):
            raise RegistryLookupError(f"No version field in response from {url}")

        logger.debug("registry %s reports %s@%s", self._registry, name, version)
        return version

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _get_json(self, url: str) -> Any:
        getter = self._session.get if self._session is not None else requests.get
        logger.debug("GET %s (timeout=%ss)", url, self._timeout)
        try:
            response = getter(
                url,
                timeout=self._timeout,
                headers={
                    "Accept": "application/json",
                    "User-Agent": f"weex-cli/{__version__}",
                },
            )
            response.raise_for_status()
            return response.json()
        except requests.Timeout as exc:
            raise RegistryLookupError(
                f"Registry request timed out after {self._timeout:g} seconds: {url}",
            ) from exc
        except requests.RequestException as exc:
            raise RegistryLookupError(f"Registry request failed: {exc}") from exc
        except ValueError as exc:
            raise RegistryLookupError(f"Registry returned invalid JSON: {exc}") from exc
