"""Infrastructure: refuse to bootstrap as root.

Installing the core as root leaves root-owned files in the user's
``~/.wx`` that later non-root runs cannot update.  When started through
``sudo`` the process drops back to the invoking user; a plain root
shell is rejected unless ``WEEX_ALLOW_SUDO`` is set.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from weex_cli.exceptions import PrivilegeError

logger = logging.getLogger(__name__)

ENV_ALLOW_SUDO: str = "WEEX_ALLOW_SUDO"

SUDO_HINT: str = (
    "If you can't run without sudo, you may have problems during installation.\n"
    "Try to run `sudo chown -R $(whoami) $(npm config get prefix)/{lib/node_modules,bin,share}`\n"
    "to empower your folders."
)


def sudo_allowed(environ: Mapping[str, str]) -> bool:
    return bool(environ.get(ENV_ALLOW_SUDO))


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def downgrade_root(environ: Mapping[str, str]) -> bool:
    """Drop root privileges to the ``sudo`` caller.

    Returns
    -------
    bool
        ``True`` when privileges were dropped, ``False`` when the
        process was not running as root.

    Raises
    ------
    PrivilegeError
        When running as root without a ``SUDO_UID`` to return to, or
        when ``setuid``/``setgid`` fail.
    """
    if not _is_root():
        return False

    uid = environ.get("SUDO_UID")
    gid = environ.get("SUDO_GID")
    if not uid or not uid.isdigit() or int(uid) == 0:
        raise PrivilegeError("Please don't use `sudo` to run the command.", hint=SUDO_HINT)

    try:
        if gid and gid.isdigit():
            os.setgroups([])
            os.setgid(int(gid))
        os.setuid(int(uid))
    except OSError as exc:
        raise PrivilegeError(
            f"Could not drop root privileges: {exc}",
            hint=SUDO_HINT,
        ) from exc

    logger.debug("dropped root privileges to uid=%s gid=%s", uid, gid)
    return True
