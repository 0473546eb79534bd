"""Custom exception hierarchy for weex-cli.

All exceptions that cross layer boundaries must inherit from
:class:`WeexCliError`.  Raw third-party exceptions (``requests``,
``subprocess``, ``json``) must NEVER propagate beyond the infrastructure
layer — they must be caught and re-raised as a typed subclass defined
here.

Hierarchy
---------
WeexCliError
├── PrerequisiteError
│   ├── NodeNotFoundError
│   ├── NodeVersionError
│   ├── PrivilegeError
│   └── HomeDirectoryNotFoundError
├── LocalStateError
├── RegistryLookupError
├── InstallError
├── CoreLoadError
└── CoreUnavailableError
"""

from __future__ import annotations


class WeexCliError(Exception):
    """Base exception for all weex-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Runtime prerequisites -------------------------------------------------

class PrerequisiteError(WeexCliError):
    """Raised when the process cannot bootstrap at all.

    Always fatal: the CLI exits before any resolution is attempted.
    """


class NodeNotFoundError(PrerequisiteError):
    """Raised when ``node`` cannot be located on the system PATH."""


class NodeVersionError(PrerequisiteError):
    """Raised when the installed Node.js is older than required."""


class PrivilegeError(PrerequisiteError):
    """Raised when running as root and privileges cannot be dropped."""


class HomeDirectoryNotFoundError(PrerequisiteError):
    """Raised when no user home directory can be determined."""


# --- Local state -----------------------------------------------------------

class LocalStateError(WeexCliError):
    """Raised when a persisted state file exists but cannot be parsed."""


# --- Registry / install ----------------------------------------------------

class RegistryLookupError(WeexCliError):
    """Raised when the registry cannot report a latest version."""


class InstallError(WeexCliError):
    """Raised when the installer fails to materialize a package."""


# --- Dispatch --------------------------------------------------------------

class CoreLoadError(WeexCliError):
    """Raised when the core entry point cannot be loaded."""


class CoreUnavailableError(WeexCliError):
    """Raised when the core is still unusable after a repair attempt."""


def append_repair_suggestion(hint: str) -> str:
    """Append ``weex repair`` guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try reinstalling the core:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    weex repair",
        )
    )
