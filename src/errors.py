"""Error types raised by setup-shiroa.

Helpers never terminate the process themselves; they raise one of these and
the entry point turns it into a failed step with the matching exit code.
"""
from __future__ import annotations

from constants import ExitCodes


class SetupError(Exception):
    """Base class for every failure that should fail the workflow step."""

    exit_code = ExitCodes.FAILURE

    def __init__(self, message: str, *, exit_code: ExitCodes | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


class InputError(SetupError):
    """An action input or configuration value is missing or malformed."""


class ReleaseListError(SetupError):
    """The release catalog could not be fetched or parsed."""

    exit_code = ExitCodes.CONNECTION_ERROR


class VersionResolutionError(SetupError):
    """No published release satisfies the requested version specifier."""


class UnsupportedVersionError(SetupError):
    """The requested version predates the prebuilt archive layout."""

    exit_code = ExitCodes.UNSUPPORTED


class UnsupportedPlatformError(SetupError):
    """No prebuilt archive exists for the host platform/architecture."""

    exit_code = ExitCodes.UNSUPPORTED


class DownloadError(SetupError):
    """An HTTP request or archive download failed."""

    exit_code = ExitCodes.CONNECTION_ERROR


class ExtractionError(SetupError):
    """A downloaded archive could not be unpacked."""


class ToolCacheError(SetupError):
    """The local tool cache could not be written."""
