"""Error taxonomy for the version-check tool.

Every fatal condition maps to a distinct exception class and process exit
code. Policy or authority skips are not errors; see ``dispatch.Outcome``.
"""

from __future__ import annotations


class VersionCheckError(Exception):
    """Base class for fatal version-check errors."""

    exit_code: int = 1


class ConfigurationError(VersionCheckError):
    """Raised when a required attribute is missing or unparseable."""

    exit_code = 3


class TransportFailure(VersionCheckError):
    """Raised when the admin endpoint is unreachable or times out."""

    exit_code = 4


class ProtocolFault(VersionCheckError):
    """Raised when the admin service answers with an application-level fault."""

    exit_code = 5

    def __init__(self, code: str, reason: str) -> None:
        self.code = code
        self.reason = reason
        super().__init__(f"Admin service fault {code}: {reason}")


class DecodeFailure(VersionCheckError):
    """Raised when a response body does not match the expected schema."""

    exit_code = 6
