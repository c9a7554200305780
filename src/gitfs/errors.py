"""gitfs exception hierarchy.

All gitfs exceptions inherit from GitFSError and carry an ErrorKind,
so callers can branch on the kind or catch a concrete class.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    BAD_REPOSITORY = "bad_repository"
    INVALID_VERSION = "invalid_version"
    NOT_FOUND = "not_found"
    PROCESS_FAILURE = "process_failure"
    IO_ERROR = "io_error"
    PARSE_ERROR = "parse_error"
    CONFIG_ERROR = "config_error"


class GitFSError(Exception):
    """Base exception for all gitfs errors."""

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(
        self,
        message: str = "",
        *,
        path: str | None = None,
        revision: str | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.revision = revision


class BadRepositoryError(GitFSError):
    """Path is not a git repository."""

    kind = ErrorKind.BAD_REPOSITORY


class InvalidVersionError(GitFSError):
    """Revision is neither the live sentinel nor a 40-hex id."""

    kind = ErrorKind.INVALID_VERSION


class NotFoundError(GitFSError):
    """Path or revision does not exist."""

    kind = ErrorKind.NOT_FOUND


class ProcessFailureError(GitFSError):
    """git exited non-zero for a reason other than a missing object."""

    kind = ErrorKind.PROCESS_FAILURE

    def __init__(
        self,
        message: str = "",
        *,
        returncode: int | None = None,
        stderr: str = "",
        path: str | None = None,
        revision: str | None = None,
    ) -> None:
        super().__init__(message, path=path, revision=revision)
        self.returncode = returncode
        self.stderr = stderr


class FileSystemError(GitFSError):
    """Host filesystem operation failed."""

    kind = ErrorKind.IO_ERROR


class ParseError(GitFSError):
    """git output did not have the expected shape."""

    kind = ErrorKind.PARSE_ERROR


class ConfigError(GitFSError):
    """Invalid or missing configuration."""

    kind = ErrorKind.CONFIG_ERROR
