"""Read-only versioned filesystem backed by a git repository."""

from gitfs.errors import (
    BadRepositoryError,
    ConfigError,
    ErrorKind,
    FileSystemError,
    GitFSError,
    InvalidVersionError,
    NotFoundError,
    ParseError,
    ProcessFailureError,
)
from gitfs.filesystem import GitFS
from gitfs.logging import configure_logging
from gitfs.types import LIVE, DirListing, LogEntry, Revision

__all__ = [
    "LIVE",
    "BadRepositoryError",
    "ConfigError",
    "DirListing",
    "ErrorKind",
    "FileSystemError",
    "GitFS",
    "GitFSError",
    "InvalidVersionError",
    "LogEntry",
    "NotFoundError",
    "ParseError",
    "ProcessFailureError",
    "Revision",
    "configure_logging",
]
