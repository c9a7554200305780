"""Read-only versioned filesystem over one git repository."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from gitfs.cache import CoalescingCache
from gitfs.config import Settings, get_settings, validate_settings
from gitfs.content import ContentReader
from gitfs.history import HistoryReader
from gitfs.logging import operation_context
from gitfs.process import GitProcess
from gitfs.refs import HeadResolver
from gitfs.repository import RepositoryHandle
from gitfs.tree import TreeReader
from gitfs.types import LIVE, DirListing, LogEntry, Revision

logger = logging.getLogger(__name__)

V = TypeVar("V")


class GitFS:
    """Session context owning the repository handle, cache and readers.

    Each instance has its own cache, so several repositories can be served
    from one process without sharing state.
    """

    def __init__(self, path: str | Path, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        validate_settings(self.settings)
        self.handle = RepositoryHandle.open(path)
        self.cache = CoalescingCache(
            stable_seconds=self.settings.stable_cache_seconds,
            volatile_seconds=self.settings.volatile_cache_seconds,
        )
        self.process = GitProcess(self.handle, git_binary=self.settings.git_binary)
        self.resolver = HeadResolver(
            self.process, self.cache, maintenance_args=self.settings.maintenance_args
        )
        self.content = ContentReader(self.process, self.cache)
        self.tree = TreeReader(self.content, self.cache)
        self.history = HistoryReader(self.process, self.resolver, self.cache)
        logger.info(
            "Serving %s repository at %s",
            "bare" if self.handle.is_bare else "working",
            self.handle.git_dir,
        )

    async def read_file(
        self,
        revision: Revision | str,
        path: str,
        encoding: str | None = None,
    ) -> bytes | str:
        with operation_context("read_file", self.handle.git_dir, revision):
            return await self.content.read(revision, path, encoding)

    async def read_dir(self, revision: Revision | str, path: str) -> DirListing:
        with operation_context("read_dir", self.handle.git_dir, revision):
            return await self.tree.list(revision, path)

    async def log(self, path: str) -> dict[str, LogEntry]:
        with operation_context("log", self.handle.git_dir):
            return await self.history.log(path)

    async def head(self, force_head: bool = False) -> str:
        """Newest version: the working copy if there is one, else HEAD's id."""
        if self.handle.work_tree is not None and not force_head:
            return LIVE
        return await self.resolver.resolve()

    def coalesce(
        self,
        operation: str,
        fn: Callable[..., Awaitable[V]],
    ) -> Callable[..., Awaitable[V]]:
        """Memoize a revision-keyed coroutine function with this session's cache."""
        return self.cache.wrap(operation, fn)

    def clear_cache(self) -> None:
        self.cache.clear()
