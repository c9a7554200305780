"""Raw file content at a revision."""

from __future__ import annotations

import asyncio
import errno
import logging
from pathlib import Path
from typing import cast

from gitfs.cache import CoalescingCache
from gitfs.errors import FileSystemError, InvalidVersionError, NotFoundError
from gitfs.process import GitProcess
from gitfs.types import Revision

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    return path.lstrip("/")


def _is_subpath(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def live_path(work_tree: Path | None, path: str) -> Path:
    """Map a repository path onto the working copy, refusing escapes."""
    if work_tree is None:
        raise InvalidVersionError("live version requires a working copy", path=path)
    candidate = (work_tree / normalize_path(path)).resolve()
    if not _is_subpath(candidate, work_tree):
        raise NotFoundError(f"path outside working copy: {path!r}", path=path)
    return candidate


def live_os_error(exc: OSError, path: str) -> Exception:
    if exc.errno == errno.ENOENT:
        return NotFoundError(f"{exc.strerror} {path!r}", path=path)
    return FileSystemError(f"{exc.strerror} {path!r}", path=path)


class ContentReader:
    def __init__(self, process: GitProcess, cache: CoalescingCache) -> None:
        self._process = process
        self._cache = cache
        self._work_tree = process.handle.work_tree

    @property
    def work_tree(self) -> Path | None:
        return self._work_tree

    async def read(
        self,
        revision: Revision | str,
        path: str,
        encoding: str | None = None,
    ) -> bytes | str:
        """Return ``path`` at ``revision``; bytes unless ``encoding`` is given."""
        rev = Revision.parse(revision)
        path = normalize_path(path)
        data: bytes = await self._cache.run(
            "read", rev, path, producer=lambda: self._fetch(rev, path)
        )
        if encoding is None:
            return data
        return data.decode(encoding)

    async def _fetch(self, revision: Revision, path: str) -> bytes:
        if revision.is_live:
            return await self._read_live(path)
        return cast(bytes, await self._process.run(["show", f"{revision.id}:{path}"]))

    async def _read_live(self, path: str) -> bytes:
        target = live_path(self._work_tree, path)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except OSError as exc:
            raise live_os_error(exc, path) from exc
