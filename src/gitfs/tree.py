"""Directory listings at a revision."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import stat
from typing import cast

from gitfs.cache import CoalescingCache
from gitfs.content import ContentReader, live_os_error, live_path, normalize_path
from gitfs.errors import ParseError
from gitfs.repository import GIT_DIR_NAME
from gitfs.types import DirListing, Revision

logger = logging.getLogger(__name__)

_TREE_HEADER_RE = re.compile(r"^tree .*\n\n")


def parse_tree(text: str, path: str = "") -> DirListing:
    """Split ``git show <id>:<dir>`` output into files and dirs."""
    header = _TREE_HEADER_RE.match(text)
    if header is None:
        raise ParseError(f"{path or '/'} is not a directory", path=path)
    listing = DirListing()
    for entry in text[header.end() :].splitlines():
        if not entry:
            continue
        if entry.endswith("/"):
            listing.dirs.append(entry[:-1])
        else:
            listing.files.append(entry)
    return listing


class TreeReader:
    def __init__(self, content: ContentReader, cache: CoalescingCache) -> None:
        self._content = content
        self._cache = cache
        self._work_tree = content.work_tree

    async def list(self, revision: Revision | str, path: str) -> DirListing:
        rev = Revision.parse(revision)
        path = normalize_path(path)
        return await self._cache.run("list", rev, path, producer=lambda: self._fetch(rev, path))

    async def _fetch(self, revision: Revision, path: str) -> DirListing:
        if revision.is_live:
            return await self._list_live(path)
        data = cast(bytes, await self._content.read(revision, path))
        # Blobs need not be UTF-8; they must still fail the header check.
        return parse_tree(data.decode("utf-8", errors="replace"), path)

    async def _list_live(self, path: str) -> DirListing:
        directory = live_path(self._work_tree, path)
        try:
            names = await asyncio.to_thread(os.listdir, directory)
        except OSError as exc:
            raise live_os_error(exc, path) from exc
        if directory == self._work_tree:
            names = [name for name in names if name != GIT_DIR_NAME]

        async def _is_dir(name: str) -> bool:
            try:
                info = await asyncio.to_thread(os.stat, directory / name)
            except OSError as exc:
                raise live_os_error(exc, f"{path}/{name}" if path else name) from exc
            return stat.S_ISDIR(info.st_mode)

        # gather raises the first failure; no partial listing is returned.
        kinds = await asyncio.gather(*(_is_dir(name) for name in names))
        listing = DirListing()
        for name, is_dir in zip(names, kinds, strict=True):
            (listing.dirs if is_dir else listing.files).append(name)
        return listing
