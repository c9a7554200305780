"""Resolve the commit id the repository HEAD points at."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import cast

from gitfs.cache import CoalescingCache
from gitfs.errors import FileSystemError, NotFoundError, ParseError
from gitfs.process import GitProcess
from gitfs.types import LIVE, is_commit_id

logger = logging.getLogger(__name__)

PACKED_REFS = "packed-refs"
HEAD = "HEAD"

_SYMREF_RE = re.compile(r"^ref: (\S+)\s*$")
_LOOSE_REF_RE = re.compile(r"^([0-9a-f]{40})\s*$")


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise FileSystemError(f"{exc.strerror}: {path}", path=str(path)) from exc


def parse_head(text: str) -> tuple[str | None, str | None]:
    """Return ``(ref_path, None)`` for a symbolic HEAD, ``(None, id)`` if detached."""
    stripped = text.strip()
    if is_commit_id(stripped):
        return None, stripped
    match = _SYMREF_RE.match(stripped)
    if match is None:
        raise ParseError(f"unrecognised HEAD contents: {stripped!r}")
    return match.group(1), None


def find_packed_ref(packed_refs: str, ref_path: str) -> str | None:
    for line in packed_refs.splitlines():
        if not line or line.startswith(("#", "^")):
            continue
        commit_id, _, name = line.partition(" ")
        if name.strip() == ref_path and is_commit_id(commit_id):
            return commit_id
    return None


class HeadResolver:
    """Reads HEAD, loose refs and packed-refs straight from the metadata dir.

    The resolved id is kept for the volatile lifetime only, since HEAD may
    move between calls.
    """

    def __init__(
        self,
        process: GitProcess,
        cache: CoalescingCache,
        maintenance_args: list[str] | None = None,
    ) -> None:
        self._process = process
        self._cache = cache
        self._git_dir = process.handle.git_dir
        self._refs_dir = process.handle.refs_dir
        self._maintenance_args = maintenance_args or ["gc"]

    async def resolve(self) -> str:
        return await self._cache.run("head", LIVE, producer=self._resolve)

    async def _resolve(self) -> str:
        packed_refs = await asyncio.to_thread(_read_text, self._refs_dir / PACKED_REFS)
        if packed_refs is None:
            # One-shot self-heal: compaction is expected to write packed-refs.
            logger.info(
                "%s missing in %s; running git %s",
                PACKED_REFS,
                self._refs_dir,
                " ".join(self._maintenance_args),
            )
            await self._process.run(self._maintenance_args)
            packed_refs = await asyncio.to_thread(_read_text, self._refs_dir / PACKED_REFS)
            if packed_refs is None:
                raise NotFoundError(
                    f"{PACKED_REFS} still missing after maintenance in {self._refs_dir}",
                    path=str(self._refs_dir / PACKED_REFS),
                )

        head = await asyncio.to_thread(_read_text, self._git_dir / HEAD)
        if head is None:
            raise NotFoundError(f"{HEAD} missing in {self._git_dir}", path=str(self._git_dir))
        ref_path, detached = parse_head(head)
        if detached is not None:
            return detached
        ref_path = cast(str, ref_path)

        loose = await asyncio.to_thread(_read_text, self._refs_dir / ref_path)
        if loose is not None:
            match = _LOOSE_REF_RE.match(loose)
            if match is not None:
                return match.group(1)

        commit_id = find_packed_ref(packed_refs, ref_path)
        if commit_id is None:
            raise NotFoundError(f"cannot resolve {ref_path} in {self._refs_dir}", path=ref_path)
        logger.debug("Resolved %s to %s", ref_path, commit_id)
        return commit_id
