"""Per-path commit history relative to HEAD."""

from __future__ import annotations

import logging
import re
from typing import cast

from gitfs.cache import CoalescingCache
from gitfs.content import normalize_path
from gitfs.errors import ParseError
from gitfs.process import GitProcess
from gitfs.refs import HeadResolver
from gitfs.types import LogEntry, Revision

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "\0"

_COMMIT_LINE_RE = re.compile(r"^commit ([0-9a-f]{40})\b.*$")
_HEADER_RE = re.compile(r"^([A-Z][A-Za-z-]*):\s*(.*)$")


def parse_record(record: str) -> LogEntry:
    """Parse one ``git log`` record into a LogEntry.

    The record is a ``commit <id>`` line, ``Header: value`` lines, a blank
    line, then the message (with any --summary lines) which is kept trimmed.
    """
    head, sep, message = record.partition("\n\n")
    lines = head.split("\n")
    match = _COMMIT_LINE_RE.match(lines[0])
    if match is None:
        raise ParseError(f"log record has no commit line: {lines[0][:80]!r}")
    commit = match.group(1)

    headers: dict[str, str] = {}
    for line in lines[1:]:
        header = _HEADER_RE.match(line)
        if header is None:
            raise ParseError(f"unexpected header line in {commit}: {line!r}", revision=commit)
        headers[header.group(1).lower()] = header.group(2)
    return LogEntry(commit=commit, message=message.strip() if sep else "", headers=headers)


def parse_log(text: str) -> dict[str, LogEntry]:
    log: dict[str, LogEntry] = {}
    if not text.strip(RECORD_SEPARATOR + "\n"):
        return log
    for record in text.split(RECORD_SEPARATOR):
        record = record.lstrip("\n")
        if not record:
            continue
        entry = parse_record(record)
        log[entry.commit] = entry
    return log


class HistoryReader:
    def __init__(
        self,
        process: GitProcess,
        resolver: HeadResolver,
        cache: CoalescingCache,
    ) -> None:
        self._process = process
        self._resolver = resolver
        self._cache = cache

    async def log(self, path: str) -> dict[str, LogEntry]:
        head = await self._resolver.resolve()
        return await self.log_at(head, path)

    async def log_at(self, revision: Revision | str, path: str) -> dict[str, LogEntry]:
        rev = Revision.parse(revision)
        path = normalize_path(path)
        return await self._cache.run("log", rev, path, producer=lambda: self._fetch(rev, path))

    async def _fetch(self, revision: Revision, path: str) -> dict[str, LogEntry]:
        if revision.is_live:
            revision = Revision.fixed(await self._resolver.resolve())
        args = ["log", "-z", "--summary", "--no-color", str(revision), "--"]
        if path:
            args.append(path)
        text = cast(str, await self._process.run(args, "utf-8"))
        log = parse_log(text)
        logger.debug("Parsed %d log entries for %r at %s", len(log), path, revision)
        return log
