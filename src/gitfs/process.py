"""One-shot git subprocess execution."""

from __future__ import annotations

import asyncio
import logging
import re
import shlex

from gitfs.errors import NotFoundError, ProcessFailureError
from gitfs.repository import RepositoryHandle

logger = logging.getLogger(__name__)

NOT_FOUND_PATTERNS = (
    re.compile(r"fatal: [Pp]ath '[^']+' does not exist in '[^']+'"),
    re.compile(r"fatal: [Pp]ath '[^']+' exists on disk, but not in '[^']+'"),
    re.compile(
        r"fatal: ambiguous argument '[^']+': unknown revision or path not in the working tree"
    ),
    re.compile(r"fatal: invalid object name '[^']+'", re.IGNORECASE),
    re.compile(r"fatal: Not a valid object name"),
    re.compile(r"fatal: bad revision '[^']+'"),
)


def is_not_found(stderr: str) -> bool:
    return any(pattern.search(stderr) for pattern in NOT_FOUND_PATTERNS)


class GitProcess:
    """Runs git against one repository, capturing output as raw bytes."""

    def __init__(self, handle: RepositoryHandle, git_binary: str = "git") -> None:
        self._handle = handle
        self._git_binary = git_binary

    @property
    def handle(self) -> RepositoryHandle:
        return self._handle

    def command_line(self, args: list[str]) -> list[str]:
        return [self._git_binary, *self._handle.git_flags, *args]

    async def run(self, args: list[str], encoding: str | None = None) -> bytes | str:
        """Run ``git <flags> <args>`` and return its stdout.

        stdout is returned as bytes unless ``encoding`` is given. A non-zero
        exit raises NotFoundError when stderr reports a missing path or
        revision and ProcessFailureError otherwise.
        """
        argv = self.command_line(args)
        printable = shlex.join(argv)
        logger.debug("Running %s", printable)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._handle.work_tree or self._handle.git_dir,
            )
        except FileNotFoundError as exc:
            raise ProcessFailureError(f"{self._git_binary} not found on PATH") from exc
        stdout, stderr = await proc.communicate()
        returncode = proc.returncode
        logger.debug("Exit status %s for %s", returncode, printable)

        if returncode != 0:
            stderr_text = stderr.decode("utf-8", errors="replace")
            message = f"{printable}\n{stderr_text}"
            if is_not_found(stderr_text):
                raise NotFoundError(message)
            logger.warning("git exited with status %s: %s", returncode, stderr_text.strip())
            raise ProcessFailureError(message, returncode=returncode, stderr=stderr_text)

        if encoding is None:
            return stdout
        return stdout.decode(encoding)
