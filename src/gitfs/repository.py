"""Repository location handling."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from gitfs.errors import BadRepositoryError

logger = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"
COMMONDIR = "commondir"

_GITDIR_RE = re.compile(r"^gitdir: (.+?)\s*$")


def _read_pointer(path: Path, repo: Path) -> Path:
    """Follow a ``.git`` file (``gitdir: <dir>``) as left by worktrees and submodules."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BadRepositoryError(f"Bad repo path: {repo}", path=str(repo)) from exc
    match = _GITDIR_RE.match(text.strip())
    if match is None:
        raise BadRepositoryError(f"Bad repo path: {repo} (unreadable {path.name})", path=str(repo))
    return (repo / match.group(1)).resolve()


@dataclass(frozen=True, slots=True)
class RepositoryHandle:
    """Where a repository keeps its metadata and, if any, its working copy.

    ``common_dir`` is set for linked worktrees, whose refs and packed-refs
    live in the main repository's metadata dir rather than in ``git_dir``.
    """

    git_dir: Path
    work_tree: Path | None = None
    common_dir: Path | None = None

    @classmethod
    def open(cls, path: str | Path) -> RepositoryHandle:
        repo = Path(path).expanduser()
        if not repo.is_dir():
            raise BadRepositoryError(f"Bad repo path: {repo}", path=str(repo))
        repo = repo.resolve()

        git_dir = repo / GIT_DIR_NAME
        if git_dir.is_file():
            git_dir = _read_pointer(git_dir, repo)
            if not (git_dir / "HEAD").is_file():
                raise BadRepositoryError(f"Bad repo path: {repo}", path=str(repo))
            logger.debug("Opened repository %s with metadata at %s", repo, git_dir)
            return cls(git_dir=git_dir, work_tree=repo, common_dir=cls._common_dir(git_dir))
        if git_dir.is_dir():
            logger.debug("Opened working repository %s", repo)
            return cls(git_dir=git_dir, work_tree=repo)
        if (repo / "HEAD").is_file():
            logger.debug("Opened bare repository %s", repo)
            return cls(git_dir=repo)
        raise BadRepositoryError(f"Bad repo path: {repo}", path=str(repo))

    @staticmethod
    def _common_dir(git_dir: Path) -> Path | None:
        try:
            pointer = (git_dir / COMMONDIR).read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise BadRepositoryError(f"Bad repo path: {git_dir}", path=str(git_dir)) from exc
        return (git_dir / pointer).resolve()

    @property
    def is_bare(self) -> bool:
        return self.work_tree is None

    @property
    def refs_dir(self) -> Path:
        """Directory holding ``refs/`` and ``packed-refs``."""
        return self.common_dir or self.git_dir

    @property
    def git_flags(self) -> list[str]:
        flags = [f"--git-dir={self.git_dir}"]
        if self.work_tree is not None:
            flags.append(f"--work-tree={self.work_tree}")
        return flags
