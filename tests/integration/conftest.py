import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

GitRunner = Callable[..., str]


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    if shutil.which("git") is not None:
        return
    skip = pytest.mark.skip(reason="git not installed")
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(skip)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def run_git(git_repo: Path) -> GitRunner:
    def _run(*args: str) -> str:
        return _git(git_repo, *args)

    return _run


@pytest.fixture
def commit_all(run_git: GitRunner) -> Callable[[str], str]:
    def _commit(message: str) -> str:
        run_git("add", "-A")
        run_git("commit", "-q", "-m", message)
        return run_git("rev-parse", "HEAD").strip()

    return _commit


def _git(repo: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", "-C", str(repo), *args],
        check=True,
        capture_output=True,
        text=True,
    )
    return proc.stdout
