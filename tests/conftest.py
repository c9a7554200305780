import os
from pathlib import Path

import pytest

from gitfs.config import get_settings


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith("GITFS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("APP_ENV", "test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_repo(tmp_path: Path) -> Path:
    """Working-copy layout with a hand-written metadata dir; no git needed."""
    repo = tmp_path / "fake"
    git_dir = repo / ".git"
    (git_dir / "refs" / "heads").mkdir(parents=True)
    (git_dir / "HEAD").write_text("ref: refs/heads/main\n")
    return repo
