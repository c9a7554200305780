import pytest

from gitfs.config import Settings, get_settings, validate_settings
from gitfs.errors import ConfigError


def test_defaults() -> None:
    settings = get_settings()
    assert settings.git_binary == "git"
    assert settings.stable_cache_seconds == 3600.0
    assert settings.volatile_cache_seconds == 0.1
    assert settings.maintenance_args == ["gc"]
    validate_settings(settings)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITFS_GIT_BINARY", "/usr/local/bin/git")
    monkeypatch.setenv("GITFS_VOLATILE_CACHE_SECONDS", "0.5")
    monkeypatch.setenv("GITFS_MAINTENANCE_COMMAND", "pack-refs --all")

    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.git_binary == "/usr/local/bin/git"
        assert settings.volatile_cache_seconds == 0.5
        assert settings.maintenance_args == ["pack-refs", "--all"]
    finally:
        get_settings.cache_clear()


def test_validate_rejects_non_positive_lifetime() -> None:
    settings = Settings(GITFS_STABLE_CACHE_SECONDS=0)
    with pytest.raises(ConfigError, match="GITFS_STABLE_CACHE_SECONDS"):
        validate_settings(settings)


def test_validate_rejects_volatile_longer_than_stable() -> None:
    settings = Settings(GITFS_STABLE_CACHE_SECONDS=1, GITFS_VOLATILE_CACHE_SECONDS=5)
    with pytest.raises(ConfigError, match="must not exceed"):
        validate_settings(settings)


def test_validate_rejects_empty_commands() -> None:
    settings = Settings(GITFS_GIT_BINARY=" ", GITFS_MAINTENANCE_COMMAND="")
    with pytest.raises(ConfigError) as excinfo:
        validate_settings(settings)
    assert "GITFS_GIT_BINARY" in str(excinfo.value)
    assert "GITFS_MAINTENANCE_COMMAND" in str(excinfo.value)
