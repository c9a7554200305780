"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitfs.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    git_binary: str = Field(alias="GITFS_GIT_BINARY", default="git")
    # Fixed revisions never change; keep them for an hour.
    stable_cache_seconds: float = Field(alias="GITFS_STABLE_CACHE_SECONDS", default=3600.0)
    volatile_cache_seconds: float = Field(alias="GITFS_VOLATILE_CACHE_SECONDS", default=0.1)
    maintenance_command: str = Field(alias="GITFS_MAINTENANCE_COMMAND", default="gc")

    @property
    def maintenance_args(self) -> list[str]:
        return self.maintenance_command.split()


def validate_settings(settings: Settings) -> None:
    problems: list[str] = []
    if settings.stable_cache_seconds <= 0:
        problems.append("GITFS_STABLE_CACHE_SECONDS(must be positive)")
    if settings.volatile_cache_seconds <= 0:
        problems.append("GITFS_VOLATILE_CACHE_SECONDS(must be positive)")
    if settings.volatile_cache_seconds > settings.stable_cache_seconds:
        problems.append("GITFS_VOLATILE_CACHE_SECONDS(must not exceed stable lifetime)")
    if not settings.git_binary.strip():
        problems.append("GITFS_GIT_BINARY")
    if not settings.maintenance_args:
        problems.append("GITFS_MAINTENANCE_COMMAND")

    if problems:
        keys = ", ".join(sorted(set(problems)))
        raise ConfigError(f"invalid configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
