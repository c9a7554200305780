"""Value types shared by the gitfs readers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from gitfs.errors import InvalidVersionError

LIVE = "fs"

_COMMIT_ID_RE = re.compile(r"[0-9a-f]{40}")

V = TypeVar("V")


def is_commit_id(value: str) -> bool:
    return bool(_COMMIT_ID_RE.fullmatch(value))


@dataclass(frozen=True, slots=True)
class Revision:
    """Either the live working copy (``id is None``) or an exact commit id."""

    id: str | None = None

    def __post_init__(self) -> None:
        if self.id is None:
            return
        if not isinstance(self.id, str) or not is_commit_id(self.id):
            raise InvalidVersionError(f"Invalid version {self.id}", revision=str(self.id))

    @classmethod
    def live(cls) -> Revision:
        return cls(None)

    @classmethod
    def fixed(cls, commit_id: str) -> Revision:
        return cls(commit_id)

    @classmethod
    def parse(cls, value: Revision | str) -> Revision:
        if isinstance(value, Revision):
            return value
        if not isinstance(value, str):
            raise InvalidVersionError(f"Invalid version {value!r}")
        if value == LIVE:
            return cls.live()
        return cls.fixed(value)

    @property
    def is_live(self) -> bool:
        return self.id is None

    def __str__(self) -> str:
        return LIVE if self.id is None else self.id


@dataclass(slots=True)
class DirListing:
    files: list[str] = field(default_factory=list)
    dirs: list[str] = field(default_factory=list)

    @property
    def entries(self) -> list[str]:
        return [*self.files, *self.dirs]


@dataclass(slots=True)
class LogEntry:
    commit: str
    message: str
    headers: dict[str, str] = field(default_factory=dict)

    def __getitem__(self, name: str) -> str:
        if name == "message":
            return self.message
        return self.headers[name]

    def get(self, name: str, default: str | None = None) -> str | None:
        try:
            return self[name]
        except KeyError:
            return default

    def as_dict(self) -> dict[str, str]:
        return {**self.headers, "message": self.message}


@dataclass(slots=True)
class CacheEntry(Generic[V]):
    key: tuple[str, ...]
    value: V
    expires_at: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at
