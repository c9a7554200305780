import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from gitfs.cache import CoalescingCache
from gitfs.process import GitProcess
from gitfs.repository import RepositoryHandle


class FakeProcess(GitProcess):
    """GitProcess that answers from a table instead of spawning git."""

    def __init__(self, handle: RepositoryHandle) -> None:
        super().__init__(handle)
        self.calls: list[list[str]] = []
        self.responses: dict[tuple[str, ...], bytes | Exception] = {}
        self.gate: asyncio.Event | None = None
        self.on_call: Callable[[list[str]], None] | None = None

    async def run(self, args: list[str], encoding: str | None = None) -> bytes | str:
        self.calls.append(list(args))
        if self.on_call is not None:
            self.on_call(args)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        response = self.responses.get(tuple(args), b"")
        if isinstance(response, Exception):
            raise response
        if encoding is None:
            return response
        return response.decode(encoding)


class ManualClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def cache(clock: ManualClock) -> CoalescingCache:
    return CoalescingCache(stable_seconds=3600.0, volatile_seconds=0.1, clock=clock)


@pytest.fixture
def handle(fake_repo: Path) -> RepositoryHandle:
    return RepositoryHandle.open(fake_repo)


@pytest.fixture
def fake_process(handle: RepositoryHandle) -> FakeProcess:
    return FakeProcess(handle)
