"""Memoizing executor that coalesces concurrent identical requests.

Results keyed under a fixed revision live for the stable lifetime, results
keyed under the live working copy for the volatile one. While a request for
a key is outstanding, later callers for that key wait on the same future
instead of starting another producer. Failures are broadcast to every
waiter and are never cached.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from gitfs.types import CacheEntry, Revision

logger = logging.getLogger(__name__)

V = TypeVar("V")

CacheKey = tuple[str, ...]


class CoalescingCache:
    def __init__(
        self,
        stable_seconds: float,
        volatile_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stable_seconds = stable_seconds
        self._volatile_seconds = volatile_seconds
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry[Any]] = {}
        self._pending: dict[CacheKey, asyncio.Future[Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(operation: str, revision: Revision, *args: object) -> CacheKey:
        return (operation, str(revision), *(str(arg) for arg in args))

    def lifetime(self, revision: Revision) -> float:
        return self._volatile_seconds if revision.is_live else self._stable_seconds

    def pending(self, key: CacheKey) -> bool:
        return key in self._pending

    def lookup(self, key: CacheKey) -> CacheEntry[Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    async def run(
        self,
        operation: str,
        revision: Revision | str,
        *args: object,
        producer: Callable[[], Awaitable[V]],
    ) -> V:
        rev = Revision.parse(revision)
        key = self.make_key(operation, rev, *args)

        entry = self.lookup(key)
        if entry is not None:
            return entry.value

        group = self._pending.get(key)
        if group is not None:
            return await asyncio.shield(group)

        future: asyncio.Future[V] = asyncio.get_running_loop().create_future()
        self._pending[key] = future
        try:
            value = await producer()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # The leader re-raises below; waiters, if any, read it from the future.
            future.exception()
            raise
        else:
            self._entries[key] = CacheEntry(
                key=key, value=value, expires_at=self._clock() + self.lifetime(rev)
            )
            future.set_result(value)
            return value
        finally:
            del self._pending[key]

    def wrap(
        self,
        operation: str,
        fn: Callable[..., Awaitable[V]],
    ) -> Callable[..., Awaitable[V]]:
        """Return ``fn(revision, *args)`` routed through this cache."""

        async def wrapper(revision: Revision | str, *args: object) -> V:
            rev = Revision.parse(revision)
            return await self.run(operation, rev, *args, producer=lambda: fn(rev, *args))

        wrapper.__name__ = getattr(fn, "__name__", operation)
        wrapper.__doc__ = getattr(fn, "__doc__", None)
        return wrapper

    def invalidate(self, key: CacheKey) -> None:
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
