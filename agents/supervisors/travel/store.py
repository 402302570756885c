# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Keyed Store

In-memory map holding conversation and chat session state. Every update is a
single read-modify-write under one lock, so concurrent turns for the same key
never lose each other's changes.

Entries are evicted by age through an explicit background sweep
(run_sweeper) started by the supervisor app.
"""

import asyncio
import logging
import threading
import time
from typing import Callable, Generic, Iterable, Optional, TypeVar

logger = logging.getLogger("tripmesh.travel.supervisor.store")

V = TypeVar("V")
R = TypeVar("R")


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class KeyedStore(Generic[V]):
    """
    Lock-guarded map with atomic per-key updates.

    Args:
        name: Label used in logs
        created_at: Returns an entry's creation time (epoch ms), used for eviction
    """

    def __init__(self, name: str, created_at: Callable[[V], int]):
        self.name = name
        self._created_at = created_at
        self._items: dict[str, V] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._items.get(key)

    def put(self, key: str, value: V) -> V:
        with self._lock:
            self._items[key] = value
        return value

    def put_if_absent(self, key: str, value: V) -> V:
        """Store `value` unless the key exists; return the stored entry."""
        with self._lock:
            return self._items.setdefault(key, value)

    def modify(self, key: str, update: Callable[[Optional[V]], tuple[Optional[V], R]]) -> R:
        """
        Atomically read, transform and write one entry.

        `update` receives the current entry (None if absent) and returns the
        new entry (None leaves the store unchanged) and a result, which is
        returned to the caller.
        """
        with self._lock:
            new_value, result = update(self._items.get(key))
            if new_value is not None:
                self._items[key] = new_value
            return result

    def remove(self, key: str) -> Optional[V]:
        with self._lock:
            return self._items.pop(key, None)

    def evict_older_than(self, max_age_ms: int, now: Optional[int] = None) -> int:
        """Remove entries created more than `max_age_ms` ago. Returns the number removed."""
        now = now_ms() if now is None else now
        with self._lock:
            expired = [k for k, v in self._items.items() if now - self._created_at(v) > max_age_ms]
            for key in expired:
                del self._items[key]
        if expired:
            logger.info(f"[{self.name}] Evicted {len(expired)} entries older than {max_age_ms} ms")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._items


async def run_sweeper(
    cleanups: Iterable[Callable[[], int]],
    interval_seconds: float,
) -> None:
    """
    Periodically run the given eviction callbacks until cancelled.

    Args:
        cleanups: Callables evicting expired entries and returning the count
        interval_seconds: Delay between sweeps
    """
    cleanups = list(cleanups)
    logger.info(f"Starting store sweeper (every {interval_seconds}s)")
    while True:
        await asyncio.sleep(interval_seconds)
        for cleanup in cleanups:
            try:
                cleanup()
            except Exception as e:
                logger.error(f"Store sweep failed: {e}")
