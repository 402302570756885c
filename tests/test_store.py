# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Tests for the keyed store and its sweeper."""
import asyncio
import threading

import pytest

from agents.supervisors.travel.store import KeyedStore, run_sweeper


def counter_store():
    return KeyedStore("counters", lambda value: 0)


class TestKeyedStore:
    """Test basic and atomic store operations."""

    def test_put_get_remove(self):
        store = counter_store()

        store.put("a", 1)

        assert store.get("a") == 1
        assert "a" in store
        assert len(store) == 1
        assert store.remove("a") == 1
        assert store.get("a") is None

    def test_put_if_absent_keeps_first_value(self):
        store = counter_store()

        assert store.put_if_absent("a", 1) == 1
        assert store.put_if_absent("a", 2) == 1

    def test_modify_returns_the_update_result(self):
        store = counter_store()
        store.put("a", 1)

        result = store.modify("a", lambda current: (current + 1, f"was {current}"))

        assert result == "was 1"
        assert store.get("a") == 2

    def test_modify_with_none_leaves_store_unchanged(self):
        store = counter_store()

        assert store.modify("missing", lambda current: (None, "skipped")) == "skipped"
        assert "missing" not in store

    def test_failed_update_changes_nothing(self):
        store = counter_store()
        store.put("a", 1)

        def update(current):
            raise KeyError("a")

        with pytest.raises(KeyError):
            store.modify("a", update)
        assert store.get("a") == 1

    def test_concurrent_updates_are_not_lost(self):
        store = counter_store()
        store.put("a", 0)

        def increment():
            for _ in range(200):
                store.modify("a", lambda current: (current + 1, None))

        threads = [threading.Thread(target=increment) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.get("a") == 1600

    def test_evict_older_than(self):
        store = KeyedStore("timed", lambda value: value)
        store.put("old", 1_000)
        store.put("new", 9_000)

        assert store.evict_older_than(5_000, now=10_000) == 1
        assert "old" not in store
        assert "new" in store


class TestSweeper:
    """Test the background eviction loop."""

    def test_sweeper_runs_cleanups_until_cancelled(self):
        calls = []

        def failing():
            raise RuntimeError("store unavailable")

        async def scenario():
            task = asyncio.create_task(run_sweeper([failing, lambda: calls.append(1) or 0], 0.01))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        # A failing cleanup does not stop the others
        assert len(calls) >= 1
