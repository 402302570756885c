# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Tests for the parallel fan-out."""
import asyncio

import pytest

from agents.mesh.parallel import (
    CheckpointNotSupportedError,
    ConfigurationError,
    FanOutError,
    fan_out,
)
from agents.mesh.signals import ExecutionContext, current_context


async def produce_range(count, context):
    return list(range(count))


def identity(items):
    return items


class TestFanOut:
    """Test fan-out scheduling, merging and failure handling."""

    def test_results_keep_input_order(self):
        async def worker(item, context):
            # Later items finish first
            await asyncio.sleep(0.01 * (5 - item))
            return item * 10

        run = fan_out(produce_range, identity, worker)
        results = asyncio.run(run(5, ExecutionContext(run_id="run-1")))

        assert results == [0, 10, 20, 30, 40]

    def test_worker_called_once_per_item(self):
        seen = []

        async def worker(item, context):
            seen.append(item)
            return item

        run = fan_out(produce_range, identity, worker)
        asyncio.run(run(4, ExecutionContext(run_id="run-1")))

        assert sorted(seen) == [0, 1, 2, 3]

    def test_limit_bounds_concurrent_branches(self):
        running = 0
        peak = 0

        async def worker(item, context):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return item

        run = fan_out(produce_range, identity, worker, limit=2)
        results = asyncio.run(run(6, ExecutionContext(run_id="run-1")))

        assert results == [0, 1, 2, 3, 4, 5]
        assert peak == 2

    def test_negative_limit_is_a_configuration_error(self):
        async def worker(item, context):
            return item

        with pytest.raises(ConfigurationError, match="limit must be zero or positive"):
            fan_out(produce_range, identity, worker, limit=-1)

    def test_zero_limit_runs_unbounded(self):
        async def worker(item, context):
            return item

        run = fan_out(produce_range, identity, worker, limit=0)

        assert asyncio.run(run(3, ExecutionContext(run_id="run-1"))) == [0, 1, 2]

    def test_failing_branch_lets_siblings_finish(self):
        finished = []

        async def worker(item, context):
            await asyncio.sleep(0.01 * item)
            if item == 1:
                raise ValueError("branch one broke")
            finished.append(item)
            return item

        run = fan_out(produce_range, identity, worker, name="research")

        with pytest.raises(FanOutError) as excinfo:
            asyncio.run(run(4, ExecutionContext(run_id="run-1")))

        assert sorted(finished) == [0, 2, 3]
        assert excinfo.value.index == 1
        assert isinstance(excinfo.value.__cause__, ValueError)
        assert "research" in str(excinfo.value)

    def test_lowest_failing_index_is_reported(self):
        async def worker(item, context):
            # Branch 3 fails before branch 2
            await asyncio.sleep(0.02 if item == 2 else 0)
            if item in (2, 3):
                raise RuntimeError(f"failed {item}")
            return item

        run = fan_out(produce_range, identity, worker)

        with pytest.raises(FanOutError) as excinfo:
            asyncio.run(run(4, ExecutionContext(run_id="run-1")))

        assert excinfo.value.index == 2
        assert set(excinfo.value.errors) == {2, 3}

    def test_producer_failure_starts_no_branch(self):
        calls = []

        async def producer(value, context):
            raise RuntimeError("no route")

        async def worker(item, context):
            calls.append(item)
            return item

        run = fan_out(producer, identity, worker)

        with pytest.raises(RuntimeError, match="no route"):
            asyncio.run(run(3, ExecutionContext(run_id="run-1")))
        assert calls == []

    def test_empty_results_are_dropped(self):
        async def worker(item, context):
            return None if item % 2 else item

        run = fan_out(produce_range, identity, worker)

        assert asyncio.run(run(5, ExecutionContext(run_id="run-1"))) == [0, 2, 4]

    def test_empty_result_with_checkpoint_is_a_configuration_error(self):
        async def worker(item, context):
            return None

        run = fan_out(produce_range, identity, worker)
        context = ExecutionContext(run_id="run-1", checkpoint={"step": 1})

        with pytest.raises(CheckpointNotSupportedError):
            asyncio.run(run(2, context))

    def test_branches_receive_forked_contexts(self):
        seen = {}

        async def worker(item, context):
            seen[item] = (context.branch, current_context.get() is context, context.checkpoint)
            context.checkpoint["visited"].append(item)
            return item

        run = fan_out(produce_range, identity, worker)
        parent = ExecutionContext(run_id="run-1", checkpoint={"visited": []})
        asyncio.run(run(3, parent))

        assert seen[0][0] == (0,)
        assert seen[2][0] == (2,)
        assert all(is_current for _, is_current, _ in seen.values())
        # Each branch works on its own copy of the checkpoint
        assert parent.checkpoint == {"visited": []}
        assert seen[1][2] == {"visited": [1]}
