# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Parallel Fan-out

Runs a producer once, splits its output into items and processes every item
in its own asyncio task, then merges the results back in input order.

Branches are supervised, not fail-fast: a failing branch never cancels its
siblings. Every branch settles before the fan-out reports, and a failure is
attributed to the lowest failing input index.

Example:
    research = fan_out(plan_route, lambda ideas: ideas.points_of_interest, research_point, limit=8)
    results = await research(form, ExecutionContext(run_id="..."))
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

from agents.mesh.signals import ExecutionContext, current_context

logger = logging.getLogger("tripmesh.mesh.parallel")

InputT = TypeVar("InputT")
ProducedT = TypeVar("ProducedT")
ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


class ConfigurationError(Exception):
    """Raised when the pipeline is wired in a way it cannot execute."""
    pass


class CheckpointNotSupportedError(ConfigurationError):
    """A branch produced no result while its context carries checkpoint state."""
    pass


class FanOutError(Exception):
    """
    Raised after all branches settled when at least one of them failed.

    Attributes:
        index: Input index of the reported (lowest failing) branch
        errors: Every branch failure keyed by input index
    """

    def __init__(self, name: str, index: int, errors: dict[int, BaseException]):
        self.name = name
        self.index = index
        self.errors = errors
        cause = errors[index]
        super().__init__(f"{name}: branch {index} failed: {cause}")


def fan_out(
    producer: Callable[[InputT, ExecutionContext], Awaitable[ProducedT]],
    split: Callable[[ProducedT], Iterable[ItemT]],
    worker: Callable[[ItemT, ExecutionContext], Awaitable[Optional[ResultT]]],
    *,
    limit: Optional[int] = None,
    name: str = "fan-out",
) -> Callable[[InputT, ExecutionContext], Awaitable[list[ResultT]]]:
    """
    Compose producer, split and worker into one awaitable stage.

    Args:
        producer: Runs once; its failure propagates before any branch starts
        split: Turns the producer's output into the items to process
        worker: Processes one item with its own forked context
        limit: Optional maximum number of branches running at the same time
        name: Label used in logs and errors

    Returns:
        Async callable `(value, context) -> list of results in input order`

    Raises:
        ConfigurationError: If limit is negative
    """
    if limit is not None and limit < 0:
        raise ConfigurationError(f"{name}: limit must be zero or positive, got {limit}")

    async def run(value: InputT, context: ExecutionContext) -> list[ResultT]:
        produced = await producer(value, context)
        items = list(split(produced))
        logger.info(f"{name}: dispatching {len(items)} branch(es)")

        semaphore = asyncio.Semaphore(limit) if limit else None

        async def branch(index: int, item: ItemT) -> Optional[ResultT]:
            branch_context = context.fork(index)
            # Each task runs in a copy of the caller's contextvars
            current_context.set(branch_context)
            if semaphore is None:
                result = await worker(item, branch_context)
            else:
                async with semaphore:
                    result = await worker(item, branch_context)
            if result is None and branch_context.checkpoint is not None:
                raise CheckpointNotSupportedError(
                    f"{name}: branch {index} returned no result but checkpointing is enabled"
                )
            return result

        tasks = [asyncio.create_task(branch(i, item)) for i, item in enumerate(items)]
        # Cancelling this gather cancels every in-flight branch
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        errors = {i: o for i, o in enumerate(outcomes) if isinstance(o, BaseException)}
        if errors:
            index = min(errors)
            for i, error in errors.items():
                logger.error(f"{name}: branch {i} failed: {error!r}")
            first = errors[index]
            if isinstance(first, ConfigurationError):
                raise first
            raise FanOutError(name, index, errors) from first

        results: list[ResultT] = []
        for i, outcome in enumerate(outcomes):
            if outcome is None:
                logger.warning(f"{name}: branch {i} produced no result, dropping it")
                continue
            results.append(outcome)
        logger.info(f"{name}: merged {len(results)} result(s)")
        return results

    return run
