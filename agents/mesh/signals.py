# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Execution Signals

Internal lifecycle signals raised while a plan is being produced, and the
execution context that carries the signal listener through the pipeline.

Signals form one closed family of frozen dataclasses. The event translator
turns them into the client-facing event vocabulary; everything not meant for
clients is only logged there.

The active ExecutionContext is exposed through the `current_context` context
variable so that code deep in the call stack (LangChain callbacks, agent
connections) can emit signals without threading the context through every
signature.
"""

import copy
import logging
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional
from uuid import UUID

from langchain_core.callbacks import AsyncCallbackHandler
from langchain_core.outputs import LLMResult

logger = logging.getLogger("tripmesh.mesh.signals")


@dataclass(frozen=True)
class Signal:
    run_id: str


@dataclass(frozen=True)
class AgentStarting(Signal):
    agent_id: str


@dataclass(frozen=True)
class AgentCompleted(Signal):
    agent_id: str
    result: Any


@dataclass(frozen=True)
class AgentExecutionFailed(Signal):
    agent_id: str
    error: str


@dataclass(frozen=True)
class StrategyStarting(Signal):
    name: str


@dataclass(frozen=True)
class StrategyCompleted(Signal):
    name: str


@dataclass(frozen=True)
class NodeStarting(Signal):
    node: str


@dataclass(frozen=True)
class NodeCompleted(Signal):
    node: str


@dataclass(frozen=True)
class NodeFailed(Signal):
    node: str
    error: str


@dataclass(frozen=True)
class LLMCallStarting(Signal):
    model: Optional[str] = None


@dataclass(frozen=True)
class LLMCallCompleted(Signal):
    texts: tuple[str, ...] = ()


@dataclass(frozen=True)
class ToolCallStarting(Signal):
    call_id: str
    tool_name: str
    args: Any = None


@dataclass(frozen=True)
class ToolCallCompleted(Signal):
    call_id: str
    tool_name: str
    result: Any = None


@dataclass(frozen=True)
class ToolCallFailed(Signal):
    call_id: str
    tool_name: str
    error: str


@dataclass(frozen=True)
class ProgressNote(Signal):
    text: str


SignalListener = Callable[[Signal], None]


@dataclass(frozen=True)
class ExecutionContext:
    """
    Immutable per-run context handed to each pipeline stage.

    Attributes:
        run_id: Identifier of the orchestrator run
        listener: Optional callback receiving signals
        branch: Path of fan-out branch indexes leading to this context
        checkpoint: Persisted execution state, if the run is checkpointed
    """
    run_id: str
    listener: Optional[SignalListener] = None
    branch: tuple[int, ...] = ()
    checkpoint: Any = field(default=None, compare=False)

    def fork(self, index: int) -> "ExecutionContext":
        """Derive an isolated context for fan-out branch `index`."""
        return replace(
            self,
            branch=self.branch + (index,),
            checkpoint=copy.deepcopy(self.checkpoint),
        )

    def emit(self, signal: Signal) -> None:
        """Deliver a signal to the listener. Listener failures are logged, never raised."""
        if self.listener is None:
            return
        try:
            self.listener(signal)
        except Exception as e:
            logger.warning(f"Signal listener failed on {type(signal).__name__}: {e}")


current_context: ContextVar[Optional[ExecutionContext]] = ContextVar(
    "tripmesh_execution_context", default=None
)


def emit(signal: Signal) -> None:
    """Emit through the active context, if any."""
    context = current_context.get()
    if context is not None:
        context.emit(signal)


class SignalCallbackHandler(AsyncCallbackHandler):
    """Reports LangChain model and tool activity as execution signals."""

    def __init__(self, context: ExecutionContext):
        self.context = context
        self._tool_names: dict[UUID, str] = {}

    async def on_chat_model_start(self, serialized, messages, *, run_id: UUID, **kwargs: Any) -> None:
        model = (serialized or {}).get("name")
        self.context.emit(LLMCallStarting(run_id=self.context.run_id, model=model))

    async def on_llm_end(self, response: LLMResult, *, run_id: UUID, **kwargs: Any) -> None:
        texts = tuple(
            generation.text
            for generations in response.generations
            for generation in generations
            if generation.text
        )
        self.context.emit(LLMCallCompleted(run_id=self.context.run_id, texts=texts))

    async def on_tool_start(self, serialized, input_str: str, *, run_id: UUID, **kwargs: Any) -> None:
        name = (serialized or {}).get("name") or "tool"
        self._tool_names[run_id] = name
        args = kwargs.get("inputs") or input_str
        self.context.emit(
            ToolCallStarting(run_id=self.context.run_id, call_id=str(run_id), tool_name=name, args=args)
        )

    async def on_tool_end(self, output: Any, *, run_id: UUID, **kwargs: Any) -> None:
        name = self._tool_names.pop(run_id, "tool")
        self.context.emit(
            ToolCallCompleted(run_id=self.context.run_id, call_id=str(run_id), tool_name=name, result=output)
        )

    async def on_tool_error(self, error: BaseException, *, run_id: UUID, **kwargs: Any) -> None:
        name = self._tool_names.pop(run_id, "tool")
        self.context.emit(
            ToolCallFailed(run_id=self.context.run_id, call_id=str(run_id), tool_name=name, error=str(error))
        )
