# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Structured Generation

The language-model collaborator of the specialist agents: a prompt goes in,
an instance of the requested pydantic schema comes out.

LangChainGenerator is the production implementation. Without tools it uses
the model's structured output; with tools it runs a LangGraph ReAct agent
that may call the tools before answering in the requested schema.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Type, TypeVar

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.tools import BaseTool
from langgraph.prebuilt import create_react_agent
from pydantic import BaseModel

from agents.mesh.signals import SignalCallbackHandler, current_context
from common.llm import get_llm

logger = logging.getLogger("tripmesh.mesh.generation")

ModelT = TypeVar("ModelT", bound=BaseModel)

# Upper bound of model/tool round trips for a single request
MAX_AGENT_ITERATIONS = 15


class StructuredGenerator(ABC):
    """Interface: produce an instance of `schema` for `prompt`."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        schema: Type[ModelT],
        *,
        system: Optional[str] = None,
        tools: Sequence[BaseTool] = (),
    ) -> ModelT:
        raise NotImplementedError


class LangChainGenerator(StructuredGenerator):
    """Structured generation backed by the litellm chat model."""

    def __init__(self, model: Optional[str] = None):
        self.model = model

    def _config(self) -> dict:
        config = {"recursion_limit": 2 * MAX_AGENT_ITERATIONS + 1}
        context = current_context.get()
        if context is not None and context.listener is not None:
            config["callbacks"] = [SignalCallbackHandler(context)]
        return config

    async def generate(
        self,
        prompt: str,
        schema: Type[ModelT],
        *,
        system: Optional[str] = None,
        tools: Sequence[BaseTool] = (),
    ) -> ModelT:
        llm = get_llm(streaming=False, model=self.model)
        config = self._config()

        if tools:
            logger.info(f"Generating {schema.__name__} with tools: {[t.name for t in tools]}")
            react_agent = create_react_agent(
                llm,
                list(tools),
                prompt=system,
                response_format=schema,
            )
            state = await react_agent.ainvoke({"messages": [HumanMessage(content=prompt)]}, config)
            result = state["structured_response"]
        else:
            logger.info(f"Generating {schema.__name__}")
            messages = [SystemMessage(content=system)] if system else []
            messages.append(HumanMessage(content=prompt))
            result = await llm.with_structured_output(schema).ainvoke(messages, config)

        if not isinstance(result, schema):
            result = schema.model_validate(result)
        return result
