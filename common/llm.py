# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
LLM Factory

Creates LangChain chat models backed by litellm, so any provider litellm
supports can be selected through the LLM_MODEL setting.
"""

import logging

from langchain_litellm import ChatLiteLLM

from config.config import LLM_MODEL

logger = logging.getLogger("tripmesh.common.llm")


def get_llm(streaming: bool = True, model: str | None = None) -> ChatLiteLLM:
    """
    Build a chat model for the configured provider.

    Args:
        streaming: Whether the model should stream tokens
        model: Optional litellm model id overriding LLM_MODEL

    Returns:
        ChatLiteLLM instance usable with LangChain and LangGraph
    """
    model_name = model or LLM_MODEL
    logger.debug(f"Creating LLM client for model '{model_name}' (streaming={streaming})")
    return ChatLiteLLM(model=model_name, streaming=streaming)
