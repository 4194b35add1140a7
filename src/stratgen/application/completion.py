"""One chat-completions call against a configured model profile."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from stratgen.application.ports import ChatClientFactory
from stratgen.config.schema import ModelConfig
from stratgen.domain import LLMResponse


async def complete(
    chat_client_factory: ChatClientFactory,
    model_config: ModelConfig,
    messages: List[Dict[str, Any]],
    response_format: Optional[Dict[str, Any]] = None,
) -> LLMResponse:
    """Build a client for *model_config* and send *messages* with its sampling settings."""
    client = chat_client_factory(model_config)
    return await client.chat(
        messages,
        model_config.model,
        temperature=model_config.temperature,
        top_p=model_config.top_p,
        max_tokens=model_config.max_tokens,
        response_format=response_format,
        reasoning_effort=model_config.reasoning_effort,
        extra_body=model_config.extra_body or None,
    )
