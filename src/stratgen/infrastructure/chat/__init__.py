"""LLM client factory: build the right ChatClient for a ModelConfig."""

from __future__ import annotations

from stratgen.application.ports import ChatClient
from stratgen.config.schema import ModelConfig


def build_chat_client(model_config: ModelConfig) -> ChatClient:
    """Return the ``ChatClient`` implementation for *model_config*.

    Dispatch is based on ``model_config.backend``:

    ``"generic"`` (default)
        :class:`~stratgen.infrastructure.chat.generic.GenericChatClient`:
        OpenAI-compatible client; works with Gemini's OpenAI endpoint, OpenAI,
        vLLM, LM Studio and Ollama's ``/v1`` API.

    Raises:
        ValueError: For unknown backend values.
    """
    backend = model_config.backend
    if backend == "generic":
        from stratgen.infrastructure.chat.generic import GenericChatClient
        return GenericChatClient(
            base_url=model_config.base_url,
            api_key=model_config.api_key,
            timeout_s=model_config.timeout_s,
        )
    raise ValueError(
        f"Unknown LLM backend {backend!r}. Supported backends: 'generic' (OpenAI-compatible)."
    )
