"""Ports (abstract interfaces) used by the application layer.

Each port is a ``Protocol`` so the application depends only on the *shape* of the
collaborator, not on a concrete implementation.  Infrastructure adapters must satisfy
these shapes; the application never imports from infrastructure.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Protocol

from stratgen.config.schema import ModelConfig
from stratgen.domain import LLMResponse


class ChatClient(Protocol):
    """LLM chat interface (OpenAI chat-completions API).

    ``response_format`` is passed through unchanged (e.g. a ``json_schema``
    format for structured output).  ``extra_body`` is merged into the request
    payload for provider-specific options such as search grounding.
    """

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        model: str,
        *,
        temperature: float = 0.7,
        top_p: float = 0.95,
        max_tokens: int = 8192,
        response_format: Optional[Dict[str, Any]] = None,
        reasoning_effort: Optional[str] = None,
        extra_body: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse: ...


ChatClientFactory = Callable[[ModelConfig], ChatClient]
