"""Generic OpenAI-compatible chat client.

Works with any backend exposing ``POST /chat/completions`` in the standard
OpenAI format: Gemini's OpenAI-compatible endpoint, OpenAI, vLLM, LM Studio,
Ollama and others.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from stratgen.config.constants import LLM_CHAT_DEFAULT_TIMEOUT_S
from stratgen.domain import LLMResponse
from stratgen.infrastructure.chat._parser import parse_chat_response

logger = logging.getLogger(__name__)


class GenericChatClient:
    """Bare OpenAI-compatible chat client.

    Raises ``httpx.HTTPStatusError`` for any non-2xx response without
    retrying; retry policy belongs to the caller.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout_s: float = LLM_CHAT_DEFAULT_TIMEOUT_S,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout_s

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
    ) -> LLMResponse:
        url = f"{self._base_url}/chat/completions"
        headers: Dict[str, str] = {}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False,
            "temperature": temperature,
            "top_p": top_p,
            "max_tokens": max_tokens,
        }
        if response_format:
            payload["response_format"] = response_format
        if reasoning_effort:
            payload["reasoning_effort"] = reasoning_effort
        if extra_body:
            payload.update(extra_body)

        logger.debug(
            "POST %s model=%s messages=%d response_format=%s",
            url, model, len(messages), (response_format or {}).get("type"),
        )
        timeout = httpx.Timeout(self._timeout)
        async with httpx.AsyncClient(timeout=timeout) as client:
            r = await client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            return parse_chat_response(r.json())
