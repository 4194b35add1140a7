"""Pytest fixtures and helpers for stratgen tests."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from stratgen.domain import LLMResponse


class FakeChatClient:
    """ChatClient stand-in: returns queued responses and records every call."""

    def __init__(self, *responses: LLMResponse) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def chat(self, messages, model, **kwargs) -> LLMResponse:
        self.calls.append({"messages": messages, "model": model, **kwargs})
        if not self._responses:
            return LLMResponse(content="")
        return self._responses.pop(0)


def factory_by_model(clients: Dict[str, FakeChatClient], default: Optional[FakeChatClient] = None):
    """Chat client factory keyed by ModelConfig.model."""
    def _factory(model_config):
        return clients.get(model_config.model, default)
    return _factory


@pytest.fixture(autouse=True)
def _reset_config_cache():
    """Clear the load_config LRU cache and reset _env before (and after) every test."""
    from stratgen.config import loader as config_loader
    config_loader.load_config.cache_clear()
    config_loader._env = None
    yield
    config_loader.load_config.cache_clear()
    config_loader._env = None
