"""Configuration schema. Defaults point at the Gemini OpenAI-compatible endpoint; any
OpenAI-compatible backend works via base_url + model."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator

from .constants import PROFILE_CHAT, PROFILE_RESEARCH, PROFILE_STRATEGY, PROFILE_THINKING

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"


class ModelConfig(BaseModel):
    """LLM endpoint and model name (OpenAI chat-completions API)."""
    base_url: str = Field(..., description="e.g. https://generativelanguage.googleapis.com/v1beta/openai")
    model: str = Field(..., description="Model name (e.g. gemini-2.5-flash)")
    api_key: str = Field("", description="Bearer token; empty for local backends (no header sent).")
    backend: str = Field(
        "generic",
        description="LLM client backend. 'generic': OpenAI-compatible chat-completions client.",
    )
    temperature: float = 0.7
    top_p: float = 0.95
    max_tokens: int = 8192
    timeout_s: float = Field(default=300.0, description="HTTP read timeout for one chat request.")
    reasoning_effort: Optional[str] = Field(
        None,
        description="Sent as 'reasoning_effort' when set (e.g. 'high' for the thinking chat mode).",
    )
    extra_body: Dict[str, Any] = Field(
        default_factory=dict,
        description=(
            "Provider-specific fields merged into the request payload, e.g. search "
            "grounding options for the research profile."
        ),
    )


class StratGenConfig(BaseModel):
    """Top-level config: model profiles and output options."""
    models: Dict[str, ModelConfig]
    structured_output: bool = Field(
        True,
        description=(
            "Ask the strategy model for schema-constrained JSON via response_format. "
            "Disable for backends that reject json_schema response formats."
        ),
    )

    @model_validator(mode="after")
    def _check_strategy_profile(self) -> "StratGenConfig":
        if PROFILE_STRATEGY not in self.models:
            raise ValueError(
                f"StratGenConfig.models must define the {PROFILE_STRATEGY!r} profile; "
                f"got {sorted(self.models)}."
            )
        return self

    def model_for(self, profile: str) -> ModelConfig:
        """Return the ModelConfig for *profile*, falling back to the strategy profile."""
        return self.models.get(profile) or self.models[PROFILE_STRATEGY]


DEFAULT_CONFIG = StratGenConfig(
    models={
        PROFILE_STRATEGY: ModelConfig(base_url=GEMINI_OPENAI_BASE_URL, model="gemini-2.5-flash"),
        PROFILE_RESEARCH: ModelConfig(base_url=GEMINI_OPENAI_BASE_URL, model="gemini-2.5-flash"),
        PROFILE_CHAT: ModelConfig(base_url=GEMINI_OPENAI_BASE_URL, model="gemini-2.5-flash"),
        PROFILE_THINKING: ModelConfig(
            base_url=GEMINI_OPENAI_BASE_URL,
            model="gemini-2.5-pro",
            reasoning_effort="high",
            max_tokens=32768,
        ),
    },
)
