"""Configuration: schema, loading from env/file, and shared constants."""

from .schema import DEFAULT_CONFIG, ModelConfig, StratGenConfig
from .loader import load_config
from .constants import (
    LLM_CHAT_DEFAULT_TIMEOUT_S,
    MAX_RAW_REPLY_IN_LOG_CHARS,
    PROFILE_CHAT,
    PROFILE_RESEARCH,
    PROFILE_STRATEGY,
    PROFILE_THINKING,
)

get_config = load_config  # alias

__all__ = [
    "DEFAULT_CONFIG", "ModelConfig", "StratGenConfig",
    "load_config", "get_config",
    "LLM_CHAT_DEFAULT_TIMEOUT_S", "MAX_RAW_REPLY_IN_LOG_CHARS",
    "PROFILE_CHAT", "PROFILE_RESEARCH", "PROFILE_STRATEGY", "PROFILE_THINKING",
]
