"""Named constants for values that appear in multiple places or need explanation."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Timeouts
# ---------------------------------------------------------------------------

# Default HTTP read timeout for a single chat-completions call when no
# ModelConfig.timeout_s is supplied.  Strategy generation produces a long JSON
# document, so the configured profiles default to a larger value.
LLM_CHAT_DEFAULT_TIMEOUT_S: float = 120.0

# ---------------------------------------------------------------------------
# Log size limits
# ---------------------------------------------------------------------------

# Maximum characters of a raw model reply copied into an error log line when
# extraction fails.  The full text can be tens of kilobytes.
MAX_RAW_REPLY_IN_LOG_CHARS: int = 500

# ---------------------------------------------------------------------------
# Model profiles
# ---------------------------------------------------------------------------

# Profile names looked up in StratGenConfig.models.
PROFILE_STRATEGY = "strategy"
PROFILE_RESEARCH = "research"
PROFILE_CHAT = "chat"
PROFILE_THINKING = "thinking"
