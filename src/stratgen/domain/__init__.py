"""Domain layer: report records, chat messages, errors. No I/O."""

from .models import (
    SWOT,
    BusinessModel,
    BusinessStrategy,
    ChatMessage,
    ChatReply,
    Competitor,
    CompetitorAnalysis,
    DeepDiveAnalysis,
    LLMResponse,
    MarketingChannel,
    MarketingPlan,
    Risk,
    RoadmapPhase,
    Source,
    UserInput,
)
from .errors import ExtractionError, StratGenError, StrategyGenerationError

__all__ = [
    "SWOT",
    "BusinessModel",
    "BusinessStrategy",
    "ChatMessage",
    "ChatReply",
    "Competitor",
    "CompetitorAnalysis",
    "DeepDiveAnalysis",
    "LLMResponse",
    "MarketingChannel",
    "MarketingPlan",
    "Risk",
    "RoadmapPhase",
    "Source",
    "UserInput",
    "ExtractionError",
    "StratGenError",
    "StrategyGenerationError",
]
