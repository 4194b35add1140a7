"""Generate a business strategy report: core strategy + competitor analysis.

Both halves are requested concurrently from the model and merged into one
``BusinessStrategy``.  Model replies go through ``extract_json``; the core
strategy is required (failure raises ``StrategyGenerationError``) while the
competitor analysis degrades to placeholder values.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

from stratgen.application.completion import complete
from stratgen.application.json_parsing import extract_json
from stratgen.application.ports import ChatClientFactory
from stratgen.application.prompts import (
    STRATEGY_RESPONSE_FORMAT,
    SYSTEM_PROMPT_STRATEGIST,
    competitor_prompt,
    strategy_prompt,
)
from stratgen.config.constants import MAX_RAW_REPLY_IN_LOG_CHARS, PROFILE_RESEARCH, PROFILE_STRATEGY
from stratgen.config.schema import StratGenConfig
from stratgen.domain import (
    BusinessStrategy,
    CompetitorAnalysis,
    ExtractionError,
    StrategyGenerationError,
    UserInput,
)

logger = logging.getLogger(__name__)


async def generate_core_strategy(
    user_input: UserInput,
    *,
    chat_client_factory: ChatClientFactory,
    config: StratGenConfig,
) -> BusinessStrategy:
    """Ask the strategy model for the core report (everything except competitors).

    Raises:
        StrategyGenerationError: the model returned no text, or no JSON object
            could be recovered from it.
    """
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT_STRATEGIST},
        {"role": "user", "content": strategy_prompt(user_input)},
    ]
    response = await complete(
        chat_client_factory,
        config.model_for(PROFILE_STRATEGY),
        messages,
        response_format=STRATEGY_RESPONSE_FORMAT if config.structured_output else None,
    )
    text = response.text
    if not text.strip():
        raise StrategyGenerationError("No core strategy generated")

    try:
        data = extract_json(text)
    except ExtractionError as e:
        logger.error(
            "Failed to parse core strategy JSON (%s): %s",
            e.reason, text[:MAX_RAW_REPLY_IN_LOG_CHARS],
        )
        raise StrategyGenerationError("Failed to parse strategy data.") from e

    if not isinstance(data, dict):
        logger.error("Core strategy reply is not a JSON object: %s", type(data).__name__)
        raise StrategyGenerationError("Failed to parse strategy data.")
    return BusinessStrategy.from_json(data)


async def generate_competitor_analysis(
    user_input: UserInput,
    *,
    chat_client_factory: ChatClientFactory,
    config: StratGenConfig,
) -> CompetitorAnalysis:
    """Ask the research model for top competitors and a deep dive of the leader.

    Never fails on bad model output: an empty reply yields
    ``CompetitorAnalysis.not_found()`` and an unparseable one yields the
    "Analysis Unavailable" placeholder.  Grounding citations become ``sources``.
    """
    messages = [{"role": "user", "content": competitor_prompt(user_input)}]
    response = await complete(chat_client_factory, config.model_for(PROFILE_RESEARCH), messages)
    text = response.text
    if not text.strip():
        return CompetitorAnalysis.not_found()

    data: Any = {}
    try:
        data = extract_json(text)
    except ExtractionError as e:
        logger.error(
            "Failed to parse competitor JSON (%s): %s",
            e.reason, text[:MAX_RAW_REPLY_IN_LOG_CHARS],
        )
    return CompetitorAnalysis.from_json(data, response.sources)


async def generate_strategy(
    user_input: UserInput,
    *,
    chat_client_factory: ChatClientFactory,
    config: StratGenConfig,
) -> BusinessStrategy:
    """Generate the full report; both model calls run concurrently."""
    logger.info("Generating strategy industry=%r budget=%r", user_input.industry, user_input.budget)
    core, competitors = await asyncio.gather(
        generate_core_strategy(user_input, chat_client_factory=chat_client_factory, config=config),
        generate_competitor_analysis(user_input, chat_client_factory=chat_client_factory, config=config),
    )
    return dataclasses.replace(core, competitor_analysis=competitors)
