"""Tests for strategy generation (fake chat clients, no network)."""
from __future__ import annotations

import json

import httpx
import pytest

from conftest import FakeChatClient, factory_by_model
from stratgen.application.generate_strategy import (
    generate_competitor_analysis,
    generate_core_strategy,
    generate_strategy,
)
from stratgen.application.prompts import STRATEGY_RESPONSE_FORMAT
from stratgen.config.schema import ModelConfig, StratGenConfig
from stratgen.domain import LLMResponse, Source, StrategyGenerationError, UserInput

CORE = {
    "executiveSummary": "Kiosk plan",
    "businessModel": {"valueProposition": "Speed", "revenueStreams": ["Coffee"], "costStructure": [], "keyPartners": []},
    "marketingPlan": {"strategyOverview": "Local", "targetAudienceAnalysis": "Commuters", "channels": []},
    "swot": {"strengths": [], "weaknesses": [], "opportunities": [], "threats": []},
    "roadmap": [],
    "risks": [{"riskName": "Rent", "impactLevel": "Low", "probability": 2, "mitigationStrategy": "Lease"}],
}

COMPETITORS = {
    "topCompetitors": [{"name": "BeanCo", "description": "Chain"}],
    "deepDive": {"companyName": "BeanCo", "strategy": "Volume", "revenueModel": "Retail",
                 "strengths": ["Scale"], "weaknesses": [], "opportunities": []},
}


def _config(structured_output: bool = True) -> StratGenConfig:
    return StratGenConfig(
        models={
            "strategy": ModelConfig(base_url="http://llm/v1", model="strategy-model", max_tokens=4000),
            "research": ModelConfig(base_url="http://llm/v1", model="research-model",
                                    extra_body={"tools": [{"google_search": {}}]}),
        },
        structured_output=structured_output,
    )


def _input() -> UserInput:
    return UserInput(
        industry="Coffee",
        description="",
        location_type="Local",
        market_reach="Lisbon",
        budget="$40k",
        target_customers="Commuters",
    )


# ---------------------------------------------------------------------------
# generate_core_strategy
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_core_strategy_parses_fenced_reply_and_sends_schema():
    client = FakeChatClient(LLMResponse(content=f"```json\n{json.dumps(CORE)}\n```"))
    strategy = await generate_core_strategy(
        _input(), chat_client_factory=lambda cfg: client, config=_config(),
    )
    assert strategy.executive_summary == "Kiosk plan"
    assert strategy.risks[0].impact_level == "Low"

    call = client.calls[0]
    assert call["model"] == "strategy-model"
    assert call["max_tokens"] == 4000
    assert call["response_format"] == STRATEGY_RESPONSE_FORMAT
    assert call["messages"][0]["role"] == "system"
    prompt = call["messages"][1]["content"]
    assert "Industry/Sector: Coffee" in prompt
    assert "Business Description: N/A" in prompt


@pytest.mark.asyncio
async def test_core_strategy_without_structured_output():
    client = FakeChatClient(LLMResponse(content=json.dumps(CORE)))
    await generate_core_strategy(
        _input(), chat_client_factory=lambda cfg: client, config=_config(structured_output=False),
    )
    assert client.calls[0]["response_format"] is None


@pytest.mark.asyncio
async def test_core_strategy_uses_last_object_when_model_self_corrects():
    draft = dict(CORE, executiveSummary="Draft")
    text = f"Draft:\n{json.dumps(draft)}\nCorrected:\n{json.dumps(CORE)}"
    client = FakeChatClient(LLMResponse(content=text))
    strategy = await generate_core_strategy(
        _input(), chat_client_factory=lambda cfg: client, config=_config(),
    )
    assert strategy.executive_summary == "Kiosk plan"


@pytest.mark.asyncio
async def test_core_strategy_empty_reply_raises():
    client = FakeChatClient(LLMResponse(content=None))
    with pytest.raises(StrategyGenerationError, match="No core strategy generated"):
        await generate_core_strategy(_input(), chat_client_factory=lambda cfg: client, config=_config())


@pytest.mark.asyncio
async def test_core_strategy_unparseable_reply_raises():
    client = FakeChatClient(LLMResponse(content="I'm sorry, I can't help with that."))
    with pytest.raises(StrategyGenerationError, match="Failed to parse strategy data"):
        await generate_core_strategy(_input(), chat_client_factory=lambda cfg: client, config=_config())


@pytest.mark.asyncio
async def test_core_strategy_non_object_reply_raises():
    client = FakeChatClient(LLMResponse(content="[1, 2, 3]"))
    with pytest.raises(StrategyGenerationError):
        await generate_core_strategy(_input(), chat_client_factory=lambda cfg: client, config=_config())


@pytest.mark.asyncio
async def test_core_strategy_huge_integer_falls_back_to_default():
    text = '{"risks": [{"riskName": "Rent", "probability": ' + "9" * 400 + "}]}"
    client = FakeChatClient(LLMResponse(content=text))
    strategy = await generate_core_strategy(_input(), chat_client_factory=lambda cfg: client, config=_config())
    assert strategy.risks[0].risk_name == "Rent"
    assert strategy.risks[0].probability == 1.0


# ---------------------------------------------------------------------------
# generate_competitor_analysis
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_competitor_analysis_with_sources_and_extra_body():
    sources = [Source(title="BeanCo", url="https://beanco.example")]
    client = FakeChatClient(LLMResponse(content=f"Here you go: {json.dumps(COMPETITORS)}", sources=sources))
    ca = await generate_competitor_analysis(_input(), chat_client_factory=lambda cfg: client, config=_config())
    assert ca.top_competitors[0].name == "BeanCo"
    assert ca.deep_dive.strategy == "Volume"
    assert ca.sources == sources
    assert client.calls[0]["model"] == "research-model"
    assert client.calls[0]["extra_body"] == {"tools": [{"google_search": {}}]}
    assert client.calls[0]["response_format"] is None


@pytest.mark.asyncio
async def test_competitor_analysis_empty_reply_is_not_found():
    client = FakeChatClient(LLMResponse(content=""))
    ca = await generate_competitor_analysis(_input(), chat_client_factory=lambda cfg: client, config=_config())
    assert ca.deep_dive.company_name == "Not Found"
    assert ca.top_competitors == []


@pytest.mark.asyncio
async def test_competitor_analysis_unparseable_reply_is_unavailable():
    client = FakeChatClient(LLMResponse(content="No competitors, sorry."))
    ca = await generate_competitor_analysis(_input(), chat_client_factory=lambda cfg: client, config=_config())
    assert ca.deep_dive.company_name == "Analysis Unavailable"
    assert ca.top_competitors == []


# ---------------------------------------------------------------------------
# generate_strategy
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_generate_strategy_merges_both_halves():
    factory = factory_by_model({
        "strategy-model": FakeChatClient(LLMResponse(content=json.dumps(CORE))),
        "research-model": FakeChatClient(LLMResponse(content=json.dumps(COMPETITORS))),
    })
    strategy = await generate_strategy(_input(), chat_client_factory=factory, config=_config())
    assert strategy.executive_summary == "Kiosk plan"
    assert strategy.competitor_analysis.deep_dive.company_name == "BeanCo"
    assert strategy.to_json()["competitorAnalysis"]["topCompetitors"] == [{"name": "BeanCo", "description": "Chain"}]


@pytest.mark.asyncio
async def test_generate_strategy_propagates_core_failure():
    factory = factory_by_model({
        "strategy-model": FakeChatClient(LLMResponse(content="nothing useful")),
        "research-model": FakeChatClient(LLMResponse(content=json.dumps(COMPETITORS))),
    })
    with pytest.raises(StrategyGenerationError):
        await generate_strategy(_input(), chat_client_factory=factory, config=_config())


@pytest.mark.asyncio
async def test_generate_strategy_propagates_transport_errors():
    class _Down:
        async def chat(self, messages, model, **kwargs):
            raise httpx.ConnectError("refused")

    with pytest.raises(httpx.ConnectError):
        await generate_strategy(_input(), chat_client_factory=lambda cfg: _Down(), config=_config())
