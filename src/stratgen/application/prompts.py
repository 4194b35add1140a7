"""Prompt strings and the strategy response schema.

The strategy and research prompts ask for camelCase JSON matching
``stratgen.domain.models``; replies are parsed with ``extract_json`` so a
model that wraps or repeats its JSON is still understood.
"""

from __future__ import annotations

from typing import Any, Dict

from stratgen.domain import UserInput

SYSTEM_PROMPT_STRATEGIST = (
    "You are an expert business strategist. You analyze markets, budgets, and "
    "demographics to create actionable, high-quality business plans."
)

STRATEGY_PROMPT = """\
Act as a world-class business consultant. Generate a comprehensive business strategy for a client with the following details:
- Industry/Sector: {industry}
- Business Description: {description}
- Customer Geography: {location_type}
- Market Location/Reach: {market_reach}
- Budget: {budget}
- Target Customers (Type/Demographics): {target_customers}

Provide the output in strict JSON format with the keys "executiveSummary",
"businessModel", "marketingPlan", "swot", "roadmap" and "risks".
Ensure the "marketingPlan.channels" includes an "estimatedBudgetPercentage" (number between 0-100) that sums to roughly 100.
Ensure "risks" includes a "probability" score from 1 to 10 (10 being highest probability).
"""

COMPETITOR_PROMPT = """\
Act as a world-class business consultant.
Analyze the following business idea and generate a real-world competitor analysis using web search.

Business Idea Context:
- Industry/Sector: {industry}
- Description: {description}
- Geography: {location_type}
- Market Location: {market_reach}
- Budget: {budget}
- Target Customers: {target_customers}

TASKS:
1. Identify Top 3 Companies actively working in this space (relevant to the location/geography if possible).
2. Perform a Deep-Dive Analysis of the Top 1 Competitor.

Return the output as a VALID JSON object with this exact structure:
{{
  "topCompetitors": [
    {{ "name": "...", "description": "..." }}
  ],
  "deepDive": {{
    "companyName": "...",
    "strategy": "...",
    "revenueModel": "...",
    "strengths": ["..."],
    "weaknesses": ["..."],
    "opportunities": ["..."]
  }}
}}

IMPORTANT: Return ONLY the JSON string. Do not use Markdown formatting like ```json.
"""

CHAT_SYSTEM_PROMPT = """\
You are StratGen AI Assistant, an intelligent business strategy partner.

Your goal is to help the user understand, refine, and execute their business strategy based on the data provided below.

CURRENT BUSINESS STRATEGY CONTEXT:
{context}

Your Rules:
- Answer questions specifically about the strategy above.
- Be practical, clear, and action-oriented.
- If the user uploads an image, analyze it in the context of the strategy.
"""


def _fields(user_input: UserInput) -> Dict[str, str]:
    return {
        "industry": user_input.industry,
        "description": user_input.description or "N/A",
        "location_type": user_input.location_type,
        "market_reach": user_input.market_reach,
        "budget": user_input.budget,
        "target_customers": user_input.target_customers,
    }


def strategy_prompt(user_input: UserInput) -> str:
    return STRATEGY_PROMPT.format(**_fields(user_input))


def competitor_prompt(user_input: UserInput) -> str:
    return COMPETITOR_PROMPT.format(**_fields(user_input))


def _string_list() -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}}


STRATEGY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "executiveSummary": {
            "type": "string",
            "description": "A brief 2-3 sentence summary of the strategy.",
        },
        "businessModel": {
            "type": "object",
            "properties": {
                "valueProposition": {"type": "string"},
                "revenueStreams": _string_list(),
                "costStructure": _string_list(),
                "keyPartners": _string_list(),
            },
            "required": ["valueProposition", "revenueStreams", "costStructure", "keyPartners"],
        },
        "marketingPlan": {
            "type": "object",
            "properties": {
                "strategyOverview": {"type": "string"},
                "targetAudienceAnalysis": {"type": "string"},
                "channels": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "description": {"type": "string"},
                            "estimatedBudgetPercentage": {
                                "type": "number",
                                "description": "Percentage of budget allocated (0-100)",
                            },
                        },
                    },
                },
            },
            "required": ["strategyOverview", "targetAudienceAnalysis", "channels"],
        },
        "swot": {
            "type": "object",
            "properties": {
                "strengths": _string_list(),
                "weaknesses": _string_list(),
                "opportunities": _string_list(),
                "threats": _string_list(),
            },
            "required": ["strengths", "weaknesses", "opportunities", "threats"],
        },
        "roadmap": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "phaseName": {"type": "string"},
                    "duration": {"type": "string"},
                    "focusArea": {"type": "string"},
                    "milestones": _string_list(),
                },
            },
        },
        "risks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "riskName": {"type": "string"},
                    "impactLevel": {"type": "string", "enum": ["High", "Medium", "Low"]},
                    "probability": {"type": "number", "description": "Score 1-10"},
                    "mitigationStrategy": {"type": "string"},
                },
            },
        },
    },
    "required": ["executiveSummary", "businessModel", "marketingPlan", "swot", "roadmap", "risks"],
}

STRATEGY_RESPONSE_FORMAT: Dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {"name": "business_strategy", "schema": STRATEGY_SCHEMA},
}
