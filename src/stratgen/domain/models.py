"""Domain models: the strategy report, chat messages, LLMResponse. Pure data, no I/O.

Report records are built from the loosely-typed value returned by
``extract_json`` via ``from_json``.  Every field has an explicit default so a
model reply that omits or mistypes a field still yields a complete record;
``to_json`` produces the camelCase shape the prompts ask the model for.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

IMPACT_LEVELS = ("High", "Medium", "Low")


def _obj(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str(data: Dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _num(data: Dict[str, Any], key: str, default: float = 0.0) -> float:
    """Numeric field; NaN, infinities and out-of-range integers give *default*."""
    value = data.get(key)
    if isinstance(value, bool):
        return default
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip().rstrip("%"))
        else:
            return default
    except (ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _records(data: Dict[str, Any], key: str, factory) -> list:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [factory(item) for item in value if isinstance(item, dict)]


@dataclass
class UserInput:
    """What the user told us about their business."""
    industry: str
    description: str = ""
    location_type: str = ""
    market_reach: str = ""
    budget: str = ""
    target_customers: str = ""

    def to_json(self) -> Dict[str, Any]:
        return {
            "industry": self.industry,
            "description": self.description,
            "locationType": self.location_type,
            "marketReach": self.market_reach,
            "budget": self.budget,
            "targetCustomers": self.target_customers,
        }


@dataclass
class BusinessModel:
    value_proposition: str = ""
    revenue_streams: List[str] = field(default_factory=list)
    cost_structure: List[str] = field(default_factory=list)
    key_partners: List[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: Any) -> "BusinessModel":
        data = _obj(value)
        return cls(
            value_proposition=_str(data, "valueProposition"),
            revenue_streams=_str_list(data, "revenueStreams"),
            cost_structure=_str_list(data, "costStructure"),
            key_partners=_str_list(data, "keyPartners"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "valueProposition": self.value_proposition,
            "revenueStreams": list(self.revenue_streams),
            "costStructure": list(self.cost_structure),
            "keyPartners": list(self.key_partners),
        }


@dataclass
class MarketingChannel:
    name: str = ""
    description: str = ""
    estimated_budget_percentage: float = 0.0  # 0-100

    @classmethod
    def from_json(cls, value: Any) -> "MarketingChannel":
        data = _obj(value)
        return cls(
            name=_str(data, "name"),
            description=_str(data, "description"),
            estimated_budget_percentage=_clamp(_num(data, "estimatedBudgetPercentage"), 0.0, 100.0),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "estimatedBudgetPercentage": self.estimated_budget_percentage,
        }


@dataclass
class MarketingPlan:
    strategy_overview: str = ""
    target_audience_analysis: str = ""
    channels: List[MarketingChannel] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: Any) -> "MarketingPlan":
        data = _obj(value)
        return cls(
            strategy_overview=_str(data, "strategyOverview"),
            target_audience_analysis=_str(data, "targetAudienceAnalysis"),
            channels=_records(data, "channels", MarketingChannel.from_json),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "strategyOverview": self.strategy_overview,
            "targetAudienceAnalysis": self.target_audience_analysis,
            "channels": [c.to_json() for c in self.channels],
        }


@dataclass
class SWOT:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    threats: List[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: Any) -> "SWOT":
        data = _obj(value)
        return cls(
            strengths=_str_list(data, "strengths"),
            weaknesses=_str_list(data, "weaknesses"),
            opportunities=_str_list(data, "opportunities"),
            threats=_str_list(data, "threats"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "opportunities": list(self.opportunities),
            "threats": list(self.threats),
        }


@dataclass
class RoadmapPhase:
    phase_name: str = ""
    duration: str = ""
    milestones: List[str] = field(default_factory=list)
    focus_area: str = ""

    @classmethod
    def from_json(cls, value: Any) -> "RoadmapPhase":
        data = _obj(value)
        return cls(
            phase_name=_str(data, "phaseName"),
            duration=_str(data, "duration"),
            milestones=_str_list(data, "milestones"),
            focus_area=_str(data, "focusArea"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "phaseName": self.phase_name,
            "duration": self.duration,
            "milestones": list(self.milestones),
            "focusArea": self.focus_area,
        }


@dataclass
class Risk:
    """A business risk.  ``impact_level`` is one of IMPACT_LEVELS; ``probability`` is 1-10."""
    risk_name: str = ""
    impact_level: str = "Medium"
    probability: float = 1.0
    mitigation_strategy: str = ""

    @classmethod
    def from_json(cls, value: Any) -> "Risk":
        data = _obj(value)
        level = _str(data, "impactLevel").strip().capitalize()
        return cls(
            risk_name=_str(data, "riskName"),
            impact_level=level if level in IMPACT_LEVELS else "Medium",
            probability=_clamp(_num(data, "probability", 1.0), 1.0, 10.0),
            mitigation_strategy=_str(data, "mitigationStrategy"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "riskName": self.risk_name,
            "impactLevel": self.impact_level,
            "probability": self.probability,
            "mitigationStrategy": self.mitigation_strategy,
        }


@dataclass
class Competitor:
    name: str = ""
    description: str = ""

    @classmethod
    def from_json(cls, value: Any) -> "Competitor":
        data = _obj(value)
        return cls(name=_str(data, "name"), description=_str(data, "description"))

    def to_json(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass
class DeepDiveAnalysis:
    company_name: str = ""
    strategy: str = ""
    revenue_model: str = ""
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)

    @classmethod
    def placeholder(cls, company_name: str) -> "DeepDiveAnalysis":
        """Stand-in shown when no deep dive could be produced."""
        return cls(company_name=company_name, strategy="N/A", revenue_model="N/A")

    @classmethod
    def from_json(cls, value: Any) -> "DeepDiveAnalysis":
        data = _obj(value)
        return cls(
            company_name=_str(data, "companyName"),
            strategy=_str(data, "strategy"),
            revenue_model=_str(data, "revenueModel"),
            strengths=_str_list(data, "strengths"),
            weaknesses=_str_list(data, "weaknesses"),
            opportunities=_str_list(data, "opportunities"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "companyName": self.company_name,
            "strategy": self.strategy,
            "revenueModel": self.revenue_model,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "opportunities": list(self.opportunities),
        }


@dataclass(frozen=True)
class Source:
    """A grounding citation attached to a model reply."""
    title: str
    url: str

    def to_json(self) -> Dict[str, Any]:
        return {"title": self.title, "url": self.url}


@dataclass
class CompetitorAnalysis:
    top_competitors: List[Competitor] = field(default_factory=list)
    deep_dive: DeepDiveAnalysis = field(default_factory=lambda: DeepDiveAnalysis.placeholder("Analysis Unavailable"))
    sources: List[Source] = field(default_factory=list)

    @classmethod
    def not_found(cls) -> "CompetitorAnalysis":
        """Result used when the research model returned no text at all."""
        return cls(deep_dive=DeepDiveAnalysis.placeholder("Not Found"))

    @classmethod
    def from_json(cls, value: Any, sources: Iterable[Source] = ()) -> "CompetitorAnalysis":
        data = _obj(value)
        deep_dive = data.get("deepDive")
        return cls(
            top_competitors=_records(data, "topCompetitors", Competitor.from_json),
            deep_dive=(
                DeepDiveAnalysis.from_json(deep_dive)
                if isinstance(deep_dive, dict) and deep_dive
                else DeepDiveAnalysis.placeholder("Analysis Unavailable")
            ),
            sources=list(sources),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "topCompetitors": [c.to_json() for c in self.top_competitors],
            "deepDive": self.deep_dive.to_json(),
            "sources": [s.to_json() for s in self.sources],
        }


@dataclass
class BusinessStrategy:
    """The full report: core strategy plus competitor analysis."""
    executive_summary: str = ""
    business_model: BusinessModel = field(default_factory=BusinessModel)
    marketing_plan: MarketingPlan = field(default_factory=MarketingPlan)
    swot: SWOT = field(default_factory=SWOT)
    roadmap: List[RoadmapPhase] = field(default_factory=list)
    risks: List[Risk] = field(default_factory=list)
    competitor_analysis: CompetitorAnalysis = field(default_factory=CompetitorAnalysis)

    @classmethod
    def from_json(cls, value: Any) -> "BusinessStrategy":
        data = _obj(value)
        competitors = _obj(data.get("competitorAnalysis"))
        sources = [
            Source(title=_str(s, "title", "Web Source"), url=_str(s, "url"))
            for s in competitors.get("sources") or []
            if isinstance(s, dict) and _str(s, "url")
        ]
        return cls(
            executive_summary=_str(data, "executiveSummary"),
            business_model=BusinessModel.from_json(data.get("businessModel")),
            marketing_plan=MarketingPlan.from_json(data.get("marketingPlan")),
            swot=SWOT.from_json(data.get("swot")),
            roadmap=_records(data, "roadmap", RoadmapPhase.from_json),
            risks=_records(data, "risks", Risk.from_json),
            competitor_analysis=CompetitorAnalysis.from_json(competitors, sources),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "executiveSummary": self.executive_summary,
            "businessModel": self.business_model.to_json(),
            "marketingPlan": self.marketing_plan.to_json(),
            "swot": self.swot.to_json(),
            "roadmap": [p.to_json() for p in self.roadmap],
            "risks": [r.to_json() for r in self.risks],
            "competitorAnalysis": self.competitor_analysis.to_json(),
        }


@dataclass
class ChatMessage:
    """One turn of the strategy chat.  ``role`` is ``"user"`` or ``"model"``."""
    role: str
    text: str
    id: str = ""
    is_thinking: bool = False
    image: Optional[str] = None  # data URL


@dataclass
class ChatReply:
    """Assistant reply returned to the UI."""
    text: str


@dataclass
class LLMResponse:
    """Response from the LLM after a chat turn.

    ``sources`` holds the grounding citations the provider attached to the
    message (empty when the backend does not ground its answers).
    """
    content: Optional[str]
    sources: List[Source] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.content or ""
