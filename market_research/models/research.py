"""
Research Output Models

Two layers:
1. Per-source agent outputs (RedditAgentOutput, CompetitorAgentOutput,
   IndustryTrendsAgentOutput). Each agent owns its output until it hands
   it to the aggregator.
2. The terminal report (ResearchModuleOutput) built once per run by the
   aggregator. Frozen: nothing downstream may edit it.

Every agent output has an empty() constructor: agents return it instead of
raising, so one dead source never aborts a run.
"""

from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field

from .labels import RedditDirection, Intensity, TrendDirection, TrendStance, TrendImpact


# ============================================================================
# REDDIT
# ============================================================================

class RedditTopicSummary(BaseModel):
    """Aggregate over the classified posts sharing one topic label."""

    name: str = Field(description="Topic name (e.g., pricing, UX, reliability)")

    mentions: int = Field(description="Number of posts in this topic")

    dominant_direction: RedditDirection = Field(
        description="Most frequent direction; ties go to the first direction seen"
    )

    dominant_intensity: Intensity = Field(
        description="Highest intensity present in the group (high > medium > low)"
    )

    sample_quotes: List[str] = Field(
        default_factory=list,
        description="Up to 3 quotes from the most upvoted posts"
    )


class RedditAgentOutput(BaseModel):
    source: Literal["reddit"] = "reddit"

    total_items: int = Field(
        default=0,
        description="Number of posts that survived filtering and were classified"
    )

    topics: List[RedditTopicSummary] = Field(
        default_factory=list,
        description="Topics sorted by mention count, descending"
    )

    @classmethod
    def empty(cls) -> "RedditAgentOutput":
        return cls(total_items=0, topics=[])


# ============================================================================
# COMPETITORS
# ============================================================================

class CompetitorSummary(BaseModel):
    """What one discovered competitor offers and where it falls short."""

    name: str = Field(description="Competitor name, unique within a run")

    relevant_features: List[str] = Field(
        default_factory=list,
        description="Features/capabilities related to the solution area"
    )

    unique_edges: List[str] = Field(
        default_factory=list,
        description="What they do especially well or differently"
    )

    weaknesses: List[str] = Field(
        default_factory=list,
        description="Pain points, missing features, or complexity issues"
    )


class CompetitorAgentOutput(BaseModel):
    source: Literal["competitors"] = "competitors"

    competitors: List[CompetitorSummary] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "CompetitorAgentOutput":
        return cls(competitors=[])


# ============================================================================
# INDUSTRY TRENDS
# ============================================================================

class TrendSummary(BaseModel):
    """One industry trend and what it means for the solution."""

    name: str = Field(description="Short name for the trend")

    direction: TrendDirection = Field(description="Growing, stable, or declining")

    stance: TrendStance = Field(description="Supportive, neutral, or risky for the solution")

    evidence_snippet: str = Field(
        description="First 200 characters of the source article snippet"
    )

    implication_for_solution: str = Field(
        description="One sentence about what this means for the solution"
    )


class IndustryTrendsAgentOutput(BaseModel):
    source: Literal["industry_trends"] = "industry_trends"

    trends: List[TrendSummary] = Field(
        default_factory=list,
        description="Trends ordered risky, supportive, neutral (stable within a stance)"
    )

    @classmethod
    def empty(cls) -> "IndustryTrendsAgentOutput":
        return cls(trends=[])


# ============================================================================
# FINAL REPORT
# ============================================================================

class SimplifiedTrend(BaseModel):
    model_config = ConfigDict(frozen=True)

    trend: str = Field(description="Trend name")
    summary: str = Field(description="Evidence excerpt followed by the implication")
    impact: TrendImpact = Field(description="Positive, neutral, or negative for the solution")


class SimplifiedCompetitor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    strengths: str
    weaknesses: str


class CompetitiveAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    competitors: List[SimplifiedCompetitor] = Field(default_factory=list)

    market_position: str = Field(
        description="One sentence derived from the number of competitors found"
    )


class ResearchModuleOutput(BaseModel):
    """
    The report handed back to the caller.

    Built once per run by the aggregator from the three agent outputs.
    """

    model_config = ConfigDict(frozen=True)

    solution_id: str = Field(description="Solution ID (same as input)")

    summary_for_pm: str = Field(description="Comprehensive prose summary for the PM")

    customer_voice: str = Field(description="Single paragraph summarizing Reddit voice")

    industry_trends: List[SimplifiedTrend] = Field(
        default_factory=list,
        description="One short summary per trend"
    )

    competitive_analysis: CompetitiveAnalysis = Field(
        description="Simplified competitors plus a market-position sentence"
    )
