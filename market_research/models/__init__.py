"""
Research Data Models

Export all data models for easy importing.
"""

from .labels import (
    RedditDirection,
    Intensity,
    TrendDirection,
    TrendStance,
    TrendImpact,
    INTENSITY_PRIORITY,
    STANCE_PRIORITY,
    STANCE_TO_IMPACT,
    coerce_label,
    stance_to_impact
)

from .context import SolutionContext

from .sources import (
    SearchResult,
    RedditPost,
    ClassifiedRedditPost
)

from .research import (
    RedditTopicSummary,
    RedditAgentOutput,
    CompetitorSummary,
    CompetitorAgentOutput,
    TrendSummary,
    IndustryTrendsAgentOutput,
    SimplifiedTrend,
    SimplifiedCompetitor,
    CompetitiveAnalysis,
    ResearchModuleOutput
)

__all__ = [
    # Labels
    "RedditDirection",
    "Intensity",
    "TrendDirection",
    "TrendStance",
    "TrendImpact",
    "INTENSITY_PRIORITY",
    "STANCE_PRIORITY",
    "STANCE_TO_IMPACT",
    "coerce_label",
    "stance_to_impact",

    # Input
    "SolutionContext",

    # Source records
    "SearchResult",
    "RedditPost",
    "ClassifiedRedditPost",

    # Agent outputs
    "RedditTopicSummary",
    "RedditAgentOutput",
    "CompetitorSummary",
    "CompetitorAgentOutput",
    "TrendSummary",
    "IndustryTrendsAgentOutput",

    # Report
    "SimplifiedTrend",
    "SimplifiedCompetitor",
    "CompetitiveAnalysis",
    "ResearchModuleOutput",
]
