"""
Research Agents

Three source agents and the report aggregator:
1. Reddit Agent: customer voice from Reddit discussion ✓
2. Competitor Agent: discovery + enrichment over web search ✓
3. Industry Trends Agent: recent news judged against the solution ✓
4. Aggregator: deterministic report synthesis ✓
"""

from .reddit_agent import RedditAgent, filter_relevant_posts, aggregate_by_topic
from .competitor_agent import CompetitorAgent
from .trends_agent import IndustryTrendsAgent, sort_trends_by_stance
from .aggregator import (
    aggregate_research,
    generate_pm_summary,
    generate_customer_voice,
    simplify_trends,
    build_competitive_analysis
)

__all__ = [
    'RedditAgent',
    'filter_relevant_posts',
    'aggregate_by_topic',
    'CompetitorAgent',
    'IndustryTrendsAgent',
    'sort_trends_by_stance',
    'aggregate_research',
    'generate_pm_summary',
    'generate_customer_voice',
    'simplify_trends',
    'build_competitive_analysis',
]
