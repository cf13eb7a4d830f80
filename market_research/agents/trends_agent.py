"""
Industry Trends Agent

Finds recent industry news around the solution's keywords and judges
whether each trend helps or hurts the solution.

Design:
- Keyword, target-user and problem-domain queries, each biased toward
  recent news ("... news trends 2024 2025") and searched in parallel
- Results merged and deduplicated by URL, then capped at max_trends to
  bound model calls
- Final list ordered risky → supportive → neutral (stable sort)
"""

from typing import Any, Dict, List

from ..llm import TextAnalysisService
from ..models import (
    SolutionContext, TrendSummary, IndustryTrendsAgentOutput, TrendStance, STANCE_PRIORITY
)
from ..sources import WebSearchClient
from ..utils.query_builders import build_trend_queries, enhance_trend_query, DEFAULT_TREND_SUFFIX

EVIDENCE_SNIPPET_LENGTH = 200


def sort_trends_by_stance(trends: List[TrendSummary]) -> List[TrendSummary]:
    """
    Risky first, then supportive, then neutral.

    Stable: trends with equal stance keep their relative order.
    """
    return sorted(
        trends,
        key=lambda t: STANCE_PRIORITY.get(t.stance, STANCE_PRIORITY[TrendStance.NEUTRAL])
    )


class IndustryTrendsAgent:
    """
    Industry trend research over web search.
    """

    def __init__(
        self,
        web_search: WebSearchClient,
        text_analysis: TextAnalysisService,
        config: Dict[str, Any]
    ):
        """
        Initialize Industry Trends Agent.

        Args:
            web_search: Web search client
            text_analysis: Shared Text Analysis Service
            config: Configuration dict (from config.yaml)
        """
        self.web_search = web_search
        self.text_analysis = text_analysis

        agent_config = config['agents']['industry_trends']
        self.search_results = agent_config.get('search_results', 10)
        self.min_queries = agent_config.get('min_queries', 3)
        self.max_queries = agent_config.get('max_queries', 5)
        self.max_trends = agent_config.get('max_trends', 5)
        self.query_suffix = agent_config.get('query_suffix', DEFAULT_TREND_SUFFIX)

    async def run(self, context: SolutionContext) -> IndustryTrendsAgentOutput:
        """
        Search, analyze and order industry trends.

        Returns:
            IndustryTrendsAgentOutput (empty on any failure)
        """
        print(f"\n[Trends] Researching industry trends for: {context.solution_title}")

        try:
            queries = build_trend_queries(
                context.keywords, context.target_users, context.problem,
                min_queries=self.min_queries, max_queries=self.max_queries
            )
            print(f"[Trends] Generated {len(queries)} queries")

            enhanced = [enhance_trend_query(q, self.query_suffix) for q in queries]
            results = await self.web_search.search_many(enhanced, self.search_results)

            if not results:
                print("[Trends] No trend articles found, returning empty result")
                return IndustryTrendsAgentOutput.empty()

            if len(results) > self.max_trends:
                print(f"[Trends] Limiting to {self.max_trends} articles (from {len(results)})")
            results = results[:self.max_trends]

            trends = []
            for result in results:
                analysis = await self.text_analysis.analyze_trend(result, context)
                trends.append(TrendSummary(
                    name=analysis.name,
                    direction=analysis.direction,
                    stance=analysis.stance,
                    evidence_snippet=result.snippet[:EVIDENCE_SNIPPET_LENGTH],
                    implication_for_solution=analysis.implication
                ))

            trends = sort_trends_by_stance(trends)
            print(f"[Trends] ✓ {len(trends)} trends analyzed")

            return IndustryTrendsAgentOutput(trends=trends)

        except Exception as e:
            print(f"[Trends] Error: {e}")
            return IndustryTrendsAgentOutput.empty()
