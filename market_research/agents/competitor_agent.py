"""
Competitor Agent

Discovers who already competes in the solution's space and what they offer.

Design (discovery, then enrichment):
1. Discovery: one broad web search, then the model extracts real
   company/product names from the snippets. Zero results or zero names
   ends the run for this source; there is no hardcoded fallback list,
   since an irrelevant guess is worse than no answer (fails closed)
2. Enrichment: one search per name in parallel, hits combined into one
   text blob per name, then one analysis call per name (sequential,
   rate limited). Names whose search returns nothing are dropped.
"""

import asyncio
from typing import Any, Dict, List

from ..llm import TextAnalysisService
from ..models import SolutionContext, SearchResult, CompetitorSummary, CompetitorAgentOutput
from ..sources import WebSearchClient
from ..utils.query_builders import build_competitor_discovery_query, build_competitor_profile_query


def combine_search_text(results: List[SearchResult]) -> str:
    """Title + snippet per hit, hits separated by a blank line."""
    return "\n\n".join(f"{r.title}\n{r.snippet}" for r in results)


class CompetitorAgent:
    """
    Competitor research over web search.
    """

    def __init__(
        self,
        web_search: WebSearchClient,
        text_analysis: TextAnalysisService,
        config: Dict[str, Any]
    ):
        """
        Initialize Competitor Agent.

        Args:
            web_search: Web search client
            text_analysis: Shared Text Analysis Service
            config: Configuration dict (from config.yaml)
        """
        self.web_search = web_search
        self.text_analysis = text_analysis

        agent_config = config['agents']['competitor']
        self.discovery_results = agent_config.get('discovery_results', 15)
        self.search_results = agent_config.get('search_results', 10)
        self.max_names_for_extraction = agent_config.get('max_names_for_extraction', 10)
        self.max_competitors = agent_config.get('max_competitors', 5)

    async def run(self, context: SolutionContext) -> CompetitorAgentOutput:
        """
        Discover and analyze competitors.

        Returns:
            CompetitorAgentOutput (empty on any failure)
        """
        print(f"\n[Competitors] Researching competitors for: {context.solution_title}")

        try:
            names = await self.discover_competitors(context)
            if not names:
                print("[Competitors] No competitors discovered, returning empty result "
                      "(no fallback list)")
                return CompetitorAgentOutput.empty()

            competitors = await self.enrich_competitors(names, context)
            print(f"[Competitors] ✓ {len(competitors)} competitors analyzed")

            return CompetitorAgentOutput(competitors=competitors)

        except Exception as e:
            print(f"[Competitors] Error: {e}")
            return CompetitorAgentOutput.empty()

    async def discover_competitors(self, context: SolutionContext) -> List[str]:
        """
        Phase 1: find candidate competitor names.

        Returns:
            Unique names (empty when the search fails or finds nothing)
        """
        query = build_competitor_discovery_query(context.keywords, context.target_users)
        print(f"[Competitors] Discovery search: \"{query}\"")

        outcome = await self.web_search.search_with_retry(query, self.discovery_results)
        if not outcome.success:
            print(f"[Competitors] ✗ Discovery search failed: {outcome.error}")
            return []

        results = outcome.data or []
        if not results:
            print("[Competitors] ⚠️  Discovery search returned no results")
            return []

        print(f"[Competitors] ✓ {len(results)} discovery results, extracting names...")

        names = await self.text_analysis.extract_competitor_names(
            results,
            context,
            max_results_in_prompt=self.max_names_for_extraction,
            max_names=self.max_competitors
        )

        if names:
            print(f"[Competitors] ✓ Discovered: {', '.join(names)}")
        else:
            print("[Competitors] ⚠️  No competitor names extracted from search results")

        return names

    async def enrich_competitors(self, names: List[str], context: SolutionContext) -> List[CompetitorSummary]:
        """
        Phase 2: profile each discovered name.

        Searches run in parallel; analyses run one at a time in name order.
        """
        outcomes = await asyncio.gather(*(
            self.web_search.search_with_retry(build_competitor_profile_query(name), self.search_results)
            for name in names
        ))

        profiles = []
        for name, outcome in zip(names, outcomes):
            results = outcome.data if outcome.success else []
            if not results:
                reason = outcome.error if not outcome.success else "no results"
                print(f"  ✗ Dropping {name}: {reason}")
                continue
            print(f"  ✓ {name}: {len(results)} results")
            profiles.append((name, combine_search_text(results)))

        competitors = []
        for name, info in profiles:
            analysis = await self.text_analysis.analyze_competitor(name, info, context)
            competitors.append(CompetitorSummary(
                name=name,
                relevant_features=analysis.relevant_features,
                unique_edges=analysis.unique_edges,
                weaknesses=analysis.weaknesses
            ))

        return competitors
