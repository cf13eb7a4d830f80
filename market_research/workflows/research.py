"""
Research Workflow

Orchestrates the three collection agents and the aggregator.

Flow: Reddit Agent → Competitor Agent → Industry Trends Agent → Aggregator

Why sequential?
- Every agent's model calls share one rate limiter; running agents in
  parallel would still serialize on it, with less predictable timing
- Each agent is awaited fully before the next one starts

Failure policy:
- Agents absorb their own failures and return empty output
- Anything an agent lets escape, or an aggregator error, fails the run;
  the nodes do not catch it
- Configuration problems are raised before any client is built, so a
  misconfigured run never touches the network
"""

import asyncio
import time
from typing import Any, Dict, Optional, TypedDict, Union

from langgraph.graph import StateGraph, END
from langchain_core.runnables import RunnableConfig

from ..agents import RedditAgent, CompetitorAgent, IndustryTrendsAgent, aggregate_research
from ..llm import LLMProvider, RateLimiter, TextAnalysisService
from ..models import (
    SolutionContext,
    RedditAgentOutput, CompetitorAgentOutput, IndustryTrendsAgentOutput,
    ResearchModuleOutput
)
from ..sources import RedditClient, WebSearchClient
from ..utils.config import load_config, ensure_valid_config


# ============================================================================
# STATE SCHEMA
# ============================================================================

class ResearchState(TypedDict):
    """
    State that flows through the research workflow.

    Each node reads the context and fills in one result slot.
    """
    # Input
    context: SolutionContext

    # Per-source results
    reddit_data: Optional[RedditAgentOutput]
    competitor_data: Optional[CompetitorAgentOutput]
    trends_data: Optional[IndustryTrendsAgentOutput]

    # Output
    result: Optional[ResearchModuleOutput]

    # Tracking
    step: str


# ============================================================================
# WORKFLOW NODES
# ============================================================================

async def run_reddit_agent(state: ResearchState, config: RunnableConfig) -> ResearchState:
    """
    Node: Customer voice from Reddit.
    """
    print("\n[Pipeline] Step 1/3: Reddit research")

    agent: RedditAgent = config["configurable"]["reddit_agent"]
    reddit_data = await agent.run(state['context'])

    print(f"[Pipeline] Reddit: {reddit_data.total_items} posts, {len(reddit_data.topics)} topics")

    return {
        **state,
        'reddit_data': reddit_data,
        'step': 'reddit_complete'
    }


async def run_competitor_agent(state: ResearchState, config: RunnableConfig) -> ResearchState:
    """
    Node: Competitor discovery and analysis.
    """
    print("\n[Pipeline] Step 2/3: Competitor research")

    agent: CompetitorAgent = config["configurable"]["competitor_agent"]
    competitor_data = await agent.run(state['context'])

    print(f"[Pipeline] Competitors: {len(competitor_data.competitors)} analyzed")

    return {
        **state,
        'competitor_data': competitor_data,
        'step': 'competitors_complete'
    }


async def run_trends_agent(state: ResearchState, config: RunnableConfig) -> ResearchState:
    """
    Node: Industry trends.
    """
    print("\n[Pipeline] Step 3/3: Industry trends research")

    agent: IndustryTrendsAgent = config["configurable"]["trends_agent"]
    trends_data = await agent.run(state['context'])

    print(f"[Pipeline] Trends: {len(trends_data.trends)} analyzed")

    return {
        **state,
        'trends_data': trends_data,
        'step': 'trends_complete'
    }


async def aggregate_results(state: ResearchState, config: RunnableConfig) -> ResearchState:
    """
    Node: Build the final report (runs exactly once).
    """
    print(f"\n[Aggregator] Building report for: {state['context'].solution_title}")

    result = aggregate_research(
        state['context'],
        state['reddit_data'] or RedditAgentOutput.empty(),
        state['competitor_data'] or CompetitorAgentOutput.empty(),
        state['trends_data'] or IndustryTrendsAgentOutput.empty()
    )
    print("[Aggregator] ✓ Report complete")

    return {
        **state,
        'result': result,
        'step': 'aggregate_complete'
    }


# ============================================================================
# WORKFLOW BUILDER
# ============================================================================

def create_research_workflow(
    reddit_agent: RedditAgent,
    competitor_agent: CompetitorAgent,
    trends_agent: IndustryTrendsAgent
) -> StateGraph:
    """
    Create the research workflow graph.

    Args:
        reddit_agent: Reddit Agent
        competitor_agent: Competitor Agent
        trends_agent: Industry Trends Agent

    Returns:
        Compiled StateGraph ready to run

    Example:
        workflow = create_research_workflow(reddit_agent, competitor_agent, trends_agent)
        final_state = await workflow.ainvoke(initial_state, workflow.config)
    """
    workflow = StateGraph(ResearchState)

    # Add nodes
    workflow.add_node("reddit", run_reddit_agent)
    workflow.add_node("competitors", run_competitor_agent)
    workflow.add_node("trends", run_trends_agent)
    workflow.add_node("aggregate", aggregate_results)

    # Fixed order, no branching
    workflow.set_entry_point("reddit")
    workflow.add_edge("reddit", "competitors")
    workflow.add_edge("competitors", "trends")
    workflow.add_edge("trends", "aggregate")
    workflow.add_edge("aggregate", END)

    compiled = workflow.compile()

    # Store components in config for nodes to access
    compiled.config = {
        "configurable": {
            "reddit_agent": reddit_agent,
            "competitor_agent": competitor_agent,
            "trends_agent": trends_agent
        }
    }

    return compiled


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

async def run_research(
    context: Union[SolutionContext, Dict[str, Any]],
    config: Optional[Dict[str, Any]] = None,
    llm_provider: Optional[LLMProvider] = None,
    reddit_client: Optional[RedditClient] = None,
    web_search: Optional[WebSearchClient] = None,
    rate_limiter: Optional[RateLimiter] = None
) -> ResearchModuleOutput:
    """
    Run the full research pipeline for one solution.

    Args:
        context: SolutionContext (or a dict validated into one)
        config: Configuration dict (default: load_config())
        llm_provider: Override the LLM provider
        reddit_client: Override the Reddit client
        web_search: Override the web search client
        rate_limiter: Override the shared rate limiter

    Returns:
        ResearchModuleOutput

    Raises:
        pydantic.ValidationError: Invalid context
        ConfigurationError: Missing credentials (raised before any network call)
        Exception: Anything an agent or the aggregator lets escape

    Example:
        report = await run_research({
            'problem': 'Small retailers lose sales to stockouts',
            'solution_id': 'sol-1',
            'solution_title': 'Acme Stock',
            'solution_summary': 'Inventory forecasting for small shops',
            'target_users': ['retail owners'],
            'keywords': ['inventory management']
        })
        print(report.summary_for_pm)
    """
    if not isinstance(context, SolutionContext):
        context = SolutionContext.model_validate(context)

    config = config or load_config()

    # Credentials only matter for components built here from the environment
    if llm_provider is None or reddit_client is None or web_search is None:
        ensure_valid_config(config)

    llm_provider = llm_provider or LLMProvider(config)
    reddit_client = reddit_client or RedditClient(config)
    web_search = web_search or WebSearchClient(config)
    rate_limiter = rate_limiter or RateLimiter(config['llm'].get('min_request_interval_seconds', 4.0))

    # One service, one limiter, shared by every agent
    text_analysis = TextAnalysisService(llm_provider, rate_limiter)

    workflow = create_research_workflow(
        RedditAgent(reddit_client, text_analysis, config),
        CompetitorAgent(web_search, text_analysis, config),
        IndustryTrendsAgent(web_search, text_analysis, config)
    )

    initial_state: ResearchState = {
        'context': context,
        'reddit_data': None,
        'competitor_data': None,
        'trends_data': None,
        'result': None,
        'step': 'started'
    }

    print(f"\n[Pipeline] Starting research for: {context.solution_title} ({context.solution_id})")
    started = time.monotonic()

    try:
        final_state = await workflow.ainvoke(initial_state, workflow.config)
    except Exception as e:
        print(f"[Pipeline] ✗ Research failed after {time.monotonic() - started:.1f}s: {e}")
        raise

    print(f"[Pipeline] ✓ Research complete in {time.monotonic() - started:.1f}s")
    return final_state['result']


def run(context: Union[SolutionContext, Dict[str, Any]], **kwargs) -> ResearchModuleOutput:
    """
    Synchronous entry point: run(context) → ResearchModuleOutput.

    Accepts the same keyword overrides as run_research().
    """
    return asyncio.run(run_research(context, **kwargs))
