"""
Test Industry Trends Agent

Stance ordering, evidence excerpts, the max_trends cap and defaults.
"""

import pytest

from market_research.agents import IndustryTrendsAgent, sort_trends_by_stance
from market_research.llm import TextAnalysisService
from market_research.models import TrendSummary, TrendDirection, TrendStance

from conftest import FakeLLM, make_result, outage


def trend(name, stance):
    return TrendSummary(name=name, direction=TrendDirection.STABLE, stance=stance,
                        evidence_snippet='', implication_for_solution='')


def article_handler(query):
    return [make_result(f"{query} article", f"https://news.example/{query}", 'x' * 300)]


def test_sort_is_risky_supportive_neutral_and_stable():
    trends = [
        trend('n1', TrendStance.NEUTRAL),
        trend('s1', TrendStance.SUPPORTIVE),
        trend('r1', TrendStance.RISKY),
        trend('n2', TrendStance.NEUTRAL),
        trend('s2', TrendStance.SUPPORTIVE),
        trend('r2', TrendStance.RISKY),
    ]

    assert [t.name for t in sort_trends_by_stance(trends)] == ['r1', 'r2', 's1', 's2', 'n1', 'n2']


@pytest.mark.asyncio
async def test_run_caps_analyzes_and_orders(config, sample_context, no_wait_limiter, make_web_search):
    config['agents']['industry_trends']['max_trends'] = 3
    llm = FakeLLM([
        {'name': 'Neutral news', 'direction': 'stable', 'stance': 'neutral', 'implication': 'Little change.'},
        {'name': 'New reporting rules', 'direction': 'growing', 'stance': 'risky', 'implication': 'More work.'},
        {'name': 'AI forecasting', 'direction': 'growing', 'stance': 'supportive', 'implication': 'Tailwind.'},
    ])
    web_search = make_web_search(article_handler)
    agent = IndustryTrendsAgent(web_search, TextAnalysisService(llm, no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert output.source == 'industry_trends'
    assert [t.name for t in output.trends] == ['New reporting rules', 'AI forecasting', 'Neutral news']
    assert all(len(t.evidence_snippet) == 200 for t in output.trends)
    assert len(llm.calls) == 3

    # every query is biased toward recent news
    assert web_search.provider.queries
    assert all(q.endswith('news trends 2024 2025') for q in web_search.provider.queries)


@pytest.mark.asyncio
async def test_failed_analysis_uses_defaults(config, sample_context, no_wait_limiter, make_web_search):
    config['agents']['industry_trends']['max_trends'] = 1
    llm = FakeLLM([RuntimeError('provider down')])
    agent = IndustryTrendsAgent(make_web_search(article_handler), TextAnalysisService(llm, no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert len(output.trends) == 1
    assert output.trends[0].stance == TrendStance.NEUTRAL
    assert output.trends[0].direction == TrendDirection.STABLE
    assert output.trends[0].implication_for_solution == 'Unable to analyze trend impact.'


@pytest.mark.asyncio
async def test_search_outage_gives_empty_output(config, sample_context, no_wait_limiter, make_web_search):
    llm = FakeLLM()
    agent = IndustryTrendsAgent(make_web_search(outage), TextAnalysisService(llm, no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert output.trends == []
    assert llm.calls == []
