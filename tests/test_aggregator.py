"""
Test Aggregator

Template sentences, heuristics, empty-source handling and determinism.
"""

import pytest
from pydantic import ValidationError

from market_research.agents import (
    aggregate_research,
    generate_pm_summary,
    generate_customer_voice,
    simplify_trends,
    build_competitive_analysis
)
from market_research.agents.aggregator import assess_market, simplify_competitor
from market_research.models import (
    RedditAgentOutput, RedditTopicSummary, CompetitorAgentOutput, CompetitorSummary,
    IndustryTrendsAgentOutput, TrendSummary, RedditDirection, Intensity,
    TrendDirection, TrendStance, TrendImpact
)


def topic(name, mentions, direction, intensity, quotes=None):
    return RedditTopicSummary(name=name, mentions=mentions, dominant_direction=direction,
                              dominant_intensity=intensity, sample_quotes=quotes or [])


def competitor(name, features=None, edges=None, weaknesses=None):
    return CompetitorSummary(name=name, relevant_features=features or [],
                             unique_edges=edges or [], weaknesses=weaknesses or [])


def trend(name, direction, stance, evidence='', implication=''):
    return TrendSummary(name=name, direction=direction, stance=stance,
                        evidence_snippet=evidence, implication_for_solution=implication)


@pytest.fixture
def reddit_data():
    return RedditAgentOutput(total_items=25, topics=[
        topic('reliability', 15, RedditDirection.PAIN_POINT, Intensity.HIGH, ['"Counts drift" - every week']),
        topic('pricing', 6, RedditDirection.PAIN_POINT, Intensity.MEDIUM),
        topic('forecasting', 4, RedditDirection.DEMAND_SIGNAL, Intensity.LOW),
    ])


@pytest.fixture
def competitor_data():
    return CompetitorAgentOutput(competitors=[
        competitor('Shopify', ['Inventory sync', 'POS'], ['Huge app store'], ['Expensive add-ons']),
        competitor('Lightspeed'),
    ])


@pytest.fixture
def trends_data():
    return IndustryTrendsAgentOutput(trends=[
        trend('Data privacy rules', TrendDirection.STABLE, TrendStance.RISKY, 'e' * 200, 'More compliance work.'),
        trend('AI forecasting adoption', TrendDirection.GROWING, TrendStance.SUPPORTIVE, 'Short.', 'Tailwind.'),
    ])


# ============================================================================
# PM SUMMARY
# ============================================================================

def test_pm_summary(sample_context, reddit_data, competitor_data, trends_data):
    summary = generate_pm_summary(sample_context, reddit_data, competitor_data, trends_data)

    assert summary == (
        "Research for 'Acme Stock' analyzed 25 Reddit posts, 2 competitors, and 2 industry trends. "
        "Key customer frustrations include reliability and pricing. "
        "Market trends are favorable with AI forecasting adoption growing. "
        "Main competitors identified: Shopify, Lightspeed. "
        "Overall assessment: strong market opportunity with clear demand."
    )


def test_pm_summary_with_no_data(sample_context):
    summary = generate_pm_summary(
        sample_context, RedditAgentOutput.empty(), CompetitorAgentOutput.empty(), IndustryTrendsAgentOutput.empty()
    )

    assert summary == (
        "Research for 'Acme Stock' analyzed 0 Reddit posts, 0 competitors, and 0 industry trends. "
        "Overall assessment: moderate opportunity."
    )


@pytest.mark.parametrize("competitors,items,expected", [
    (3, 9, "challenging market with significant competition"),
    (5, 0, "challenging market with significant competition"),
    (3, 10, "moderate opportunity"),
    (2, 21, "strong market opportunity with clear demand"),
    (0, 100, "strong market opportunity with clear demand"),
    (2, 20, "moderate opportunity"),
    (4, 50, "moderate opportunity"),
])
def test_assess_market(competitors, items, expected):
    assert assess_market(competitors, items) == expected


# ============================================================================
# CUSTOMER VOICE
# ============================================================================

def test_customer_voice(reddit_data):
    assert generate_customer_voice(reddit_data) == (
        "Customers are deeply frustrated with reliability. "
        "A representative post: \"Counts drift\" - every week. "
        "There's strong demand for better solutions in forecasting."
    )


def test_customer_voice_without_reddit_data_has_no_quotes():
    assert generate_customer_voice(RedditAgentOutput.empty()) == \
        "No customer voice data available from Reddit posts."


def test_customer_voice_falls_back_to_generic_demand_sentence():
    data = RedditAgentOutput(total_items=2, topics=[
        topic('ux', 2, RedditDirection.NEUTRAL_OBSERVATION, Intensity.LOW, ['"Nice UI" - ' + 'x' * 100 + '...']),
    ])

    assert generate_customer_voice(data) == (
        "A representative post: \"Nice UI\" - " + 'x' * 100 + "... "
        "Users are actively discussing this problem space, signalling room for better solutions."
    )


# ============================================================================
# TRENDS AND COMPETITORS
# ============================================================================

def test_simplify_trends(trends_data):
    simplified = simplify_trends(trends_data)

    assert simplified[0].trend == 'Data privacy rules'
    assert simplified[0].summary == 'e' * 150 + '... More compliance work.'
    assert simplified[0].impact == TrendImpact.NEGATIVE
    assert simplified[1].summary == 'Short.... Tailwind.'
    assert simplified[1].impact == TrendImpact.POSITIVE


def test_simplify_competitor_fallbacks():
    full = simplify_competitor(competitor('Shopify', ['Inventory sync', 'POS', 'Reports'], ['Huge app store', 'Brand'],
                                          ['Expensive add-ons']))
    assert full.description == 'Inventory sync and more'
    assert full.strengths == 'Huge app store, Brand'
    assert full.weaknesses == 'Expensive add-ons'

    features_only = simplify_competitor(competitor('Zoho', ['Invoicing', 'CRM', 'Reports']))
    assert features_only.description == 'Invoicing and more'
    assert features_only.strengths == 'Invoicing, CRM'
    assert features_only.weaknesses == 'No significant weaknesses identified'

    single = simplify_competitor(competitor('Odoo', ['ERP']))
    assert single.description == 'ERP'

    bare = simplify_competitor(competitor('Mystery'))
    assert bare.description == 'Competitor in this space'
    assert bare.strengths == 'Established market presence'


@pytest.mark.parametrize("count,expected", [
    (0, "No direct competitors identified. Opportunity to enter an underserved market."),
    (1, "One main competitor (C0). Opportunity to differentiate and capture market share."),
    (3, "Competitive market with 3 main players. Competitors are established but have weaknesses you can "
        "exploit. Focus on being simpler, faster, or more accessible."),
    (4, "Highly competitive market with 4+ players. Differentiation will be critical. Look for underserved "
        "niches or gaps in existing solutions."),
])
def test_market_position(count, expected):
    data = CompetitorAgentOutput(competitors=[competitor(f"C{i}") for i in range(count)])
    assert build_competitive_analysis(data).market_position == expected


# ============================================================================
# REPORT
# ============================================================================

def test_aggregate_research(sample_context, reddit_data, competitor_data, trends_data):
    report = aggregate_research(sample_context, reddit_data, competitor_data, trends_data)

    assert report.solution_id == 'acme_stock'
    assert [c.name for c in report.competitive_analysis.competitors] == ['Shopify', 'Lightspeed']
    assert [t.trend for t in report.industry_trends] == ['Data privacy rules', 'AI forecasting adoption']


def test_report_is_deterministic(sample_context, reddit_data, competitor_data, trends_data):
    first = aggregate_research(sample_context, reddit_data, competitor_data, trends_data)
    second = aggregate_research(sample_context, reddit_data, competitor_data, trends_data)

    assert first.model_dump_json() == second.model_dump_json()


def test_aggregation_writes_nothing(sample_context, reddit_data, competitor_data, trends_data, capsys):
    aggregate_research(sample_context, reddit_data, competitor_data, trends_data)

    assert capsys.readouterr().out == ""


def test_report_is_frozen(sample_context):
    report = aggregate_research(
        sample_context, RedditAgentOutput.empty(), CompetitorAgentOutput.empty(), IndustryTrendsAgentOutput.empty()
    )

    with pytest.raises(ValidationError):
        report.customer_voice = "edited"
