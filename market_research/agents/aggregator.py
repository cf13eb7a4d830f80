"""
Aggregator

Synthesizes the three per-source outputs into the final report.

Design:
- Pure functions, no I/O, no model calls: identical inputs always give
  an identical report
- Template sentences chosen by simple count heuristics; thresholds and
  wording are part of the output contract
- The report only states what the data supports: an empty source yields
  its "no data" sentence, never an invented quote or competitor
"""

from typing import List

from ..models import (
    SolutionContext,
    RedditAgentOutput, CompetitorAgentOutput, IndustryTrendsAgentOutput,
    CompetitorSummary, RedditDirection, Intensity, TrendStance,
    SimplifiedTrend, SimplifiedCompetitor, CompetitiveAnalysis, ResearchModuleOutput,
    coerce_label, stance_to_impact
)

NO_CUSTOMER_VOICE = "No customer voice data available from Reddit posts."
GENERIC_DEMAND_SENTENCE = (
    "Users are actively discussing this problem space, signalling room for better solutions."
)

ASSESSMENT_STRONG = "strong market opportunity with clear demand"
ASSESSMENT_CHALLENGING = "challenging market with significant competition"
ASSESSMENT_MODERATE = "moderate opportunity"

# Heuristic thresholds
HIGH_COMPETITION_COUNT = 3
LOW_DEMAND_ITEMS = 10
HIGH_DEMAND_ITEMS = 20

TREND_SUMMARY_SNIPPET_LENGTH = 150


def _direction(value) -> RedditDirection:
    return coerce_label(value, RedditDirection, RedditDirection.NEUTRAL_OBSERVATION)


def _end_sentence(text: str) -> str:
    text = text.rstrip()
    return text if text and text[-1] in '.!?"' else f"{text}."


# ============================================================================
# PM SUMMARY
# ============================================================================

def assess_market(num_competitors: int, total_items: int) -> str:
    """
    Overall assessment phrase.

    - 3+ competitors and fewer than 10 Reddit items → challenging
    - fewer than 3 competitors and more than 20 Reddit items → strong
    - otherwise → moderate
    """
    high_competition = num_competitors >= HIGH_COMPETITION_COUNT
    if high_competition and total_items < LOW_DEMAND_ITEMS:
        return ASSESSMENT_CHALLENGING
    if not high_competition and total_items > HIGH_DEMAND_ITEMS:
        return ASSESSMENT_STRONG
    return ASSESSMENT_MODERATE


def generate_pm_summary(
    context: SolutionContext,
    reddit_data: RedditAgentOutput,
    competitor_data: CompetitorAgentOutput,
    trends_data: IndustryTrendsAgentOutput
) -> str:
    """A few template sentences covering all three sources."""
    parts = [
        f"Research for '{context.solution_title}' analyzed {reddit_data.total_items} Reddit posts, "
        f"{len(competitor_data.competitors)} competitors, and {len(trends_data.trends)} industry trends."
    ]

    pain_points = [t for t in reddit_data.topics if _direction(t.dominant_direction) == RedditDirection.PAIN_POINT]
    if pain_points:
        parts.append(f"Key customer frustrations include {' and '.join(t.name for t in pain_points[:2])}.")

    supportive = [
        t for t in trends_data.trends
        if coerce_label(t.stance, TrendStance, TrendStance.NEUTRAL) == TrendStance.SUPPORTIVE
    ]
    if supportive:
        trend = supportive[0]
        parts.append(f"Market trends are favorable with {trend.name} {trend.direction.value}.")

    if competitor_data.competitors:
        names = ', '.join(c.name for c in competitor_data.competitors)
        parts.append(f"Main competitors identified: {names}.")

    assessment = assess_market(len(competitor_data.competitors), reddit_data.total_items)
    parts.append(f"Overall assessment: {assessment}.")

    return ' '.join(parts)


# ============================================================================
# CUSTOMER VOICE
# ============================================================================

def generate_customer_voice(reddit_data: RedditAgentOutput) -> str:
    """
    One paragraph of what Reddit users are saying.

    Frustration sentence from high-intensity pain-point topics, one real
    quote from the most discussed topic, then a demand sentence (or the
    generic fallback when no topic is a demand signal).
    """
    if reddit_data.total_items == 0:
        return NO_CUSTOMER_VOICE

    sentences = []

    high_pain = [
        t for t in reddit_data.topics
        if _direction(t.dominant_direction) == RedditDirection.PAIN_POINT
        and coerce_label(t.dominant_intensity, Intensity, Intensity.LOW) == Intensity.HIGH
    ]
    if high_pain:
        sentences.append(f"Customers are deeply frustrated with {', '.join(t.name for t in high_pain)}.")

    if reddit_data.topics and reddit_data.topics[0].sample_quotes:
        sentences.append(_end_sentence(f"A representative post: {reddit_data.topics[0].sample_quotes[0]}"))

    demand = [t for t in reddit_data.topics if _direction(t.dominant_direction) == RedditDirection.DEMAND_SIGNAL]
    if demand:
        sentences.append(f"There's strong demand for better solutions in {' and '.join(t.name for t in demand)}.")
    else:
        sentences.append(GENERIC_DEMAND_SENTENCE)

    return ' '.join(sentences)


# ============================================================================
# TRENDS
# ============================================================================

def simplify_trends(trends_data: IndustryTrendsAgentOutput) -> List[SimplifiedTrend]:
    """Name, snippet + implication summary, and stance mapped to impact."""
    return [
        SimplifiedTrend(
            trend=trend.name,
            summary=f"{trend.evidence_snippet[:TREND_SUMMARY_SNIPPET_LENGTH]}... {trend.implication_for_solution}",
            impact=stance_to_impact(trend.stance)
        )
        for trend in trends_data.trends
    ]


# ============================================================================
# COMPETITIVE ANALYSIS
# ============================================================================

def simplify_competitor(competitor: CompetitorSummary) -> SimplifiedCompetitor:
    features = competitor.relevant_features

    if features:
        description = features[0] + (' and more' if len(features) > 1 else '')
    else:
        description = 'Competitor in this space'

    if competitor.unique_edges:
        strengths = ', '.join(competitor.unique_edges)
    else:
        strengths = ', '.join(features[:2]) or 'Established market presence'

    if competitor.weaknesses:
        weaknesses = ', '.join(competitor.weaknesses)
    else:
        weaknesses = 'No significant weaknesses identified'

    return SimplifiedCompetitor(
        name=competitor.name,
        description=description,
        strengths=strengths,
        weaknesses=weaknesses
    )


def describe_market_position(competitors: List[SimplifiedCompetitor]) -> str:
    count = len(competitors)
    if count == 0:
        return "No direct competitors identified. Opportunity to enter an underserved market."
    if count == 1:
        return (f"One main competitor ({competitors[0].name}). "
                f"Opportunity to differentiate and capture market share.")
    if count <= 3:
        return (f"Competitive market with {count} main players. "
                f"Competitors are established but have weaknesses you can exploit. "
                f"Focus on being simpler, faster, or more accessible.")
    return (f"Highly competitive market with {count}+ players. "
            f"Differentiation will be critical. "
            f"Look for underserved niches or gaps in existing solutions.")


def build_competitive_analysis(competitor_data: CompetitorAgentOutput) -> CompetitiveAnalysis:
    competitors = [simplify_competitor(c) for c in competitor_data.competitors]
    return CompetitiveAnalysis(
        competitors=competitors,
        market_position=describe_market_position(competitors)
    )


# ============================================================================
# REPORT
# ============================================================================

def aggregate_research(
    context: SolutionContext,
    reddit_data: RedditAgentOutput,
    competitor_data: CompetitorAgentOutput,
    trends_data: IndustryTrendsAgentOutput
) -> ResearchModuleOutput:
    """
    Build the final report from the three agent outputs.

    Example:
        report = aggregate_research(context, reddit, competitors, trends)
    """
    return ResearchModuleOutput(
        solution_id=context.solution_id,
        summary_for_pm=generate_pm_summary(context, reddit_data, competitor_data, trends_data),
        customer_voice=generate_customer_voice(reddit_data),
        industry_trends=simplify_trends(trends_data),
        competitive_analysis=build_competitive_analysis(competitor_data)
    )
