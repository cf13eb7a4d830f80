"""
Test Reddit Agent

Static relevance filter, model filter (fails open), topic aggregation
and the empty-output fallback.
"""

import pytest

from market_research.agents import RedditAgent, filter_relevant_posts, aggregate_by_topic
from market_research.agents.reddit_agent import dominant_direction, dominant_intensity, format_quote
from market_research.exceptions import SourceUnavailableError
from market_research.llm import TextAnalysisService
from market_research.models import ClassifiedRedditPost, RedditDirection, Intensity

from conftest import FakeLLM, FakeRedditClient, make_post


def classified(title, topic, direction, intensity, score=0, body=""):
    post = make_post(title, body, url=f"https://www.reddit.com/r/x/{title}", score=score)
    return ClassifiedRedditPost(**post.model_dump(), topic=topic, direction=direction, intensity=intensity)


# ============================================================================
# STATIC FILTER
# ============================================================================

def test_filter_keeps_keyword_communities_and_keyword_rich_posts(sample_context):
    community_match = make_post('Anyone else?', subreddit='retail')
    content_match = make_post('Inventory counts drift every weekend', subreddit='gaming')
    single_match = make_post('My inventory is full of loot', subreddit='gaming')
    excluded = make_post('Inventory counts drift lol', subreddit='funny')
    excluded_upper = make_post('Inventory counts drift', subreddit='AskReddit')

    kept = filter_relevant_posts(
        [community_match, content_match, single_match, excluded, excluded_upper], sample_context
    )

    assert kept == [community_match, content_match]


# ============================================================================
# AGGREGATION
# ============================================================================

def test_dominant_direction_ties_go_to_first_seen():
    posts = [
        classified('a', 't', RedditDirection.NEUTRAL_OBSERVATION, Intensity.LOW),
        classified('b', 't', RedditDirection.PAIN_POINT, Intensity.LOW),
        classified('c', 't', RedditDirection.PAIN_POINT, Intensity.LOW),
        classified('d', 't', RedditDirection.NEUTRAL_OBSERVATION, Intensity.LOW),
    ]
    assert dominant_direction(posts) == RedditDirection.NEUTRAL_OBSERVATION

    posts.append(classified('e', 't', RedditDirection.PAIN_POINT, Intensity.LOW))
    assert dominant_direction(posts) == RedditDirection.PAIN_POINT


def test_any_high_intensity_makes_the_topic_high():
    posts = [classified(str(i), 't', RedditDirection.PAIN_POINT, Intensity.LOW) for i in range(5)]
    assert dominant_intensity(posts) == Intensity.LOW

    posts.append(classified('m', 't', RedditDirection.PAIN_POINT, Intensity.MEDIUM))
    assert dominant_intensity(posts) == Intensity.MEDIUM

    posts.append(classified('h', 't', RedditDirection.PAIN_POINT, Intensity.HIGH))
    assert dominant_intensity(posts) == Intensity.HIGH


def test_format_quote():
    assert format_quote(make_post('Link only')) == 'Link only'
    assert format_quote(make_post('Short', 'Counts drift.')) == '"Short" - Counts drift.'
    assert format_quote(make_post('Long', 'x' * 150)) == '"Long" - ' + 'x' * 100 + '...'


def test_aggregate_by_topic():
    posts = [
        classified('low score', 'pricing', RedditDirection.PAIN_POINT, Intensity.LOW, score=1),
        classified('solo', 'support', RedditDirection.DEMAND_SIGNAL, Intensity.LOW, score=3),
        classified('top score', 'pricing', RedditDirection.PAIN_POINT, Intensity.HIGH, score=99),
        classified('tie a', 'ux', RedditDirection.NEUTRAL_OBSERVATION, Intensity.LOW, score=5),
        classified('tie b', 'ux', RedditDirection.NEUTRAL_OBSERVATION, Intensity.LOW, score=5),
        classified('mid score', 'pricing', RedditDirection.PAIN_POINT, Intensity.LOW, score=10),
        classified('extra', 'pricing', RedditDirection.PAIN_POINT, Intensity.LOW, score=0),
    ]

    topics = aggregate_by_topic(posts)

    assert [(t.name, t.mentions) for t in topics] == [('pricing', 4), ('ux', 2), ('support', 1)]
    assert topics[0].dominant_intensity == Intensity.HIGH
    assert topics[0].sample_quotes == ['top score', 'mid score', 'low score']
    assert topics[1].sample_quotes == ['tie a', 'tie b']
    assert sum(t.mentions for t in topics) == len(posts)


# ============================================================================
# AGENT
# ============================================================================

POSTS = [
    make_post('Inventory counts drift every week', subreddit='smallbusiness',
              url='https://www.reddit.com/r/smallbusiness/1', score=10),
    make_post('Stockouts cost us sales', 'We lost three big orders.', subreddit='smallbusiness',
              url='https://www.reddit.com/r/smallbusiness/2', score=50),
    make_post('Need a better forecasting tool', subreddit='retail',
              url='https://www.reddit.com/r/retail/3', score=5),
    make_post('inventory counts drift meme', subreddit='funny',
              url='https://www.reddit.com/r/funny/4', score=500),
]

LABELS = [
    {'topic': 'reliability', 'direction': 'pain_point', 'intensity': 'medium'},
    {'topic': 'reliability', 'direction': 'pain_point', 'intensity': 'high'},
    {'topic': 'forecasting', 'direction': 'demand_signal', 'intensity': 'low'},
]


@pytest.mark.asyncio
async def test_run_filters_classifies_and_aggregates(config, sample_context, no_wait_limiter):
    reddit = FakeRedditClient(POSTS)
    llm = FakeLLM(list(LABELS))
    agent = RedditAgent(reddit, TextAnalysisService(llm, no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert output.source == 'reddit'
    assert output.total_items == 3
    assert [t.name for t in output.topics] == ['reliability', 'forecasting']

    reliability = output.topics[0]
    assert reliability.mentions == 2
    assert reliability.dominant_direction == RedditDirection.PAIN_POINT
    assert reliability.dominant_intensity == Intensity.HIGH
    assert reliability.sample_quotes == [
        '"Stockouts cost us sales" - We lost three big orders.',
        'Inventory counts drift every week',
    ]

    # one query batch, no community search, one model call per surviving post
    assert len(reddit.fetch_calls) == 1
    assert 3 <= len(reddit.fetch_calls[0]) <= 5
    assert reddit.community_calls == []
    assert len(llm.calls) == 3


@pytest.mark.asyncio
async def test_llm_filter_fails_open(config, sample_context, no_wait_limiter):
    config['agents']['reddit']['enable_llm_relevance_filter'] = True
    llm = FakeLLM([
        {'relevant': False},
        RuntimeError('provider down'),
        {'relevant': True},
        LABELS[1],
        LABELS[2],
    ])
    agent = RedditAgent(FakeRedditClient(POSTS), TextAnalysisService(llm, no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert output.total_items == 2
    assert [t.name for t in output.topics] == ['reliability', 'forecasting']


@pytest.mark.asyncio
async def test_targeted_communities_are_merged(config, sample_context, no_wait_limiter):
    config['agents']['reddit']['communities'] = ['smallbusiness']
    extra = make_post('Inventory counts drift after POS update', subreddit='smallbusiness',
                      url='https://www.reddit.com/r/smallbusiness/9')
    reddit = FakeRedditClient(POSTS[:1], community_posts=[POSTS[0], extra])
    llm = FakeLLM(default={'topic': 'reliability', 'direction': 'pain_point', 'intensity': 'low'})
    agent = RedditAgent(reddit, TextAnalysisService(llm, no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert reddit.community_calls == [(reddit.fetch_calls[0][0], ['smallbusiness'])]
    assert output.total_items == 2


@pytest.mark.asyncio
async def test_no_relevant_posts_gives_empty_output(config, sample_context, no_wait_limiter):
    llm = FakeLLM()
    agent = RedditAgent(FakeRedditClient(POSTS[3:]), TextAnalysisService(llm, no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert output.total_items == 0
    assert output.topics == []
    assert llm.calls == []


@pytest.mark.asyncio
async def test_source_failure_gives_empty_output(config, sample_context, no_wait_limiter):
    reddit = FakeRedditClient(error=SourceUnavailableError('reddit', 'All Reddit searches failed'))
    agent = RedditAgent(reddit, TextAnalysisService(FakeLLM(), no_wait_limiter), config)

    output = await agent.run(sample_context)

    assert output == output.empty()
