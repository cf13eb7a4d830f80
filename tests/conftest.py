"""Shared fixtures and fakes for the research pipeline tests (no network)."""

import copy
import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from market_research.exceptions import SourceUnavailableError
from market_research.llm import RateLimiter, TextAnalysisService
from market_research.models import SolutionContext, RedditPost, SearchResult
from market_research.sources import RetryPolicy, WebSearchClient
from market_research.utils.config import DEFAULT_CONFIG

ENV_KEYS = [
    'ANTHROPIC_API_KEY', 'OPENAI_API_KEY',
    'REDDIT_CLIENT_ID', 'REDDIT_CLIENT_SECRET',
    'TAVILY_API_KEY', 'SERPER_API_KEY',
    'REQUEST_TIMEOUT_MS', 'MAX_RETRIES', 'WEB_SEARCH_PROVIDER',
    'REDDIT_USER_AGENT', 'ENABLE_LLM_RELEVANCE_FILTER', 'MARKET_RESEARCH_CONFIG',
]


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeLLM:
    """
    Scripted stand-in for LLMProvider.generate().

    Each call pops the next scripted response: a dict is sent back as JSON,
    a str as-is, and an Exception instance is raised.
    """

    def __init__(self, responses: Optional[List[Any]] = None, default: Any = None):
        self.responses = list(responses or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    def generate(self, messages, task_complexity="simple", temperature=None,
                 max_tokens=None, json_mode=False):
        self.calls.append({
            'messages': messages,
            'task_complexity': task_complexity,
            'json_mode': json_mode,
        })

        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            response = json.dumps(response)
        if response is None:
            raise RuntimeError("FakeLLM has no scripted response left")
        return {'content': response, 'provider': 'fake', 'model': 'fake-model'}

    @property
    def prompts(self) -> List[str]:
        return [call['messages'][-1]['content'] for call in self.calls]


class FakeSearchProvider:
    """
    Web search provider backed by a handler: query → list of results.

    The handler may raise SourceUnavailableError to simulate an outage.
    """

    name = 'fake'

    def __init__(self, handler: Callable[[str], List[SearchResult]]):
        self.handler = handler
        self.queries: List[str] = []

    def search(self, query: str, max_results: int = 10) -> List[SearchResult]:
        self.queries.append(query)
        return self.handler(query)[:max_results]


class FakeRedditClient:
    """Async stand-in for RedditClient's fan-out helpers."""

    def __init__(self, posts: Optional[List[RedditPost]] = None, error: Optional[Exception] = None,
                 community_posts: Optional[List[RedditPost]] = None):
        self.posts = posts or []
        self.error = error
        self.community_posts = community_posts or []
        self.fetch_calls: List[List[str]] = []
        self.community_calls: List[Any] = []

    async def fetch_posts(self, queries, limit_per_query=10):
        self.fetch_calls.append(list(queries))
        if self.error is not None:
            raise self.error
        return list(self.posts)

    async def search_communities(self, query, communities, limit_per_community=10):
        self.community_calls.append((query, list(communities)))
        return list(self.community_posts)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_post(title: str, body: str = "", subreddit: str = "smallbusiness",
              url: Optional[str] = None, score: int = 0) -> RedditPost:
    return RedditPost(
        title=title,
        body=body,
        subreddit=subreddit,
        created_at="2024-05-01T12:00:00.000Z",
        url=url or f"https://www.reddit.com/r/{subreddit}/comments/{abs(hash(title)) % 100000}",
        score=score
    )


def make_result(title: str, url: str, snippet: str = "", published_date: Optional[str] = None) -> SearchResult:
    return SearchResult(title=title, snippet=snippet, url=url, published_date=published_date, source='fake')


def outage(query: str):
    raise SourceUnavailableError('fake', f"Search failed for {query}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Tests never see the developer's real keys or overrides."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def sample_context() -> SolutionContext:
    return SolutionContext(
        problem="Small retailers lose sales because inventory counts drift",
        solution_id="acme_stock",
        solution_title="Acme Stock",
        solution_summary="Inventory forecasting for independent retail shops",
        target_users=["retail owners"],
        keywords=["inventory management", "stock tracking"]
    )


@pytest.fixture
def no_wait_limiter() -> RateLimiter:
    return RateLimiter(min_interval=0.0)


@pytest.fixture
def no_retry() -> RetryPolicy:
    return RetryPolicy(max_retries=0, base_delay=0.0)


@pytest.fixture
def make_text_analysis(no_wait_limiter):
    def factory(llm: FakeLLM) -> TextAnalysisService:
        return TextAnalysisService(llm, no_wait_limiter)
    return factory


@pytest.fixture
def make_web_search(config, no_retry):
    def factory(handler: Callable[[str], List[SearchResult]]) -> WebSearchClient:
        return WebSearchClient(config, provider=FakeSearchProvider(handler), retry_policy=no_retry)
    return factory
