"""
Web Search Client

Competitor and industry-trend research over one of two interchangeable
search providers, normalized into SearchResult records.

Design:
- Tavily through the tavily-python SDK, Serper through its REST API
- Provider choice is a pure function of configuration: the preferred
  provider when its key is present, otherwise whichever key exists
- Provider errors surface as SourceUnavailableError and go through the
  same retry/backoff helper as Reddit
"""

import asyncio
import os
from typing import Any, Dict, List, Optional

import requests
from dateutil import parser as date_parser
from tavily import TavilyClient

from ..exceptions import ConfigurationError, SourceUnavailableError
from ..models import SearchResult
from ..utils.text import dedupe_by_url
from .retry import RetryPolicy, SearchOutcome, retry_with_backoff

SUPPORTED_PROVIDERS = ('tavily', 'serper')


def map_results(items: Any, to_result, source: str) -> List[SearchResult]:
    """
    Map raw provider hits to SearchResults.

    Hits that do not have the expected shape are skipped with a warning;
    a hit list that is not a list at all fails the whole search.
    """
    if not isinstance(items, list):
        raise SourceUnavailableError(source, f"Unexpected search response: results is {type(items).__name__}")

    results = []
    for item in items:
        try:
            results.append(to_result(item))
        except (AttributeError, TypeError, ValueError) as e:
            print(f"  ⚠️  Skipping malformed {source} result: {e}")
    return results


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Convert a provider date to ISO-8601 when it parses.

    Relative dates ("3 days ago") and other free text are kept as-is.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return date_parser.parse(value).isoformat()
    except (ValueError, OverflowError):
        return value


# ============================================================================
# PROVIDERS
# ============================================================================

class TavilySearchProvider:
    """Tavily search (https://tavily.com)."""

    name = 'tavily'

    def __init__(self, api_key: str, search_depth: str = 'basic', client: Optional[Any] = None):
        self.search_depth = search_depth
        self.client = client or TavilyClient(api_key=api_key)

    def search(self, query: str, max_results: int = 10) -> List[SearchResult]:
        try:
            response = self.client.search(
                query=query,
                search_depth=self.search_depth,
                max_results=max_results
            )
        except Exception as e:
            # The SDK raises its own error types plus raw requests errors
            raise SourceUnavailableError(self.name, f"Search failed: {e}")

        if not isinstance(response, dict):
            raise SourceUnavailableError(self.name, f"Unexpected search response: {type(response).__name__}")

        return map_results(response.get('results') or [], self._to_result, self.name)

    def _to_result(self, item: Dict[str, Any]) -> SearchResult:
        return SearchResult(
            title=item.get('title') or '',
            snippet=item.get('content') or '',
            url=item.get('url') or '',
            published_date=normalize_date(item.get('published_date')),
            source=self.name
        )


class SerperSearchProvider:
    """Serper Google search API (https://serper.dev)."""

    name = 'serper'

    def __init__(self, api_key: str, api_url: str = "https://google.serper.dev/search", timeout: float = 30):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    def search(self, query: str, max_results: int = 10) -> List[SearchResult]:
        try:
            response = requests.post(
                self.api_url,
                headers={
                    'X-API-KEY': self.api_key,
                    'Content-Type': 'application/json',
                },
                json={'q': query, 'num': max_results},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise SourceUnavailableError(self.name, f"Search request failed: {e}")

        if not response.ok:
            raise SourceUnavailableError(
                self.name,
                f"Search failed: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code
            )

        try:
            organic = response.json().get('organic') or []
        except (ValueError, AttributeError) as e:
            raise SourceUnavailableError(self.name, f"Unexpected search response: {e}")

        return map_results(organic, self._to_result, self.name)

    def _to_result(self, item: Dict[str, Any]) -> SearchResult:
        return SearchResult(
            title=item.get('title') or '',
            snippet=item.get('snippet') or '',
            url=item.get('link') or '',
            published_date=normalize_date(item.get('date')),
            source=item.get('source') or self.name
        )


def choose_provider_name(preferred: str, has_tavily_key: bool, has_serper_key: bool) -> str:
    """
    Decide which provider to use.

    Preferred provider wins when its key is present; otherwise the one that
    has a key. Tavily is the default preference.

    Raises:
        ConfigurationError: If neither key is available
    """
    available = {'tavily': has_tavily_key, 'serper': has_serper_key}
    preferred = (preferred or 'tavily').lower()
    if preferred not in available:
        raise ConfigurationError(
            f"Unknown web search provider '{preferred}' (expected one of {', '.join(SUPPORTED_PROVIDERS)})"
        )

    if available[preferred]:
        return preferred
    for name in SUPPORTED_PROVIDERS:
        if available[name]:
            return name

    raise ConfigurationError("Either TAVILY_API_KEY or SERPER_API_KEY is required but neither is set")


def select_search_provider(config: Dict[str, Any]):
    """Build the provider chosen by choose_provider_name from config + environment."""
    web_config = config['web_search']
    tavily_key = os.getenv('TAVILY_API_KEY')
    serper_key = os.getenv('SERPER_API_KEY')

    name = choose_provider_name(
        web_config.get('preferred_provider', 'tavily'),
        has_tavily_key=bool(tavily_key),
        has_serper_key=bool(serper_key)
    )

    if name == 'tavily':
        return TavilySearchProvider(tavily_key, search_depth=web_config.get('search_depth', 'basic'))
    return SerperSearchProvider(
        serper_key,
        api_url=web_config.get('serper_api_url', "https://google.serper.dev/search"),
        timeout=config['api'].get('request_timeout_seconds', 30)
    )


# ============================================================================
# CLIENT
# ============================================================================

class WebSearchClient:
    """
    Provider-agnostic web search with retry and parallel fan-out.

    Example:
        client = WebSearchClient(config)
        outcome = await client.search_with_retry("Acme features pricing review comparison")
    """

    def __init__(
        self,
        config: Dict[str, Any],
        provider: Optional[Any] = None,
        retry_policy: Optional[RetryPolicy] = None
    ):
        """
        Args:
            config: Configuration dict (from config.yaml)
            provider: Search provider (default: select_search_provider(config))
            retry_policy: Override retry settings from config['api']
        """
        self.provider = provider or select_search_provider(config)
        self.retry_policy = retry_policy or RetryPolicy.from_config(config)

    @property
    def provider_name(self) -> str:
        return getattr(self.provider, 'name', type(self.provider).__name__)

    def search(self, query: str, max_results: int = 10) -> List[SearchResult]:
        """Single search, no retry. Raises SourceUnavailableError."""
        return self.provider.search(query, max_results)

    async def search_with_retry(self, query: str, max_results: int = 10) -> SearchOutcome[List[SearchResult]]:
        return await retry_with_backoff(
            lambda: asyncio.to_thread(self.search, query, max_results),
            self.retry_policy,
            label=f"{self.provider_name} search '{query}'"
        )

    async def search_many(self, queries: List[str], max_results: int = 10) -> List[SearchResult]:
        """
        Run queries in parallel and merge their hits.

        Failed queries are reported and contribute nothing; results are
        deduplicated by URL (first occurrence wins, query order kept).
        """
        if not queries:
            return []

        print(f"[WebSearch] Running {len(queries)} searches via {self.provider_name}...")

        outcomes = await asyncio.gather(*(
            self.search_with_retry(query, max_results) for query in queries
        ))

        merged: List[SearchResult] = []
        for query, outcome in zip(queries, outcomes):
            if outcome.success:
                merged.extend(outcome.data or [])
                print(f"  ✓ \"{query}\" returned {len(outcome.data or [])} results")
            else:
                print(f"  ✗ \"{query}\" failed: {outcome.error}")

        unique = dedupe_by_url(merged)
        print(f"[WebSearch] {len(unique)} unique results ({len(merged)} total)")
        return unique
