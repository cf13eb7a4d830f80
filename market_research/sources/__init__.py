"""
Source Clients

Reddit and web search adapters with token caching, retry and fan-out.
"""

from .retry import RetryPolicy, SearchOutcome, retry_with_backoff
from .reddit_client import RedditClient, RedditAuthToken
from .web_search import (
    WebSearchClient,
    TavilySearchProvider,
    SerperSearchProvider,
    choose_provider_name,
    select_search_provider,
    normalize_date
)

__all__ = [
    'RetryPolicy',
    'SearchOutcome',
    'retry_with_backoff',
    'RedditClient',
    'RedditAuthToken',
    'WebSearchClient',
    'TavilySearchProvider',
    'SerperSearchProvider',
    'choose_provider_name',
    'select_search_provider',
    'normalize_date',
]
