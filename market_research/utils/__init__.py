"""
Utilities

Configuration loading, query builders, and text helpers.
"""

from .config import (
    DEFAULT_CONFIG,
    load_config,
    validate_config,
    ensure_valid_config
)
from .query_builders import (
    extract_key_phrase,
    build_reddit_queries,
    build_trend_queries,
    build_competitor_discovery_query,
    build_competitor_profile_query,
    enhance_trend_query
)
from .text import (
    EXCLUDED_COMMUNITIES,
    STOPWORDS,
    tokenize,
    dedupe_by_url,
    dedupe_strings,
    derive_context_keywords,
    count_keyword_matches
)

__all__ = [
    # Config
    'DEFAULT_CONFIG',
    'load_config',
    'validate_config',
    'ensure_valid_config',

    # Query builders
    'extract_key_phrase',
    'build_reddit_queries',
    'build_trend_queries',
    'build_competitor_discovery_query',
    'build_competitor_profile_query',
    'enhance_trend_query',

    # Text
    'EXCLUDED_COMMUNITIES',
    'STOPWORDS',
    'tokenize',
    'dedupe_by_url',
    'dedupe_strings',
    'derive_context_keywords',
    'count_keyword_matches',
]
