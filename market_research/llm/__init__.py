"""
LLM Layer

Multi-provider wrapper, rate limiting, JSON extraction, prompt templates,
and the Text Analysis Service built on top of them.
"""

from .providers import LLMProvider
from .rate_limiter import RateLimiter
from .structured_output import (
    safe_json_parse,
    coerce_string_list,
    coerce_text
)
from .prompts import (
    JSON_ONLY_SYSTEM_PROMPT,
    CLASSIFY_POST_PROMPT,
    RELEVANCE_CHECK_PROMPT,
    EXTRACT_COMPETITOR_NAMES_PROMPT,
    ANALYZE_COMPETITOR_PROMPT,
    ANALYZE_TREND_PROMPT,
    CONNECTION_CHECK_PROMPT,
    format_search_results_for_prompt
)
from .text_analysis import (
    TextAnalysisService,
    PostClassification,
    CompetitorAnalysis,
    TrendAnalysis
)

__all__ = [
    # Provider
    "LLMProvider",
    "RateLimiter",

    # Structured output
    "safe_json_parse",
    "coerce_string_list",
    "coerce_text",

    # Prompts
    "JSON_ONLY_SYSTEM_PROMPT",
    "CLASSIFY_POST_PROMPT",
    "RELEVANCE_CHECK_PROMPT",
    "EXTRACT_COMPETITOR_NAMES_PROMPT",
    "ANALYZE_COMPETITOR_PROMPT",
    "ANALYZE_TREND_PROMPT",
    "CONNECTION_CHECK_PROMPT",
    "format_search_results_for_prompt",

    # Text analysis
    "TextAnalysisService",
    "PostClassification",
    "CompetitorAnalysis",
    "TrendAnalysis",
]
