"""
Query Builders

Pure functions that turn a SolutionContext's keywords, problem statement and
target users into search queries. No network, no model calls.

Design:
- Fixed phrase templates, filled in a fixed order (deterministic output)
- Deduplicate by exact string, then truncate to max_queries
- Pad to min_queries with bare keywords (then fallback templates) whenever
  at least one keyword is present
"""

from typing import List, Optional, Sequence

from .text import tokenize, dedupe_strings

# Words skipped when picking a key phrase out of the problem statement
FILLER_WORDS = frozenset([
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'as', 'is', 'are', 'was', 'were', 'be',
    'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did', 'will',
    'would', 'should', 'could', 'may', 'might', 'must', 'can', 'that',
    'this', 'these', 'those', 'it', 'its', 'their', 'there', 'they',
])

COMPETITOR_DISCOVERY_SUFFIX = "solutions platforms companies alternatives"
COMPETITOR_PROFILE_SUFFIX = "features pricing review comparison"
DEFAULT_TARGET_USER = "professionals"
DEFAULT_TREND_SUFFIX = "news trends 2024 2025"


def _clean(values: Optional[Sequence[str]]) -> List[str]:
    return [v.strip() for v in (values or []) if v and v.strip()]


def _bound(
    queries: List[str],
    keywords: List[str],
    min_queries: int,
    max_queries: int,
    fallback_templates: Sequence[str]
) -> List[str]:
    """
    Dedupe, truncate to max, then pad up to min.

    Padding order: each keyword alone, then each fallback template filled
    with the primary keyword. Padding never pushes past max_queries.
    """
    bounded = dedupe_strings(queries)[:max_queries]

    if not keywords:
        return bounded

    padding = list(keywords) + [t.format(keyword=keywords[0]) for t in fallback_templates]
    for candidate in padding:
        if len(bounded) >= min(min_queries, max_queries):
            break
        if candidate not in bounded:
            bounded.append(candidate)

    return bounded


def extract_key_phrase(text: str, max_words: int = 3) -> str:
    """
    Pull the core concept out of a free-text problem statement.

    Lowercases, strips punctuation, keeps words longer than 3 characters that
    are not filler words, and joins the first max_words of them.

    Example:
        "Small retailers can't keep track of their inventory"
        → "small retailers keep"
    """
    words = [w for w in tokenize(text) if len(w) > 3 and w not in FILLER_WORDS]
    return ' '.join(words[:max_words])


def build_reddit_queries(
    keywords: Sequence[str],
    problem: str,
    min_queries: int = 3,
    max_queries: int = 5
) -> List[str]:
    """
    Build problem-focused Reddit search queries.

    Templates (in order):
        "<kw> pain points", "struggling with <kw>", "problems with <phrase>",
        "<kw> alternatives", "<kw2> <kw> issues", "frustrated with <phrase>",
        "need help with <kw>"

    Returns:
        Between min_queries and max_queries unique queries when any keyword
        is given
    """
    keywords = _clean(keywords)
    phrase = extract_key_phrase(problem or "")
    primary = keywords[0] if keywords else None

    queries = []
    if primary:
        queries.append(f"{primary} pain points")
        queries.append(f"struggling with {primary}")
    if phrase:
        queries.append(f"problems with {phrase}")
    if primary:
        queries.append(f"{primary} alternatives")
    if len(keywords) >= 2:
        queries.append(f"{keywords[1]} {primary} issues")
    if phrase:
        queries.append(f"frustrated with {phrase}")
    if primary:
        queries.append(f"need help with {primary}")

    return _bound(
        queries, keywords, min_queries, max_queries,
        fallback_templates=["{keyword} complaints", "{keyword} recommendations", "best {keyword}"]
    )


def build_trend_queries(
    keywords: Sequence[str],
    target_users: Sequence[str],
    problem: str,
    min_queries: int = 3,
    max_queries: int = 5
) -> List[str]:
    """
    Build industry trend / news queries.

    Per keyword (first two): "<kw> trends", "<kw> regulation".
    Then "<first target user> trends", "<problem words> industry trends"
    and "<kw1> <kw2> industry outlook".
    """
    keywords = _clean(keywords)
    target_users = _clean(target_users)

    queries = []
    for keyword in keywords[:2]:
        queries.append(f"{keyword} trends")
        queries.append(f"{keyword} regulation")

    if target_users:
        queries.append(f"{target_users[0]} trends")

    problem_words = [w for w in tokenize(problem or "") if len(w) > 5][:2]
    if problem_words:
        queries.append(f"{' '.join(problem_words)} industry trends")

    if len(keywords) >= 2:
        queries.append(f"{keywords[0]} {keywords[1]} industry outlook")

    return _bound(
        queries, keywords, min_queries, max_queries,
        fallback_templates=["{keyword} market", "{keyword} industry news"]
    )


def build_competitor_discovery_query(
    keywords: Sequence[str],
    target_users: Sequence[str]
) -> str:
    """
    One broad query used to find candidate competitor names.

    Example:
        ["inventory management", "retail"], ["SMB retailers"]
        → "inventory management retail SMB retailers solutions platforms companies alternatives"
    """
    keywords = _clean(keywords)
    target_users = _clean(target_users)
    target_user = target_users[0] if target_users else DEFAULT_TARGET_USER
    return f"{' '.join(keywords[:2])} {target_user} {COMPETITOR_DISCOVERY_SUFFIX}".strip()


def build_competitor_profile_query(name: str) -> str:
    return f"{name.strip()} {COMPETITOR_PROFILE_SUFFIX}"


def enhance_trend_query(query: str, suffix: str = DEFAULT_TREND_SUFFIX) -> str:
    """Bias a trend query toward recent news coverage."""
    return f"{query} {suffix}".strip()
