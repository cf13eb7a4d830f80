"""
Text Helpers

Deduplication and keyword matching shared by the collection agents.
"""

import re
from typing import Iterable, List, Sequence, TypeVar

from ..models import SolutionContext

T = TypeVar("T")

# Communities that never carry product signal, whatever the keywords say
EXCLUDED_COMMUNITIES = frozenset([
    # Personal/relationship
    'relationship_advice', 'relationships', 'dating_advice', 'dating', 'marriage',
    'divorce', 'family', 'parenting', 'amitheasshole', 'advice',

    # Entertainment/media
    'movies', 'television', 'anime', 'sports',
    'nfl', 'nba', 'soccer', 'music', 'hiphopheads',

    # Politics/news
    'politics', 'worldnews', 'news', 'conservative', 'liberal',

    # Memes/humor
    'funny', 'memes', 'dankmemes', 'jokes', 'holup',

    # NSFW/adult
    'nsfw', 'askredditafterdark',

    # Too broad, low signal
    'askreddit', 'tifu', 'casualconversation', 'nostupidquestions',
    'explainlikeimfive', 'todayilearned', 'showerthoughts',
])

# Long words that carry no domain meaning
STOPWORDS = frozenset([
    'that', 'this', 'with', 'from', 'have', 'been', 'their', 'about', 'would',
    'there', 'which', 'these', 'those', 'other', 'could', 'should', 'being',
    'where', 'while', 'after', 'before', 'because', 'without', 'through',
    'into', 'onto', 'them', 'they', 'what', 'when', 'will', 'more', 'most',
    'many', 'much', 'some', 'such', 'than', 'then', 'very', 'also', 'just',
    'help', 'helps', 'using', 'based', 'every', 'often', 'still',
])

MIN_DERIVED_WORD_LENGTH = 5

_WORD_RE = re.compile(r"[a-z0-9]+")


def tokenize(text: str) -> List[str]:
    """Lowercase words with punctuation stripped."""
    return _WORD_RE.findall(text.lower())


def dedupe_by_url(items: Iterable[T]) -> List[T]:
    """
    Drop items whose URL was already seen.

    First occurrence wins and the original order is kept. Items without a
    URL have no identity to compare, so they are all kept.
    """
    seen = set()
    unique = []
    for item in items:
        url = getattr(item, 'url')
        if not url:
            unique.append(item)
            continue
        if url in seen:
            continue
        seen.add(url)
        unique.append(item)
    return unique


def dedupe_strings(values: Iterable[str], case_sensitive: bool = True) -> List[str]:
    """Remove repeated strings, keeping first-seen order (and first spelling)."""
    seen = set()
    unique = []
    for value in values:
        key = value if case_sensitive else value.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(value)
    return unique


def derive_context_keywords(context: SolutionContext) -> List[str]:
    """
    Build the keyword set used by the static relevance filter.

    keywords ∪ words of 5+ chars from problem and solution summary
    ∪ target users, lowercased, deduplicated, stopwords removed.
    """
    candidates: List[str] = []
    candidates.extend(k.lower() for k in context.keywords)
    candidates.extend(
        w for w in tokenize(context.problem) if len(w) >= MIN_DERIVED_WORD_LENGTH
    )
    candidates.extend(
        w for w in tokenize(context.solution_summary) if len(w) >= MIN_DERIVED_WORD_LENGTH
    )
    candidates.extend(u.lower() for u in context.target_users)

    return [w for w in dedupe_strings(candidates) if w and w not in STOPWORDS]


def count_keyword_matches(text: str, keywords: Sequence[str]) -> int:
    """Number of distinct keywords that occur in text as whole words."""
    text = text.lower()
    count = 0
    for keyword in keywords:
        if re.search(rf"\b{re.escape(keyword)}\b", text):
            count += 1
    return count