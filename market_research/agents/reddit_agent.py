"""
Reddit Agent

Turns Reddit discussion into customer-voice topics.

Design:
- Problem-focused queries fanned out in parallel (RedditClient)
- Two-stage relevance filtering:
  1. Static: drop excluded communities; keep posts whose community name
     contains a context keyword, or whose text matches 2+ keywords
  2. Model-assisted yes/no check (off by default, fails open)
- Sequential classification through the shared rate limiter
- Deterministic aggregation by topic

Responsibilities:
1. Build queries and fetch posts
2. Filter out noise
3. Classify surviving posts
4. Aggregate into RedditTopicSummary list (sorted by mentions)
"""

from typing import Any, Dict, List

from ..llm import TextAnalysisService
from ..models import (
    SolutionContext, RedditPost, ClassifiedRedditPost, RedditTopicSummary,
    RedditAgentOutput, RedditDirection, Intensity, INTENSITY_PRIORITY
)
from ..sources import RedditClient
from ..utils.query_builders import build_reddit_queries
from ..utils.text import (
    EXCLUDED_COMMUNITIES, derive_context_keywords, count_keyword_matches, dedupe_by_url
)

MAX_SAMPLE_QUOTES = 3
QUOTE_BODY_LENGTH = 100
MIN_CONTENT_KEYWORD_MATCHES = 2


# ============================================================================
# RELEVANCE FILTER
# ============================================================================

def filter_relevant_posts(posts: List[RedditPost], context: SolutionContext) -> List[RedditPost]:
    """
    Static relevance filter (no model calls).

    A post is kept when its community is not excluded and either the
    community name contains a derived keyword or the title+body contains
    at least two derived keywords as whole words.
    """
    keywords = derive_context_keywords(context)

    kept = []
    for post in posts:
        community = post.subreddit.lower()

        if community in EXCLUDED_COMMUNITIES:
            continue

        if any(keyword in community for keyword in keywords):
            kept.append(post)
            continue

        content = f"{post.title} {post.body}"
        if count_keyword_matches(content, keywords) >= MIN_CONTENT_KEYWORD_MATCHES:
            kept.append(post)

    return kept


# ============================================================================
# AGGREGATION
# ============================================================================

def dominant_direction(posts: List[ClassifiedRedditPost]) -> RedditDirection:
    """Most frequent direction; ties go to the direction seen first."""
    counts: Dict[RedditDirection, int] = {}
    for post in posts:
        counts[post.direction] = counts.get(post.direction, 0) + 1

    best = RedditDirection.NEUTRAL_OBSERVATION
    best_count = 0
    for direction, count in counts.items():
        if count > best_count:
            best, best_count = direction, count
    return best


def dominant_intensity(posts: List[ClassifiedRedditPost]) -> Intensity:
    """Highest intensity present: any "high" makes the group "high"."""
    present = {post.intensity for post in posts}
    for intensity in INTENSITY_PRIORITY:
        if intensity in present:
            return intensity
    return Intensity.LOW


def format_quote(post: RedditPost) -> str:
    """
    Title plus up to 100 characters of body.

    Example:
        '"Inventory sync keeps breaking" - Every weekend our counts drift...'
    """
    excerpt = post.body[:QUOTE_BODY_LENGTH].strip() if post.body else ''
    if not excerpt:
        return post.title
    ellipsis = '...' if len(post.body) > QUOTE_BODY_LENGTH else ''
    return f"\"{post.title}\" - {excerpt}{ellipsis}"


def aggregate_by_topic(posts: List[ClassifiedRedditPost]) -> List[RedditTopicSummary]:
    """
    Group classified posts by topic and summarize each group.

    Quotes come from the most upvoted posts (ties keep original order);
    topics are sorted by mention count, descending (ties keep first-seen
    order).
    """
    groups: Dict[str, List[ClassifiedRedditPost]] = {}
    for post in posts:
        groups.setdefault(post.topic, []).append(post)

    topics = []
    for name, group in groups.items():
        by_engagement = sorted(group, key=lambda p: p.score or 0, reverse=True)
        topics.append(RedditTopicSummary(
            name=name,
            mentions=len(group),
            dominant_direction=dominant_direction(group),
            dominant_intensity=dominant_intensity(group),
            sample_quotes=[format_quote(p) for p in by_engagement[:MAX_SAMPLE_QUOTES]]
        ))

    topics.sort(key=lambda t: t.mentions, reverse=True)
    return topics


# ============================================================================
# AGENT
# ============================================================================

class RedditAgent:
    """
    Customer-voice research over Reddit.

    Why return empty output instead of raising?
    - Reddit is one of three sources; the report is still useful without it
    """

    def __init__(
        self,
        reddit_client: RedditClient,
        text_analysis: TextAnalysisService,
        config: Dict[str, Any]
    ):
        """
        Initialize Reddit Agent.

        Args:
            reddit_client: Authenticated Reddit search client
            text_analysis: Shared Text Analysis Service
            config: Configuration dict (from config.yaml)
        """
        self.reddit = reddit_client
        self.text_analysis = text_analysis

        agent_config = config['agents']['reddit']
        self.posts_per_query = agent_config.get('posts_per_query', 10)
        self.min_queries = agent_config.get('min_queries', 3)
        self.max_queries = agent_config.get('max_queries', 5)
        self.enable_llm_filter = agent_config.get('enable_llm_relevance_filter', False)
        self.communities = list(agent_config.get('communities') or [])

    async def run(self, context: SolutionContext) -> RedditAgentOutput:
        """
        Fetch, filter, classify and aggregate Reddit posts.

        Returns:
            RedditAgentOutput (empty on any failure)
        """
        print(f"\n[Reddit] Researching customer voice for: {context.solution_title}")
        print(f"[Reddit] Keywords: {', '.join(context.keywords)}")

        try:
            # Step 1: Queries
            queries = build_reddit_queries(
                context.keywords, context.problem,
                min_queries=self.min_queries, max_queries=self.max_queries
            )
            print(f"[Reddit] Generated {len(queries)} queries")

            # Step 2: Fetch (site-wide, plus targeted communities if configured)
            posts = await self.reddit.fetch_posts(queries, self.posts_per_query)
            if self.communities and queries:
                community_posts = await self.reddit.search_communities(
                    queries[0], self.communities, self.posts_per_query
                )
                posts = dedupe_by_url(posts + community_posts)
            print(f"[Reddit] Fetched {len(posts)} posts")

            # Step 3: Static filter
            filtered = filter_relevant_posts(posts, context)
            print(f"[Reddit] After community/keyword filter: {len(filtered)} posts "
                  f"(removed {len(posts) - len(filtered)})")

            if not filtered:
                print("[Reddit] No relevant posts, returning empty result")
                return RedditAgentOutput.empty()

            # Step 4: Optional model filter
            if self.enable_llm_filter:
                filtered = await self.filter_with_llm(filtered, context)
                if not filtered:
                    print("[Reddit] No posts survived the LLM filter, returning empty result")
                    return RedditAgentOutput.empty()
            else:
                print("[Reddit] Skipping LLM relevance filter (disabled in config)")

            # Step 5: Classify, one call at a time
            print(f"[Reddit] Classifying {len(filtered)} posts...")
            classified = []
            for post in filtered:
                label = await self.text_analysis.classify_post(post)
                classified.append(ClassifiedRedditPost(
                    **post.model_dump(),
                    topic=label.topic,
                    direction=label.direction,
                    intensity=label.intensity
                ))

            # Step 6: Aggregate
            topics = aggregate_by_topic(classified)
            print(f"[Reddit] ✓ {len(topics)} topics from {len(classified)} posts")

            return RedditAgentOutput(total_items=len(classified), topics=topics)

        except Exception as e:
            print(f"[Reddit] Error: {e}")
            return RedditAgentOutput.empty()

    async def filter_with_llm(self, posts: List[RedditPost], context: SolutionContext) -> List[RedditPost]:
        """
        Ask the model whether each post is relevant.

        Fails open: a post whose check errors out is kept.
        """
        print(f"[Reddit] Checking relevance of {len(posts)} posts with LLM...")

        kept = []
        for post in posts:
            try:
                if await self.text_analysis.check_relevance(post, context):
                    kept.append(post)
            except Exception as e:
                print(f"  ⚠️  Relevance check failed for \"{post.title[:60]}\", keeping it: {e}")
                kept.append(post)

        print(f"[Reddit] LLM filter kept {len(kept)}/{len(posts)} posts")
        return kept
