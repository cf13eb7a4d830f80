"""
Reddit Client

OAuth2 (client-credentials) access to Reddit search, normalized into
RedditPost records.

Design:
- Application-only token, cached on the client instance and refreshed
  60 seconds before Reddit says it expires
- Synchronous requests calls (one per search) run in worker threads;
  the async fan-out helpers gather them in parallel
- Every failure mode (auth, non-2xx, network, bad JSON) surfaces as
  SourceUnavailableError so the retry layer can classify it

Why a client object instead of module state?
- Token cache is testable (inject a clock, clear it between tests)
- Two clients never share credentials by accident
"""

import asyncio
import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import requests

from ..exceptions import ConfigurationError, SourceUnavailableError
from ..models import RedditPost
from ..utils.text import dedupe_by_url
from .retry import RetryPolicy, SearchOutcome, retry_with_backoff

TOKEN_SAFETY_MARGIN_SECONDS = 60
REDDIT_BASE_URL = "https://www.reddit.com"


@dataclass
class RedditAuthToken:
    access_token: str
    token_type: str
    expires_at: float  # clock() value after which the token is treated as stale
    scope: str = ""


class RedditClient:
    """
    Reddit search with token caching and retry.

    Example:
        client = RedditClient(config)
        posts = await client.fetch_posts(["inventory management pain points"])
    """

    def __init__(
        self,
        config: Dict[str, Any],
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize Reddit client.

        Args:
            config: Configuration dict (from config.yaml)
            client_id: OAuth app id (default: $REDDIT_CLIENT_ID)
            client_secret: OAuth app secret (default: $REDDIT_CLIENT_SECRET)
            retry_policy: Override retry settings from config['api']
            clock: Returns current time in seconds (injectable for tests)
        """
        reddit_config = config['agents']['reddit']

        self.client_id = client_id or os.getenv('REDDIT_CLIENT_ID')
        self.client_secret = client_secret or os.getenv('REDDIT_CLIENT_SECRET')
        if not self.client_id or not self.client_secret:
            raise ConfigurationError(
                "Reddit API credentials not configured. "
                "Please set REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET"
            )

        self.user_agent = reddit_config['user_agent']
        self.token_url = reddit_config['token_url']
        self.search_url = reddit_config['search_url']
        self.recency_window = reddit_config.get('recency_window', 'month')
        self.timeout = config['api'].get('request_timeout_seconds', 30)
        self.retry_policy = retry_policy or RetryPolicy.from_config(config)
        self.clock = clock

        self._token: Optional[RedditAuthToken] = None
        self._token_lock = threading.Lock()

    # ========================================================================
    # AUTHENTICATION
    # ========================================================================

    def ensure_valid_token(self) -> str:
        """
        Return a usable access token, fetching a new one if needed.

        Thread-safe: searches run in worker threads and may all find the
        cache empty at once; only one of them authenticates.
        """
        with self._token_lock:
            if self._token is not None and self.clock() < self._token.expires_at:
                return self._token.access_token

            self._token = self._request_token()
            return self._token.access_token

    def clear_token(self):
        """Drop the cached token; the next search re-authenticates."""
        with self._token_lock:
            self._token = None

    def _request_token(self) -> RedditAuthToken:
        try:
            response = requests.post(
                self.token_url,
                auth=(self.client_id, self.client_secret),
                data={'grant_type': 'client_credentials'},
                headers={'User-Agent': self.user_agent},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise SourceUnavailableError('reddit', f"Auth request failed: {e}")

        if not response.ok:
            raise SourceUnavailableError(
                'reddit',
                f"Auth failed: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailableError('reddit', f"Auth response was not JSON: {e}")

        if not data.get('access_token'):
            raise SourceUnavailableError('reddit', f"Auth response missing access_token: {data}")

        expires_in = float(data.get('expires_in', 3600))
        return RedditAuthToken(
            access_token=data['access_token'],
            token_type=data.get('token_type', 'bearer'),
            scope=data.get('scope', ''),
            expires_at=self.clock() + expires_in - TOKEN_SAFETY_MARGIN_SECONDS
        )

    # ========================================================================
    # SEARCH
    # ========================================================================

    def _search_endpoint(self, community: Optional[str]) -> str:
        if not community:
            return self.search_url
        base = self.search_url.rsplit('/search', 1)[0]
        return f"{base}/r/{community}/search"

    def search(
        self,
        query: str,
        limit: int = 25,
        community: Optional[str] = None
    ) -> List[RedditPost]:
        """
        Search Reddit once (no retry).

        Args:
            query: Search query string
            limit: Max posts to return
            community: Restrict the search to this subreddit

        Returns:
            Posts sorted by Reddit relevance, from the recency window

        Raises:
            SourceUnavailableError: On any auth, network or response failure
        """
        access_token = self.ensure_valid_token()

        params = {
            'q': query,
            'limit': str(limit),
            'sort': 'relevance',
            't': self.recency_window,
            'type': 'link',
        }
        if community:
            params['restrict_sr'] = 'true'

        try:
            response = requests.get(
                self._search_endpoint(community),
                params=params,
                headers={
                    'Authorization': f"Bearer {access_token}",
                    'User-Agent': self.user_agent,
                },
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise SourceUnavailableError('reddit', f"Search request failed: {e}")

        if response.status_code == 401:
            # Revoked or expired early; re-authenticate on the next attempt
            self.clear_token()

        if not response.ok:
            raise SourceUnavailableError(
                'reddit',
                f"Search failed: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code
            )

        try:
            children = response.json()['data']['children']
        except (ValueError, KeyError, TypeError) as e:
            raise SourceUnavailableError('reddit', f"Unexpected search response: {e}")
        if not isinstance(children, list):
            raise SourceUnavailableError('reddit', "Unexpected search response: children is not a list")

        # One bad listing item must not cost the rest of the page
        posts = []
        for child in children:
            try:
                posts.append(self._to_post(child.get('data') or {}))
            except (AttributeError, TypeError, ValueError, OverflowError, OSError) as e:
                print(f"  ⚠️  Skipping malformed Reddit post: {e}")
        return posts

    def _to_post(self, data: Dict[str, Any]) -> RedditPost:
        created = datetime.fromtimestamp(float(data.get('created_utc', 0)), tz=timezone.utc)
        return RedditPost(
            title=data.get('title') or '',
            body=data.get('selftext') or '',  # empty for link posts
            subreddit=data.get('subreddit') or '',
            created_at=created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            url=f"{REDDIT_BASE_URL}{data.get('permalink', '')}",
            score=int(data.get('score') or 0),
            num_comments=int(data.get('num_comments') or 0)
        )

    async def search_with_retry(
        self,
        query: str,
        limit: int = 25,
        community: Optional[str] = None
    ) -> SearchOutcome[List[RedditPost]]:
        """Search with exponential backoff; never raises for source failures."""
        label = f"Reddit search '{query}'" + (f" in r/{community}" if community else "")
        return await retry_with_backoff(
            lambda: asyncio.to_thread(self.search, query, limit, community),
            self.retry_policy,
            label=label
        )

    # ========================================================================
    # FAN-OUT
    # ========================================================================

    async def fetch_posts(self, queries: List[str], limit_per_query: int = 10) -> List[RedditPost]:
        """
        Run all queries in parallel and merge the results.

        Failed queries are reported and skipped; duplicates (same URL) keep
        their first occurrence.

        Raises:
            SourceUnavailableError: If every query failed
        """
        if not queries:
            return []

        print(f"[RedditClient] Fetching posts for {len(queries)} queries...")

        outcomes = await asyncio.gather(*(
            self.search_with_retry(query, limit_per_query) for query in queries
        ))

        all_posts: List[RedditPost] = []
        errors = []
        for query, outcome in zip(queries, outcomes):
            if outcome.success:
                all_posts.extend(outcome.data or [])
                print(f"  ✓ \"{query}\" returned {len(outcome.data or [])} posts")
            else:
                errors.append(f"\"{query}\": {outcome.error}")
                print(f"  ✗ \"{query}\" failed: {outcome.error}")

        if errors and len(errors) == len(queries):
            raise SourceUnavailableError('reddit', "All Reddit searches failed: " + "; ".join(errors))

        unique_posts = dedupe_by_url(all_posts)
        print(f"[RedditClient] {len(unique_posts)} unique posts "
              f"({len(all_posts)} total, {len(all_posts) - len(unique_posts)} duplicates removed)")

        return unique_posts

    async def search_communities(
        self,
        query: str,
        communities: List[str],
        limit_per_community: int = 10
    ) -> List[RedditPost]:
        """
        Run one query inside each of the given subreddits.

        Useful for targeted research when the relevant communities are known.
        Failed communities are skipped silently apart from the progress line.
        """
        if not communities:
            return []

        print(f"[RedditClient] Searching {len(communities)} communities for: \"{query}\"")

        outcomes = await asyncio.gather(*(
            self.search_with_retry(query, limit_per_community, community)
            for community in communities
        ))

        posts: List[RedditPost] = []
        for community, outcome in zip(communities, outcomes):
            if outcome.success:
                posts.extend(outcome.data or [])
                print(f"  ✓ r/{community} returned {len(outcome.data or [])} posts")
            else:
                print(f"  ✗ r/{community} failed: {outcome.error}")

        return dedupe_by_url(posts)
