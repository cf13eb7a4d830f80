"""
Source Records

Normalized hits produced by the source clients. The URL is the identity of
a hit: every dedup step in the pipeline keys on it.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator

from .labels import RedditDirection, Intensity


class SearchResult(BaseModel):
    """A normalized web-search hit (Tavily or Serper)."""

    title: str = Field(description="Page title")

    snippet: str = Field(
        default="",
        description="Provider-supplied excerpt of the page content"
    )

    url: str = Field(description="Canonical URL, used as dedup key")

    published_date: Optional[str] = Field(
        default=None,
        description="Publication date as ISO-8601 when the provider reported one"
    )

    source: Optional[str] = Field(
        default=None,
        description="Provider or site label (e.g., 'tavily', 'serper', 'techcrunch.com')"
    )


class RedditPost(SearchResult):
    """
    A Reddit submission returned by search.

    A SearchResult specialization: the self text doubles as the snippet and
    the creation time as the published date.

    Lifecycle: created by RedditClient, labelled by classification
    (becomes ClassifiedRedditPost), consumed once by topic aggregation.
    """

    title: str = Field(description="Post title")

    body: str = Field(
        default="",
        description="Self text; empty for link posts"
    )

    subreddit: str = Field(description="Community the post was made in")

    created_at: str = Field(description="Creation time, ISO-8601 UTC")

    url: str = Field(description="https://www.reddit.com + permalink, used as dedup key")

    score: int = Field(default=0, description="Net upvotes, used as engagement signal")

    num_comments: int = Field(default=0, description="Number of comments")

    source: Optional[str] = Field(default="reddit", description="Always 'reddit'")

    @model_validator(mode="before")
    @classmethod
    def fill_search_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if not data.get("snippet"):
                data["snippet"] = data.get("body") or ""
            if not data.get("published_date"):
                data["published_date"] = data.get("created_at")
        return data


class ClassifiedRedditPost(RedditPost):
    """A RedditPost annotated by the Text Analysis Service."""

    topic: str = Field(description="Topic label (e.g., pricing, onboarding, UX)")

    direction: RedditDirection = Field(description="Pain point, demand signal, or neutral")

    intensity: Intensity = Field(description="Strength of the language used")
