"""
Text Analysis Service

The pipeline's only semantic dependency: classify posts, judge relevance,
extract competitor names, and analyze competitors and trends. Everything
else in the pipeline is deterministic.

Design:
- Every call waits on the shared RateLimiter, then runs the blocking
  LLMProvider call in a worker thread
- Responses are parsed with safe_json_parse and coerced field by field
- No retries: on failure each method returns its documented defaults
  (check_relevance is the exception; it raises so the caller can fail open)

Defaults:
- classify_post: call failure → other / neutral_observation / low;
  unparseable response or invalid field → other / neutral_observation / medium
- extract_competitor_names: failure → []
- analyze_competitor: failure or bad field → empty lists
- analyze_trend: failure → title[:50] / stable / neutral /
  "Unable to analyze trend impact."
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import MalformedOutputError
from ..models import (
    SolutionContext, SearchResult, RedditPost,
    RedditDirection, Intensity, TrendDirection, TrendStance, coerce_label
)
from ..utils.text import dedupe_strings
from .providers import LLMProvider
from .rate_limiter import RateLimiter
from .structured_output import safe_json_parse, coerce_string_list, coerce_text
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

DEFAULT_TOPIC = "other"
TREND_FAILURE_IMPLICATION = "Unable to analyze trend impact."
TREND_MISSING_IMPLICATION = "Unable to determine impact on this solution."
TREND_NAME_LENGTH = 50
RELEVANCE_BODY_LENGTH = 500


@dataclass
class PostClassification:
    topic: str
    direction: RedditDirection
    intensity: Intensity
    reasoning: Optional[str] = None


@dataclass
class CompetitorAnalysis:
    relevant_features: List[str] = field(default_factory=list)
    unique_edges: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)


@dataclass
class TrendAnalysis:
    name: str
    direction: TrendDirection
    stance: TrendStance
    implication: str
    reasoning: Optional[str] = None


class TextAnalysisService:
    """
    Rate-limited, failure-tolerant model calls for the collection agents.

    Example:
        service = TextAnalysisService(LLMProvider(config), RateLimiter(4.0))
        label = await service.classify_post(post)
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        rate_limiter: RateLimiter,
        task_complexity: str = "simple",
        temperature: Optional[float] = None
    ):
        """
        Args:
            llm_provider: LLM provider (anything with a compatible generate())
            rate_limiter: Limiter shared by every agent in the run
            task_complexity: Model tier used for all calls
            temperature: Override the tier's default temperature
        """
        self.llm = llm_provider
        self.rate_limiter = rate_limiter
        self.task_complexity = task_complexity
        self.temperature = temperature

    async def _complete(self, prompt: str) -> Dict[str, Any]:
        """
        One rate-limited model call, parsed to a JSON object.

        Raises:
            MalformedOutputError: If the response holds no JSON object
            Exception: Whatever the provider raised
        """
        await self.rate_limiter.wait()

        messages = [
            {"role": "system", "content": JSON_ONLY_SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]

        response = await asyncio.to_thread(
            self.llm.generate,
            messages=messages,
            task_complexity=self.task_complexity,
            temperature=self.temperature,
            json_mode=True
        )

        return safe_json_parse(response['content'])

    # ========================================================================
    # REDDIT
    # ========================================================================

    async def classify_post(self, post: RedditPost) -> PostClassification:
        """Label a post with topic, direction and intensity."""
        prompt = CLASSIFY_POST_PROMPT.format(title=post.title or '', body=post.body or '')

        try:
            parsed = await self._complete(prompt)
        except MalformedOutputError as e:
            print(f"[TextAnalysis] ⚠️  Unparseable classification for \"{post.title[:60]}\", using defaults: {e}")
            return PostClassification(
                topic=DEFAULT_TOPIC,
                direction=RedditDirection.NEUTRAL_OBSERVATION,
                intensity=Intensity.MEDIUM,
                reasoning=f"Unparseable response: {e}"
            )
        except Exception as e:
            print(f"[TextAnalysis] ✗ Classification failed for \"{post.title[:60]}\": {e}")
            return PostClassification(
                topic=DEFAULT_TOPIC,
                direction=RedditDirection.NEUTRAL_OBSERVATION,
                intensity=Intensity.LOW,
                reasoning=f"Classification failed: {e}"
            )

        topic = coerce_text(parsed.get('topic'), DEFAULT_TOPIC)
        direction = coerce_label(parsed.get('direction'), RedditDirection, RedditDirection.NEUTRAL_OBSERVATION)
        intensity = coerce_label(parsed.get('intensity'), Intensity, Intensity.MEDIUM)

        defaulted = []
        if topic == DEFAULT_TOPIC and parsed.get('topic') != DEFAULT_TOPIC:
            defaulted.append(f"topic={parsed.get('topic')!r}")
        if direction.value != parsed.get('direction'):
            defaulted.append(f"direction={parsed.get('direction')!r}")
        if intensity.value != parsed.get('intensity'):
            defaulted.append(f"intensity={parsed.get('intensity')!r}")
        if defaulted:
            print(f"[TextAnalysis] ⚠️  Coerced classification fields: {', '.join(defaulted)}")

        reasoning = parsed.get('reasoning')
        return PostClassification(
            topic=topic,
            direction=direction,
            intensity=intensity,
            reasoning=reasoning if isinstance(reasoning, str) else None
        )

    async def check_relevance(self, post: RedditPost, context: SolutionContext) -> bool:
        """
        Strict yes/no: is this post about the problem area?

        Raises:
            Exception: On call or parse failure. Callers keep the post.
        """
        prompt = RELEVANCE_CHECK_PROMPT.format(
            problem_area=f"{context.problem}. Focus area: {', '.join(context.keywords)}",
            target_users=', '.join(context.target_users),
            title=post.title,
            body=post.body[:RELEVANCE_BODY_LENGTH] or '(no body text)',
            subreddit=post.subreddit
        )

        parsed = await self._complete(prompt)
        return parsed.get('relevant') is True

    # ========================================================================
    # COMPETITORS
    # ========================================================================

    async def extract_competitor_names(
        self,
        results: List[SearchResult],
        context: SolutionContext,
        max_results_in_prompt: int = 10,
        max_names: int = 5
    ) -> List[str]:
        """
        Pull real company/product names out of raw search hits.

        Names are trimmed, deduplicated case-insensitively (first spelling
        wins), the solution's own title is removed, and the list is capped
        at max_names.

        Returns:
            Competitor names, or [] on any failure
        """
        prompt = EXTRACT_COMPETITOR_NAMES_PROMPT.format(
            solution_context=context.summary_for_prompt(),
            search_results=format_search_results_for_prompt(results, limit=max_results_in_prompt),
            solution_title=context.solution_title
        )

        try:
            parsed = await self._complete(prompt)
        except Exception as e:
            print(f"[TextAnalysis] ✗ Competitor name extraction failed: {e}")
            return []

        raw = parsed.get('competitors')
        names = coerce_string_list(raw)
        if not isinstance(raw, list) or len(names) != len(raw):
            print(f"[TextAnalysis] ⚠️  Discarded invalid competitor entries from: {raw!r}")

        own_name = context.solution_title.lower()
        names = [n for n in dedupe_strings(names, case_sensitive=False) if n.lower() != own_name]

        return names[:max_names]

    async def analyze_competitor(
        self,
        name: str,
        competitor_info: str,
        context: SolutionContext
    ) -> CompetitorAnalysis:
        """Features, unique edges and weaknesses of one competitor."""
        prompt = ANALYZE_COMPETITOR_PROMPT.format(
            solution_context=context.summary_for_prompt(),
            competitor_name=name,
            competitor_info=competitor_info
        )

        try:
            parsed = await self._complete(prompt)
        except Exception as e:
            print(f"[TextAnalysis] ✗ Analysis failed for competitor {name}: {e}")
            return CompetitorAnalysis()

        missing = [
            key for key in ('relevant_features', 'unique_edges', 'weaknesses')
            if not isinstance(parsed.get(key), list)
        ]
        if missing:
            print(f"[TextAnalysis] ⚠️  {name}: defaulted {', '.join(missing)} to []")

        return CompetitorAnalysis(
            relevant_features=coerce_string_list(parsed.get('relevant_features')),
            unique_edges=coerce_string_list(parsed.get('unique_edges')),
            weaknesses=coerce_string_list(parsed.get('weaknesses'))
        )

    # ========================================================================
    # INDUSTRY TRENDS
    # ========================================================================

    async def analyze_trend(self, result: SearchResult, context: SolutionContext) -> TrendAnalysis:
        """Name, direction, stance and implication of one trend article."""
        fallback_name = result.title[:TREND_NAME_LENGTH]

        prompt = ANALYZE_TREND_PROMPT.format(
            solution_context=context.summary_for_prompt(),
            title=result.title,
            snippet=result.snippet,
            url=result.url,
            published_date=result.published_date or 'Recent'
        )

        try:
            parsed = await self._complete(prompt)
        except Exception as e:
            print(f"[TextAnalysis] ✗ Trend analysis failed for \"{result.title[:60]}\": {e}")
            return TrendAnalysis(
                name=fallback_name,
                direction=TrendDirection.STABLE,
                stance=TrendStance.NEUTRAL,
                implication=TREND_FAILURE_IMPLICATION,
                reasoning=f"Analysis failed: {e}"
            )

        implication = coerce_text(parsed.get('implication'), TREND_MISSING_IMPLICATION)
        if implication == TREND_MISSING_IMPLICATION:
            print(f"[TextAnalysis] ⚠️  Trend analysis returned no implication for \"{result.title[:60]}\"")

        reasoning = parsed.get('reasoning')
        return TrendAnalysis(
            name=coerce_text(parsed.get('name'), fallback_name),
            direction=coerce_label(parsed.get('direction'), TrendDirection, TrendDirection.STABLE),
            stance=coerce_label(parsed.get('stance'), TrendStance, TrendStance.NEUTRAL),
            implication=implication,
            reasoning=reasoning if isinstance(reasoning, str) else None
        )

    # ========================================================================
    # HEALTH CHECK
    # ========================================================================

    async def check_connection(self) -> bool:
        """True when the model answers a trivial JSON request correctly."""
        try:
            parsed = await self._complete(CONNECTION_CHECK_PROMPT)
        except Exception as e:
            print(f"[TextAnalysis] ✗ LLM connection test failed: {e}")
            return False
        return parsed.get('status') == 'OK'
