"""
Prompt Templates for the Text Analysis Service

Centralizes all prompts for easy iteration and improvement.

Design principles:
- One small JSON object per answer, schema spelled out in the prompt
- Closed vocabularies listed explicitly (anything else is coerced later)
- Strictness where a wrong answer is worse than none (relevance, names)
"""

# =============================================================================
# SHARED
# =============================================================================

JSON_ONLY_SYSTEM_PROMPT = """You are a market research analyst helping a product manager evaluate a proposed solution.

Always answer with a single valid JSON object and nothing else (no markdown, no commentary)."""


# =============================================================================
# REDDIT POSTS
# =============================================================================

CLASSIFY_POST_PROMPT = """Analyze the following Reddit post and classify it according to these categories.

Post Title: {title}
Post Body: {body}

Extract:
1. Topic (one of: pricing, onboarding, reliability, UX, support, regulation, security, integration, performance, other)
2. Direction (one of: pain_point, demand_signal, neutral_observation)
   - pain_point: user is frustrated, blocked, or complaining
   - demand_signal: user is requesting a feature or showing a need
   - neutral_observation: descriptive or neutral discussion
3. Intensity (one of: low, medium, high) based on the language strength and urgency

Return your response in JSON format:
{{
  "topic": "string",
  "direction": "pain_point" | "demand_signal" | "neutral_observation",
  "intensity": "low" | "medium" | "high",
  "reasoning": "brief explanation"
}}"""

RELEVANCE_CHECK_PROMPT = """Determine if the following Reddit post is relevant to the problem area.

Problem Area: {problem_area}
Target Users: {target_users}

Reddit Post:
Title: {title}
Body: {body}
Subreddit: r/{subreddit}

A post is RELEVANT if it:
- Discusses actual problems, pain points, or frustrations in this domain
- Mentions needs, feature requests, or alternatives related to this area
- Shows user experiences with similar solutions

A post is NOT RELEVANT if it:
- Only mentions keywords tangentially (e.g., mentions "payment" but is about video game purchases)
- Is about entertainment, personal relationships, politics, or unrelated topics
- Is a meme, joke, or off-topic discussion

Be strict - when in doubt, mark as NOT relevant.

Return your response in JSON format:
{{
  "relevant": true | false
}}"""


# =============================================================================
# COMPETITORS
# =============================================================================

EXTRACT_COMPETITOR_NAMES_PROMPT = """You are analyzing web search results to identify competitors for a specific solution.

Solution Context:
{solution_context}

Web Search Results:
{search_results}

Task: Extract 2-5 real company or product names that compete in this space.

Guidelines:
1. Look for companies/products that serve the same target users with similar solutions
2. Include both direct competitors and adjacent solutions in the same domain
3. Extract actual company/product names from the search results
4. Do NOT include:
   - Generic payment processors (Stripe, PayPal, Square) UNLESS the solution is about payment processing
   - Generic terms like "software", "platform", "service", "AI", "technology"
   - The solution's own name ({solution_title})
5. Prioritize companies explicitly mentioned in multiple search results

Return ONLY valid JSON:
{{
  "competitors": ["Company1", "Company2"],
  "reasoning": "brief explanation"
}}"""

ANALYZE_COMPETITOR_PROMPT = """Analyze the following information about a competitor in the context of this solution:

Solution Context:
{solution_context}

Competitor: {competitor_name}

Competitor Information:
{competitor_info}

Extract:
1. Relevant features: features/capabilities related to the solution area
2. Unique edges: what they do especially well or differently
3. Weaknesses: pain points, missing features, or complexity issues

Return your response in JSON format:
{{
  "relevant_features": ["feature1", "feature2"],
  "unique_edges": ["edge1", "edge2"],
  "weaknesses": ["weakness1", "weakness2"]
}}"""


# =============================================================================
# INDUSTRY TRENDS
# =============================================================================

ANALYZE_TREND_PROMPT = """You are analyzing an industry trend in the context of a specific solution.

Solution Context:
{solution_context}

Trend/News:
Title: {title}
Content: {snippet}
Source: {url}
Date: {published_date}

Task: Analyze this trend and determine:
1. Name: a short, descriptive name for this trend (5-10 words)
2. Direction: whether this trend is "growing", "stable", or "declining"
3. Stance: how this trend affects the solution:
   - "supportive" = makes the solution more valuable/necessary
   - "neutral" = neither helps nor hinders significantly
   - "risky" = creates challenges, regulations, or friction
4. Implication: one clear sentence explaining what this means for the solution

Return ONLY valid JSON:
{{
  "name": "Short trend name",
  "direction": "growing",
  "stance": "supportive",
  "implication": "Clear one-sentence implication for the solution.",
  "reasoning": "Brief explanation"
}}"""


# =============================================================================
# HEALTH CHECK
# =============================================================================

CONNECTION_CHECK_PROMPT = 'Respond with the JSON object {"status": "OK"} and nothing else.'


# =============================================================================
# HELPERS
# =============================================================================

def format_search_results_for_prompt(results, limit=10):
    """
    Format web search hits as a numbered list for prompts.

    Args:
        results: List of SearchResult objects
        limit: Max hits to include (keeps prompts small)

    Returns:
        Formatted string suitable for prompt
    """
    if not results:
        return "(No search results)"

    formatted = []
    for i, result in enumerate(results[:limit], start=1):
        formatted.append(f"{i}. {result.title}\n   {result.snippet}\n   URL: {result.url}")

    return "\n\n".join(formatted)
