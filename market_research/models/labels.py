"""
Classification Labels

Closed vocabularies the Text Analysis Service must answer with, plus the
ordering rules the aggregation steps rely on.
"""

from enum import Enum
from typing import Any, Dict, Type, TypeVar


class RedditDirection(str, Enum):
    """
    What a forum post is doing.

    Why str, Enum?
    - str: Model output and report JSON use the raw value
    - Enum: Anything outside the vocabulary is caught at the boundary
    """

    PAIN_POINT = "pain_point"
    """User is frustrated, blocked, or complaining."""

    DEMAND_SIGNAL = "demand_signal"
    """User is requesting a feature or showing a need."""

    NEUTRAL_OBSERVATION = "neutral_observation"
    """Descriptive or neutral discussion."""


class Intensity(str, Enum):
    """Strength and urgency of the language in a post."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TrendDirection(str, Enum):
    GROWING = "growing"
    STABLE = "stable"
    DECLINING = "declining"


class TrendStance(str, Enum):
    """
    How a trend affects the solution being researched.
    """

    SUPPORTIVE = "supportive"
    """Makes the solution more valuable or necessary."""

    NEUTRAL = "neutral"
    """Neither helps nor hinders significantly."""

    RISKY = "risky"
    """Creates challenges, regulation, or friction."""


class TrendImpact(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# Highest first: any "high" post makes the whole topic "high"
INTENSITY_PRIORITY = [Intensity.HIGH, Intensity.MEDIUM, Intensity.LOW]

# Risks surface first in the report, neutral trends last
STANCE_PRIORITY: Dict[TrendStance, int] = {
    TrendStance.RISKY: 0,
    TrendStance.SUPPORTIVE: 1,
    TrendStance.NEUTRAL: 2,
}

STANCE_TO_IMPACT: Dict[TrendStance, TrendImpact] = {
    TrendStance.SUPPORTIVE: TrendImpact.POSITIVE,
    TrendStance.RISKY: TrendImpact.NEGATIVE,
    TrendStance.NEUTRAL: TrendImpact.NEUTRAL,
}


E = TypeVar("E", bound=Enum)


def coerce_label(value: Any, enum_cls: Type[E], default: E) -> E:
    """
    Map a raw model answer onto an enum member, or return the default.

    Accepts members, exact values and case/whitespace variants
    ("Pain_Point ", "HIGH").
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return default
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return default


def stance_to_impact(stance: Any) -> TrendImpact:
    """Map a trend stance onto report impact; unknown stances read as neutral."""
    stance = coerce_label(stance, TrendStance, TrendStance.NEUTRAL)
    return STANCE_TO_IMPACT[stance]
