"""
Solution Context

The single input to a research run: what problem is being solved, for whom,
and which keywords describe the space. Every query builder and every
analysis prompt is derived from it.
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SolutionContext(BaseModel):
    """
    A proposed product solution to research.

    Immutable once constructed (frozen): agents read it, never change it.
    All strings are trimmed; blank values are rejected up front so a bad
    request never reaches the network.
    """

    model_config = ConfigDict(frozen=True)

    problem: str = Field(
        description="Short description of the user's problem area"
    )

    solution_id: str = Field(
        description="Unique identifier for this solution (snake_case)"
    )

    solution_title: str = Field(
        description="Human-readable solution name"
    )

    solution_summary: str = Field(
        description="1-3 sentence description of what this solution does"
    )

    target_users: List[str] = Field(
        description="User segments (e.g., 'SMB merchants', 'retail investors')"
    )

    keywords: List[str] = Field(
        description="Search keywords relevant to the solution/problem, most important first"
    )

    @field_validator('problem', 'solution_id', 'solution_title', 'solution_summary')
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        """Trim and require a non-empty string."""
        v = v.strip()
        if not v:
            raise ValueError("must be a non-empty string")
        return v

    @field_validator('target_users', 'keywords')
    @classmethod
    def validate_required_list(cls, v: List[str]) -> List[str]:
        """Trim entries, drop blanks, and require at least one left."""
        cleaned = [item.strip() for item in v if item and item.strip()]
        if not cleaned:
            raise ValueError("must contain at least one non-empty string")
        return cleaned

    @property
    def primary_keyword(self) -> str:
        return self.keywords[0]

    def summary_for_prompt(self) -> str:
        """
        Compact description used as the solution block of every analysis prompt.
        """
        return (
            f"Solution: {self.solution_title}\n"
            f"Summary: {self.solution_summary}\n"
            f"Target Users: {', '.join(self.target_users)}\n"
            f"Keywords: {', '.join(self.keywords)}"
        )
