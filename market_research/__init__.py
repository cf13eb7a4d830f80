"""
Market Research Agent

Researches a proposed product solution across three sources and turns
the findings into a short report for a product manager:
- Reddit: what customers complain about and ask for
- Competitors: who already plays in the space, and where they are weak
- Industry trends: recent news that helps or threatens the solution

Entry points:
    from market_research import run, SolutionContext

    report = run(SolutionContext(...))
    print(report.summary_for_pm)

Async callers use run_research() instead.
"""

from .exceptions import (
    ResearchError,
    ConfigurationError,
    SourceUnavailableError,
    MalformedOutputError
)
from .models import SolutionContext, ResearchModuleOutput
from .workflows import run, run_research, create_research_workflow

__version__ = "0.1.0"

__all__ = [
    'run',
    'run_research',
    'create_research_workflow',
    'SolutionContext',
    'ResearchModuleOutput',
    'ResearchError',
    'ConfigurationError',
    'SourceUnavailableError',
    'MalformedOutputError',
]
