"""
LangGraph Workflows

Research: Reddit Agent → Competitor Agent → Industry Trends Agent → Aggregator
"""

from .research import (
    create_research_workflow,
    run_research,
    run,
    ResearchState
)

__all__ = [
    'create_research_workflow',
    'run_research',
    'run',
    'ResearchState',
]
