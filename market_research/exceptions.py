"""
Custom exceptions for research operations.

Error taxonomy:
- ConfigurationError: missing credentials or invalid settings. Fatal, raised
  before any network call.
- SourceUnavailableError: auth failure, non-2xx response, network error or
  undecodable body from Reddit / web search. Retried by the source layer.
- MalformedOutputError: model output that could not be parsed. Never fatal,
  always coerced to defaults by the Text Analysis Service.
"""

from typing import Optional


class ResearchError(Exception):
    """Base exception for research operations"""
    pass


class ConfigurationError(ResearchError):
    """Raised when configuration is invalid or missing"""
    pass


class SourceUnavailableError(ResearchError):
    """
    Raised when an external source cannot serve a request.

    Attributes:
        source: Which source failed ("reddit", "tavily", "serper")
        status_code: HTTP status when the provider answered with non-2xx
    """

    def __init__(self, source: str, message: str, status_code: Optional[int] = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"{source}: {message}")


class MalformedOutputError(ResearchError):
    """Raised when model output cannot be parsed into JSON"""
    pass
