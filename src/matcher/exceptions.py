"""Errors raised while loading terms into the matcher."""


class MatcherError(Exception):
    """Base class for term matcher errors."""


class ResourceUnavailableError(MatcherError):
    """Raised when the term source is missing or cannot be read."""


class ProcessingFailureError(MatcherError):
    """Raised when reading the term source fails part way through."""
