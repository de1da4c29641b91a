"""Exceptions raised by the scraping and generation pipelines."""


class BrewBookError(Exception):
    """Base exception for brewbook."""


class PolicyDenied(BrewBookError):
    """Raised when robots.txt disallows a URL and the policy is enforced."""


class FetchFailed(BrewBookError):
    """Raised when a page cannot be fetched (network error or non-2xx status)."""


class LLMError(BrewBookError):
    """Raised when a model endpoint call fails at the transport or API level."""


class GenerationError(BrewBookError):
    """Raised when recipe generation cannot produce a result."""


class GenerationParseError(GenerationError):
    """Raised when the model reply is not valid JSON or lacks the expected shape."""
