"""
Exception taxonomy of the Opportunity Scanner pipeline.

``UpstreamModelError`` aborts a whole search request. ``FetchError``,
``ParseError``, ``AnalysisError`` and ``StorageError`` are isolated per topic
by the pipeline and turned into placeholder results (``StorageError`` is only
surfaced to the caller by ``/history``).
"""
from typing import Optional


class OpportunityScannerError(Exception):
    """Base class for all errors raised by the pipeline components."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class LLMCallError(OpportunityScannerError):
    """A call to the language model failed (transport, quota, missing key, blocked prompt)."""


class UpstreamModelError(OpportunityScannerError):
    """The topic suggestion call failed; the request cannot continue."""


class FetchError(OpportunityScannerError):
    """A subreddit page could not be retrieved."""


class ParseError(OpportunityScannerError):
    """Fetched markup could not be turned into text."""


class AnalysisError(OpportunityScannerError):
    """The model's analysis could not be produced, parsed or validated."""


class StorageError(OpportunityScannerError):
    """The result store failed to read or write."""
