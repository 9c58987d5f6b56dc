"""
Error types for Sparks.

Every failure the capture pipeline can hit maps to one of these classes.
Nothing is retried automatically; callers decide whether to try again.
"""

from typing import List, Optional


# Upper bound on how much raw model output an error may carry
RAW_PREFIX_LIMIT = 200


class SparksError(Exception):
    """Base class for all Sparks errors."""


class ValidationError(SparksError):
    """A required field is missing or a value is out of range."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


class UpstreamError(SparksError):
    """The completion service was unreachable or returned an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(UpstreamError):
    """The completion service signalled quota exhaustion or too many requests."""


class MalformedResponseError(SparksError):
    """The completion service returned text that is not the expected JSON shape."""

    def __init__(self, message: str, raw_text: str = ""):
        self.raw_prefix = str(raw_text or "")[:RAW_PREFIX_LIMIT]
        if self.raw_prefix:
            message = f"{message}: {self.raw_prefix}"
        super().__init__(message)


class StoreError(SparksError):
    """The record store rejected or failed a request."""


class NotFoundError(StoreError):
    """No record exists with the requested id."""


def user_message(error: Exception) -> str:
    """
    Translate an error into text suitable for showing to the user.

    Raw model output is never included beyond what the error already bounds.
    """
    if isinstance(error, ValidationError):
        return str(error)
    if isinstance(error, RateLimitError):
        return "The AI service is rate limited right now. Wait a moment and try again."
    if isinstance(error, UpstreamError):
        return f"The AI service failed: {error}. Try again."
    if isinstance(error, MalformedResponseError):
        return "The AI returned a response that could not be understood. Try again."
    if isinstance(error, NotFoundError):
        return str(error)
    if isinstance(error, StoreError):
        return "Could not save or load data. Try again."
    return "Something went wrong."
