"""Exceptions raised across the matching engine."""

from typing import Optional


class SprintFitError(Exception):
    """Base class for all engine errors."""


class InputPreconditionError(SprintFitError):
    """Documents or input missing before an operation could start."""


class CredentialRequiredError(SprintFitError):
    """No API key was supplied and no ambient default is configured."""

    def __init__(self, message: str = "An OpenAI API key is required (pass --api-key or set OPENAI_API_KEY)"):
        super().__init__(message)


class ReasoningServiceError(SprintFitError):
    """
    Remote reasoning call failed.

    Attributes:
        message: Error description
        original_error: The exception raised by the client library, if any
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error

        parts = [message]
        if original_error is not None:
            parts.append(f"{type(original_error).__name__}: {original_error}")

        super().__init__(" | ".join(parts))


class DocumentLoadError(SprintFitError):
    """An uploaded file could not be turned into text."""


class UnknownResultError(SprintFitError):
    """Re-focus requested on an id that is not part of the current batch."""


class TurnInProgressError(SprintFitError):
    """A chat turn was sent while another one is still awaiting its reply."""
