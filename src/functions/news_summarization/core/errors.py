"""Exception types raised by the summarization core."""

from __future__ import annotations

from typing import Optional


class SummarizationError(RuntimeError):
    """Base class for failures of a single summarization attempt."""


class ContentTooShortError(SummarizationError):
    """Raised when the cleaned article text is below the configured minimum."""

    def __init__(self, length: int, minimum: int) -> None:
        super().__init__(
            f"Article content is too short ({length} chars, minimum {minimum}) or missing."
        )
        self.length = length
        self.minimum = minimum


class ModelResponseError(SummarizationError):
    """Raised when the model returns no usable text."""

    def __init__(self, message: str, *, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason


class ResponseParseError(SummarizationError):
    """Raised when model output cannot be turned into a title and summary."""


class PromptTemplateError(SummarizationError):
    """Raised when no prompt template exists for a language/mode pair."""


class ApiError(Exception):
    """Error carrying the HTTP status that should be reported to the caller."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"
