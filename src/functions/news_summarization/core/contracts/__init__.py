"""Contracts shared by the summarization core and its HTTP layer."""

from .summary import (
    DEFAULT_TITLE,
    DEFAULT_WORD_LIMITS,
    FALLBACK_SUMMARY,
    ArticleInput,
    CanonicalContent,
    PromptLanguage,
    SummaryMode,
    SummaryResult,
)

__all__ = [
    "DEFAULT_TITLE",
    "DEFAULT_WORD_LIMITS",
    "FALLBACK_SUMMARY",
    "ArticleInput",
    "CanonicalContent",
    "PromptLanguage",
    "SummaryMode",
    "SummaryResult",
]
