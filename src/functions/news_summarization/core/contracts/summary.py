"""Contracts for the news summarization service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TITLE = "Untitled"
FALLBACK_SUMMARY = "Summary not generated due to repeated model failure."


class PromptLanguage(str, Enum):
    """Output language of the generated title and summary."""

    ENGLISH = "english"
    HINDI = "hindi"

    @classmethod
    def from_code(cls, code: str) -> "PromptLanguage":
        """Resolve ``en``/``hi`` route codes as well as full language names."""

        lowered = (code or "").strip().lower()
        aliases = {"en": cls.ENGLISH, "hi": cls.HINDI}
        if lowered in aliases:
            return aliases[lowered]
        try:
            return cls(lowered)
        except ValueError as exc:
            raise ValueError(f"Unsupported language: {code!r}") from exc


class SummaryMode(str, Enum):
    SHORT = "short"
    LONG = "long"
    CONSOLIDATED = "consolidated"


DEFAULT_WORD_LIMITS = {
    SummaryMode.SHORT: "50-60",
    SummaryMode.LONG: "80-100",
    SummaryMode.CONSOLIDATED: "140-160",
}


class ArticleInput(BaseModel):
    """Caller supplied article record.

    Feeds use different field names for the same data, so every field is
    optional and resolution happens in the content extractor.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    title: Optional[str] = None
    s_title: Optional[str] = Field(default=None, alias="sTitle")
    short_title: Optional[str] = Field(default=None, alias="shortTitle")
    description: Optional[str] = None
    s_description: Optional[str] = Field(default=None, alias="sDescription")
    content: Optional[str] = None
    s_content: Optional[str] = Field(default=None, alias="sContent")

    @property
    def title_candidates(self) -> tuple[Optional[str], ...]:
        return (self.title, self.s_title, self.short_title)

    @property
    def description_candidates(self) -> tuple[Optional[str], ...]:
        return (self.description, self.s_description)

    @property
    def content_candidates(self) -> tuple[Optional[str], ...]:
        return (self.content, self.s_content)

    @property
    def fallback_title(self) -> str:
        """Best known title taken straight from the raw fields."""

        for candidate in self.title_candidates:
            if candidate and candidate.strip():
                return candidate.strip()
        return DEFAULT_TITLE


@dataclass(frozen=True)
class CanonicalContent:
    """Normalized (title, description, body) triple for one article."""

    title: str
    description: str
    content: str

    @property
    def clean_content(self) -> str:
        # Prefer whichever field carries the more complete text.
        if len(self.content) > len(self.description):
            return self.content
        return self.description


class SummaryResult(BaseModel):
    """Title and summary produced for one article (or one consolidated batch)."""

    title: str
    summary: str

    @field_validator("title", "summary")
    @classmethod
    def _require_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must be a non-empty string")
        return stripped

    @classmethod
    def fallback(cls, title: str) -> "SummaryResult":
        return cls(title=title or DEFAULT_TITLE, summary=FALLBACK_SUMMARY)

    @property
    def is_fallback(self) -> bool:
        return self.summary == FALLBACK_SUMMARY
