"""Resolve heterogeneous article records into canonical content."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from bs4 import BeautifulSoup

from ..contracts.summary import DEFAULT_TITLE, ArticleInput, CanonicalContent

_WS_RE = re.compile(r"\s+")


def strip_html(text: Optional[str]) -> str:
    """Remove markup, unescape entities and collapse whitespace."""

    if not text:
        return ""
    if "<" in text or "&" in text:
        text = BeautifulSoup(text, "html.parser").get_text(" ")
    # &nbsp; decodes to U+00A0, which \s already matches.
    return _WS_RE.sub(" ", text).strip()


def _first_non_empty(candidates: Iterable[Optional[str]]) -> str:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return ""


def extract_article_content(article: ArticleInput) -> CanonicalContent:
    """Pick the best title, description and body for an article.

    Title-like and content-like fields are tried in a fixed priority order;
    description and body are stripped of markup.
    """

    title = _first_non_empty(article.title_candidates).strip() or DEFAULT_TITLE
    description = strip_html(_first_non_empty(article.description_candidates))
    content = strip_html(_first_non_empty(article.content_candidates))
    return CanonicalContent(title=title, description=description, content=content)


def has_title(article: ArticleInput) -> bool:
    return bool(_first_non_empty(article.title_candidates))


def has_content(article: ArticleInput) -> bool:
    return bool(
        _first_non_empty(article.description_candidates)
        or _first_non_empty(article.content_candidates)
    )
