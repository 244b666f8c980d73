"""Builds validated summarization requests and services from raw inputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from src.shared.utils.logging import get_logger

from .config import AppConfig
from .contracts.summary import ArticleInput, PromptLanguage, SummaryMode
from .llm.gemini_client import GeminiGateway, ModelGateway
from .llm.rate_limiter import RateLimiter
from .processors.content_extractor import has_content, has_title
from .prompts import normalize_word_limit
from .service import ArticleSummarizationService

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SingleArticleRequest:
    article: ArticleInput
    language: PromptLanguage
    word_limit: str


@dataclass(frozen=True)
class BatchRequest:
    articles: List[ArticleInput]
    language: PromptLanguage


@dataclass(frozen=True)
class ConsolidatedRequest:
    articles: List[ArticleInput]
    language: PromptLanguage
    word_limit: str


def single_request_from_payload(payload: Any, language_code: str) -> SingleArticleRequest:
    """Validate ``{article, wordLimit?}`` for the single-article endpoint."""

    body = _require_mapping(payload)
    raw_article = body.get("article")
    if not isinstance(raw_article, Mapping):
        raise ValueError("Article object is required in request body")

    article = _parse_article(raw_article, "Article")
    if not has_content(article):
        raise ValueError(
            "Article must have a description field (description, sDescription, sContent, or content)"
        )

    return SingleArticleRequest(
        article=article,
        language=PromptLanguage.from_code(language_code),
        word_limit=normalize_word_limit(body.get("wordLimit"), SummaryMode.LONG),
    )


def batch_request_from_payload(payload: Any, language_code: str, *, max_articles: int) -> BatchRequest:
    """Validate ``{articles}`` for the per-article batch endpoints."""

    body = _require_mapping(payload)
    articles = _parse_articles(body.get("articles"), max_articles=max_articles, require_title=True)
    return BatchRequest(articles=articles, language=PromptLanguage.from_code(language_code))


def consolidated_request_from_payload(
    payload: Any,
    language_code: Optional[str],
    *,
    max_articles: int,
) -> ConsolidatedRequest:
    """Validate ``{articles, wordLimit?}`` for the consolidated endpoint."""

    body = _require_mapping(payload)
    articles = _parse_articles(body.get("articles"), max_articles=max_articles, require_title=False)
    language = PromptLanguage.HINDI if (language_code or "").lower() == "hi" else PromptLanguage.ENGLISH
    return ConsolidatedRequest(
        articles=articles,
        language=language,
        word_limit=normalize_word_limit(body.get("wordLimit"), SummaryMode.CONSOLIDATED),
    )


def service_from_config(
    config: AppConfig,
    *,
    gateway: Optional[ModelGateway] = None,
) -> ArticleSummarizationService:
    """Create the service with one process-wide Gemini gateway."""

    if gateway is None:
        gateway = GeminiGateway(
            config.llm,
            rate_limiter=RateLimiter(max_requests_per_minute=config.llm.requests_per_minute),
            request_timeout=config.summarization.request_timeout_seconds,
        )
        LOGGER.info("Gemini gateway ready (model=%s)", config.llm.model)
    return ArticleSummarizationService(gateway, config.summarization)


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError("Request body must be a JSON object")
    return payload


def _parse_articles(raw: Any, *, max_articles: int, require_title: bool) -> List[ArticleInput]:
    if raw is None:
        raise ValueError("Articles array is required in request body")
    if not isinstance(raw, list):
        raise ValueError("Articles must be an array")
    if not raw:
        raise ValueError("Articles array cannot be empty")
    if len(raw) > max_articles:
        raise ValueError(f"Cannot process more than {max_articles} articles at once")

    articles: List[ArticleInput] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ValueError(f"Article at index {index} must be an object")
        article = _parse_article(entry, f"Article at index {index}")
        if require_title and not has_title(article):
            raise ValueError(f"Article at index {index} must have a valid title")
        if not has_content(article):
            raise ValueError(f"Article at index {index} must have a valid description or content")
        articles.append(article)
    return articles


def _parse_article(raw: Mapping[str, Any], label: str) -> ArticleInput:
    try:
        return ArticleInput.model_validate(dict(raw))
    except ValidationError as exc:
        raise ValueError(f"{label} is invalid: {_format_validation_error(exc)}") from exc


def _format_validation_error(exc: ValidationError) -> str:
    messages: List[str] = []
    for error in exc.errors():
        location = "->".join(str(component) for component in error.get("loc", []))
        if location:
            messages.append(f"{location}: {error.get('msg')}")
        else:
            messages.append(error.get("msg", "Invalid input"))
    return "; ".join(messages)
