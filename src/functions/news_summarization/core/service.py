"""Summarization orchestration: retries, batch fan-out and consolidation."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.shared.utils.logging import get_logger

from .config import SummarizationConfig
from .contracts.summary import ArticleInput, PromptLanguage, SummaryMode, SummaryResult
from .errors import ApiError, ContentTooShortError, ModelResponseError, SummarizationError
from .llm.gemini_client import ModelGateway
from .processors.content_extractor import extract_article_content
from .processors.response_parser import parse_summary_response
from .prompts import build_consolidated_prompt, build_summary_prompt

CONSOLIDATED_TITLES = {
    PromptLanguage.ENGLISH: "Top News Summary",
    PromptLanguage.HINDI: "प्रमुख समाचार सारांश",
}


def _consolidated_title(language: PromptLanguage | str) -> str:
    try:
        resolved = language if isinstance(language, PromptLanguage) else PromptLanguage.from_code(language)
    except ValueError:
        resolved = PromptLanguage.ENGLISH
    return CONSOLIDATED_TITLES[resolved]


class ArticleSummarizationService:
    """Turns articles into paraphrased titles and summaries via a model gateway.

    Every public coroutine returns a valid ``SummaryResult`` for each article:
    failed attempts are retried with a fixed delay and, once retries are
    exhausted, replaced by a placeholder result.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        config: Optional[SummarizationConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._gateway = gateway
        self._config = config or SummarizationConfig()
        self._logger = logger or get_logger(__name__)

    @property
    def config(self) -> SummarizationConfig:
        return self._config

    async def summarize_article(
        self,
        article: ArticleInput,
        language: PromptLanguage | str = PromptLanguage.ENGLISH,
        *,
        mode: SummaryMode = SummaryMode.SHORT,
        word_limit: Optional[str] = None,
    ) -> SummaryResult:
        """Summarize one article, absorbing every failure into a placeholder."""

        label = article.fallback_title
        try:
            return await self._run_with_retries(
                lambda: self._summarize_once(article, language, mode, word_limit),
                label,
            )
        except Exception as exc:  # noqa: BLE001 - exhaustion yields the placeholder result
            self._logger.error(
                'Giving up on article "%s" after %d attempts: %s',
                label,
                self._config.max_retries + 1,
                exc,
            )
            return SummaryResult.fallback(label)

    async def summarize_articles(
        self,
        articles: Sequence[ArticleInput],
        language: PromptLanguage | str = PromptLanguage.ENGLISH,
        *,
        mode: SummaryMode = SummaryMode.SHORT,
        word_limit: Optional[str] = None,
    ) -> list[SummaryResult]:
        """Summarize articles concurrently; result ``i`` always belongs to ``articles[i]``."""

        try:
            outcomes = await asyncio.gather(
                *(
                    self.summarize_article(article, language, mode=mode, word_limit=word_limit)
                    for article in articles
                ),
                return_exceptions=True,
            )
        except Exception as exc:
            self._logger.exception("Error in batch summarization orchestrator")
            raise ApiError(500, "Failed to summarize articles") from exc

        results: list[SummaryResult] = []
        for article, outcome in zip(articles, outcomes):
            if isinstance(outcome, BaseException):
                self._logger.error('Final failure for article "%s": %r', article.fallback_title, outcome)
                results.append(SummaryResult.fallback(article.fallback_title))
            else:
                results.append(outcome)

        failed = sum(1 for result in results if result.is_fallback)
        self._logger.info(
            "Summarized %d articles in %s (%d placeholders)",
            len(results),
            getattr(language, "value", language),
            failed,
        )
        return results

    async def summarize_consolidated(
        self,
        articles: Sequence[ArticleInput],
        language: PromptLanguage | str = PromptLanguage.ENGLISH,
        *,
        word_limit: Optional[str] = None,
    ) -> SummaryResult:
        """Produce one bulletin-style summary covering all ``articles``."""

        label = _consolidated_title(language)
        try:
            return await self._run_with_retries(
                lambda: self._consolidate_once(articles, language, word_limit),
                label,
            )
        except Exception as exc:  # noqa: BLE001 - exhaustion yields the placeholder result
            self._logger.error(
                "Giving up on consolidated summary of %d articles after %d attempts: %s",
                len(articles),
                self._config.max_retries + 1,
                exc,
            )
            return SummaryResult.fallback(label)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run_with_retries(
        self,
        attempt_factory: Callable[[], Awaitable[SummaryResult]],
        label: str,
    ) -> SummaryResult:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.max_retries + 1),
            wait=wait_fixed(self._config.retry_delay_seconds),
            retry=retry_if_exception_type(Exception),
            before_sleep=lambda state: self._log_retry(state, label),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await attempt_factory()
        raise SummarizationError("Retry loop finished without a result")

    def _log_retry(self, state: RetryCallState, label: str) -> None:
        exc = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0.0
        self._logger.warning(
            'Attempt %d for "%s" failed: %s. Retrying in %.1fs',
            state.attempt_number,
            label,
            exc,
            delay,
        )

    async def _summarize_once(
        self,
        article: ArticleInput,
        language: PromptLanguage | str,
        mode: SummaryMode,
        word_limit: Optional[str],
    ) -> SummaryResult:
        content = extract_article_content(article)
        clean_length = len(content.clean_content)
        if clean_length < self._config.min_content_length:
            raise ContentTooShortError(clean_length, self._config.min_content_length)

        prompt = build_summary_prompt(
            content,
            language,
            mode,
            max_input_length=self._config.max_input_length,
            word_limit=word_limit,
        )
        return await self._generate(prompt)

    async def _consolidate_once(
        self,
        articles: Sequence[ArticleInput],
        language: PromptLanguage | str,
        word_limit: Optional[str],
    ) -> SummaryResult:
        contents = [extract_article_content(article) for article in articles]
        total_length = sum(len(content.clean_content) for content in contents)
        if total_length < self._config.min_content_length:
            raise ContentTooShortError(total_length, self._config.min_content_length)

        prompt = build_consolidated_prompt(
            contents,
            language,
            max_input_length=self._config.max_input_length,
            per_article_chars=self._config.consolidated_article_chars,
            word_limit=word_limit,
        )
        return await self._generate(prompt)

    async def _generate(self, prompt: str) -> SummaryResult:
        timeout = self._config.request_timeout_seconds
        try:
            result = await asyncio.wait_for(self._gateway.generate(prompt), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise ModelResponseError(
                f"Gemini request timed out after {timeout:.1f}s", reason="TIMEOUT"
            ) from exc

        if result.is_empty:
            reason = result.block_reason or result.finish_reason or "UNKNOWN_REASON"
            raise ModelResponseError(f"Model returned no text. Finish reason: {reason}", reason=reason)

        raw_text = result.text.strip()
        self._logger.debug("Gemini raw output: %s", raw_text)
        if len(raw_text) < self._config.min_response_length:
            raise ModelResponseError("Model returned an empty or too-short response.")

        return parse_summary_response(raw_text)
