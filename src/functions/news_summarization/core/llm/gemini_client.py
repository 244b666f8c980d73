"""Async Gemini gateway used by the summarization orchestrator."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError

from src.shared.utils.logging import get_logger

from ..config import LLMConfig
from .rate_limiter import RateLimiter

LOGGER = get_logger(__name__)


class GeminiGatewayError(RuntimeError):
    """Raised when the Gemini API call itself fails (transport, quota, auth)."""


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation call.

    ``text`` is empty when the model produced nothing; ``block_reason`` then
    carries the safety verdict reported by the API, if any.
    """

    text: str
    block_reason: Optional[str] = None
    finish_reason: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


class ModelGateway(Protocol):
    async def generate(self, prompt: str) -> GenerationResult:
        ...


class GeminiGateway:
    """Shared, stateless handle to a Gemini model.

    The SDK call is blocking, so it runs in a worker thread; many articles
    can therefore be in flight at once on a single event loop.
    """

    def __init__(
        self,
        config: LLMConfig,
        *,
        rate_limiter: Optional[RateLimiter] = None,
        model: Any = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        self.config = config
        genai.configure(api_key=config.require_api_key())
        self._model = model or genai.GenerativeModel(
            model_name=config.model,
            generation_config=genai.types.GenerationConfig(
                max_output_tokens=config.max_output_tokens,
                temperature=config.temperature,
            ),
        )
        self._rate_limiter = rate_limiter or RateLimiter(
            max_requests_per_minute=config.requests_per_minute
        )
        # Bounds the HTTP call inside the SDK so an abandoned worker thread ends too.
        self._request_options = {"timeout": request_timeout} if request_timeout else None

    async def generate(self, prompt: str) -> GenerationResult:
        await self._rate_limiter.acquire()
        try:
            response = await asyncio.to_thread(
                self._model.generate_content,
                prompt,
                request_options=self._request_options,
            )
        except GoogleAPIError as exc:
            raise GeminiGatewayError(
                f"Gemini API error: {exc.message if hasattr(exc, 'message') else exc}"
            ) from exc
        return self._to_result(response)

    async def ping(self) -> bool:
        """Return True when the configured key and model answer a trivial prompt."""

        try:
            result = await self.generate("Hello")
        except Exception as exc:  # noqa: BLE001 - reported as a failed check
            LOGGER.error("Gemini API key validation failed: %s", exc)
            return False
        return not result.is_empty

    @classmethod
    def _to_result(cls, response: Any) -> GenerationResult:
        block_reason = cls._enum_name(getattr(getattr(response, "prompt_feedback", None), "block_reason", None))
        finish_reason = None
        candidates = getattr(response, "candidates", None) or []
        if candidates:
            finish_reason = cls._enum_name(getattr(candidates[0], "finish_reason", None))
        return GenerationResult(
            text=cls._extract_text(response),
            block_reason=block_reason,
            finish_reason=finish_reason,
        )

    @staticmethod
    def _extract_text(response: Any) -> str:
        try:
            text = getattr(response, "text", None)
        except ValueError:
            # The SDK raises when the candidate has no parts (e.g. safety block).
            text = None
        if text:
            return str(text).strip()
        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            segments = [
                part.text for part in getattr(content, "parts", None) or [] if getattr(part, "text", None)
            ]
            if segments:
                return "".join(segments).strip()
        return ""

    @staticmethod
    def _enum_name(value: Any) -> Optional[str]:
        if value is None:
            return None
        name = getattr(value, "name", None) or str(value)
        if not name or name.endswith("UNSPECIFIED") or name == "0":
            return None
        return name
