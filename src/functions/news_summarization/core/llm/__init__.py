"""Gemini gateway and helpers for the news summarization module."""

from .gemini_client import GeminiGateway, GeminiGatewayError, GenerationResult, ModelGateway
from .rate_limiter import RateLimiter, RateLimitExceeded

__all__ = [
    "GeminiGateway",
    "GeminiGatewayError",
    "GenerationResult",
    "ModelGateway",
    "RateLimiter",
    "RateLimitExceeded",
]
