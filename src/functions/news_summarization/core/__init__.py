"""Summarization core: extraction, prompting, parsing and orchestration."""

from .config import AppConfig, LLMConfig, ServiceConfig, SummarizationConfig, load_config
from .service import ArticleSummarizationService

__all__ = [
    "AppConfig",
    "LLMConfig",
    "ServiceConfig",
    "SummarizationConfig",
    "load_config",
    "ArticleSummarizationService",
]
