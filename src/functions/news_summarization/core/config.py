"""Configuration models for the news summarization service."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from src.shared.utils.config_validator import (
    validate_bool_env,
    validate_choice_env,
    validate_float_env,
    validate_int_env,
    validate_list_env,
)
from src.shared.utils.env import get_env, load_env

ENVIRONMENTS = ("development", "test", "staging", "production")
_RATE_LIMIT_MAX_BY_ENVIRONMENT = {"development": 1000, "staging": 200, "production": 100}
_TEMPERATURE_RANGE = (0.0, 2.0)


def _ensure_positive(value: float, field_name: str, *, allow_zero: bool = False) -> float:
    if value < 0 or (value == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ValueError(f"{field_name} must be {qualifier}")
    return value


@dataclass
class LLMConfig:
    """Generation parameters for the Gemini gateway."""

    api_key: Optional[str] = None
    model: str = "gemini-1.5-flash"
    max_output_tokens: int = 5000
    temperature: float = 0.7
    requests_per_minute: int = 60

    def validate(self) -> None:
        if not isinstance(self.model, str) or not self.model.strip():
            raise ValueError("model must be provided")
        self.model = self.model.strip()
        _ensure_positive(self.max_output_tokens, "max_output_tokens")
        _ensure_positive(self.requests_per_minute, "requests_per_minute")
        minimum, maximum = _TEMPERATURE_RANGE
        if not minimum <= self.temperature <= maximum:
            raise ValueError(f"temperature must be between {minimum} and {maximum}")

    def require_api_key(self) -> str:
        if not self.api_key or not self.api_key.strip():
            raise ValueError("GEMINI_API_KEY environment variable is not set")
        return self.api_key.strip()


@dataclass
class SummarizationConfig:
    """Limits and retry behaviour of the summarization orchestrator."""

    max_retries: int = 3
    min_content_length: int = 50
    max_input_length: int = 8000
    retry_delay_ms: int = 1000
    request_timeout_seconds: float = 30.0
    min_response_length: int = 10
    consolidated_article_chars: int = 1000

    def validate(self) -> None:
        _ensure_positive(self.max_retries, "max_retries", allow_zero=True)
        _ensure_positive(self.min_content_length, "min_content_length", allow_zero=True)
        _ensure_positive(self.max_input_length, "max_input_length")
        _ensure_positive(self.retry_delay_ms, "retry_delay_ms", allow_zero=True)
        _ensure_positive(self.request_timeout_seconds, "request_timeout_seconds")
        _ensure_positive(self.consolidated_article_chars, "consolidated_article_chars")

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0


@dataclass
class ServiceConfig:
    """HTTP layer settings."""

    app_name: str = "Article Summarization API"
    version: str = "1.0.0"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 8080
    max_articles: int = 50
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    require_api_key: bool = False
    api_key: Optional[str] = None
    show_error_details: bool = False
    max_payload_bytes: int = 10 * 1024 * 1024
    rate_limit_window_ms: int = 15 * 60 * 1000
    rate_limit_max: int = 1000

    def validate(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of: {', '.join(ENVIRONMENTS)}")
        _ensure_positive(self.max_articles, "max_articles")
        _ensure_positive(self.max_payload_bytes, "max_payload_bytes")
        _ensure_positive(self.rate_limit_window_ms, "rate_limit_window_ms")
        _ensure_positive(self.rate_limit_max, "rate_limit_max")
        if self.require_api_key and not self.api_key:
            raise ValueError("API_KEY must be set when REQUIRE_API_KEY is enabled")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def rate_limit(self) -> str:
        """Per-client request budget in the notation Flask-Limiter parses."""
        window_seconds = max(1, math.ceil(self.rate_limit_window_ms / 1000))
        return f"{self.rate_limit_max} per {window_seconds} second"


@dataclass
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    summarization: SummarizationConfig = field(default_factory=SummarizationConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    def validate(self) -> None:
        self.llm.validate()
        self.summarization.validate()
        self.service.validate()


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """Build and validate the application config from the environment."""

    load_env(env_file)

    environment = validate_choice_env("APP_ENV", ENVIRONMENTS, default="development")
    hardened = environment in {"staging", "production"}

    llm = LLMConfig(
        api_key=get_env("GEMINI_API_KEY") or get_env("GOOGLE_API_KEY"),
        model=get_env("AI_MODEL", LLMConfig.model) or LLMConfig.model,
        max_output_tokens=validate_int_env("AI_MAX_TOKENS", default=5000, min_value=1),
        temperature=validate_float_env("AI_TEMPERATURE", default=0.7, min_value=0.0, max_value=2.0),
        requests_per_minute=validate_int_env("AI_REQUESTS_PER_MINUTE", default=60, min_value=1),
    )

    summarization = SummarizationConfig(
        max_retries=validate_int_env("AI_MAX_RETRIES", default=3, min_value=0, max_value=10),
        min_content_length=validate_int_env("AI_MIN_CONTENT_LENGTH", default=50, min_value=0),
        max_input_length=validate_int_env("AI_MAX_INPUT_LENGTH", default=8000, min_value=1),
        retry_delay_ms=validate_int_env("AI_RETRY_DELAY", default=1000, min_value=0),
        request_timeout_seconds=validate_float_env("AI_REQUEST_TIMEOUT", default=30.0, min_value=0.1),
    )

    service = ServiceConfig(
        app_name=get_env("APP_NAME", ServiceConfig.app_name) or ServiceConfig.app_name,
        version=get_env("APP_VERSION", ServiceConfig.version) or ServiceConfig.version,
        environment=environment,
        host=get_env("HOST", ServiceConfig.host) or ServiceConfig.host,
        port=validate_int_env("PORT", default=8080, min_value=1, max_value=65535),
        max_articles=validate_int_env("MAX_ARTICLES", default=50, min_value=1),
        allowed_origins=validate_list_env("ALLOWED_ORIGINS", default=["*"]),
        require_api_key=validate_bool_env("REQUIRE_API_KEY", default=hardened),
        api_key=get_env("API_KEY"),
        show_error_details=validate_bool_env(
            "SHOW_ERROR_DETAILS", default=environment == "development"
        ),
        max_payload_bytes=validate_int_env("MAX_PAYLOAD_SIZE", default=10 * 1024 * 1024, min_value=1),
        rate_limit_window_ms=validate_int_env("RATE_LIMIT_WINDOW_MS", default=15 * 60 * 1000, min_value=1),
        rate_limit_max=validate_int_env(
            "RATE_LIMIT_MAX", default=_RATE_LIMIT_MAX_BY_ENVIRONMENT.get(environment, 100), min_value=1
        ),
    )

    config = AppConfig(llm=llm, summarization=summarization, service=service)
    config.validate()
    return config
