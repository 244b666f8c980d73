"""HTTP layer for the news summarization service."""

from __future__ import annotations

import asyncio
import hmac
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

import flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging
from src.functions.news_summarization.core.config import AppConfig, load_config
from src.functions.news_summarization.core.errors import ApiError
from src.functions.news_summarization.core.factory import (
    batch_request_from_payload,
    consolidated_request_from_payload,
    service_from_config,
    single_request_from_payload,
)
from src.functions.news_summarization.core.contracts.summary import SummaryMode
from src.functions.news_summarization.core.service import ArticleSummarizationService

load_env()
setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

_EXTENSION_KEY = "news_summarization"
_RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
_T = TypeVar("_T")

articles_bp = flask.Blueprint("articles", __name__, url_prefix="/api/articles")


class _ServiceState:
    """Holds the config and the lazily created, process-wide service."""

    def __init__(self, config: AppConfig, service: Optional[ArticleSummarizationService]) -> None:
        self.config = config
        self._service = service

    def service(self) -> ArticleSummarizationService:
        if self._service is None:
            try:
                self._service = service_from_config(self.config)
            except ValueError as exc:
                logger.error("Summarization service is not configured: %s", exc)
                raise ApiError(500, "Summarization service is not configured") from exc
        return self._service


def create_app(
    config: Optional[AppConfig] = None,
    *,
    service: Optional[ArticleSummarizationService] = None,
) -> flask.Flask:
    """Build the Flask application serving the summarization API."""

    config = config or load_config()
    app = flask.Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.service.max_payload_bytes
    app.extensions[_EXTENSION_KEY] = _ServiceState(config, service)
    # One in-memory budget per client address, applied to every route.
    Limiter(
        get_remote_address,
        app=app,
        application_limits=[config.service.rate_limit],
        storage_uri="memory://",
        headers_enabled=True,
    )

    app.register_blueprint(articles_bp)
    app.add_url_rule("/health", "health", _app_health, methods=["GET"])
    app.after_request(_apply_headers)
    app.register_error_handler(ApiError, _handle_api_error)
    app.register_error_handler(HTTPException, _handle_http_error)
    app.register_error_handler(Exception, _handle_unexpected_error)

    logger.info(
        "%s v%s starting (environment=%s, model=%s)",
        config.service.app_name,
        config.service.version,
        config.service.environment,
        config.llm.model,
    )
    return app


# ----------------------------------------------------------------------
# Routes
# ----------------------------------------------------------------------


@articles_bp.before_request
def _check_api_key() -> None:
    if flask.request.method == "OPTIONS" or flask.request.endpoint == "articles.health":
        return None
    settings = _state().config.service
    if not settings.require_api_key:
        return None
    provided = flask.request.headers.get("X-API-Key")
    if not provided:
        raise ApiError(401, "API key is required")
    if not hmac.compare_digest(provided, settings.api_key or ""):
        raise ApiError(401, "Invalid API key")
    return None


@articles_bp.route("/summarize/<any(hindi, english):language>", methods=["POST"])
def summarize_batch(language: str) -> flask.Response:
    state = _state()
    request_model = _parse(
        batch_request_from_payload,
        _json_body(),
        language,
        max_articles=state.config.service.max_articles,
    )
    logger.info("Batch summarization request: %d articles in %s", len(request_model.articles), language)

    results = _run_async(
        state.service().summarize_articles(
            request_model.articles,
            request_model.language,
            mode=SummaryMode.SHORT,
        )
    )
    return _success_response(
        f"Articles summarized successfully in {request_model.language.value}",
        {
            "totalArticles": len(request_model.articles),
            "summarizedArticles": [result.model_dump() for result in results],
        },
    )


@articles_bp.route("/summarize/<any(en, hi):language>", methods=["POST"])
def summarize_single(language: str) -> flask.Response:
    request_model = _parse(single_request_from_payload, _json_body(), language)
    logger.info(
        'Single summarization request for "%s" in %s (wordLimit=%s)',
        request_model.article.fallback_title,
        request_model.language.value,
        request_model.word_limit,
    )

    result = _run_async(
        _state().service().summarize_article(
            request_model.article,
            request_model.language,
            mode=SummaryMode.LONG,
            word_limit=request_model.word_limit,
        )
    )
    return _success_response(
        f"Article summarized successfully in {request_model.language.value}",
        result.model_dump(),
    )


@articles_bp.route("/summarize-long", methods=["POST"])
def summarize_long() -> flask.Response:
    state = _state()
    request_model = _parse(
        consolidated_request_from_payload,
        _json_body(),
        flask.request.args.get("lang"),
        max_articles=state.config.service.max_articles,
    )
    logger.info(
        "Consolidated summarization request: %d articles in %s (wordLimit=%s)",
        len(request_model.articles),
        request_model.language.value,
        request_model.word_limit,
    )

    result = _run_async(
        state.service().summarize_consolidated(
            request_model.articles,
            request_model.language,
            word_limit=request_model.word_limit,
        )
    )
    return _success_response(
        "Long articles summarized successfully into consolidated summary in "
        f"{request_model.language.value}",
        result.model_dump(),
    )


@articles_bp.route("/health", methods=["GET"])
def health() -> flask.Response:
    return _json_response(
        {
            "status": "OK",
            "service": "Article Summarization Service",
            "timestamp": _timestamp(),
        }
    )


def _app_health() -> flask.Response:
    settings = _state().config.service
    return _json_response(
        {
            "status": "OK",
            "message": f"{settings.app_name} is running",
            "version": settings.version,
            "environment": settings.environment,
            "timestamp": _timestamp(),
        }
    )


# ----------------------------------------------------------------------
# Error handling
# ----------------------------------------------------------------------


def _handle_api_error(exc: ApiError) -> flask.Response:
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    else:
        logger.warning("Rejected request: %s", exc.message)
    return _error_response(exc.message, exc.status_code)


def _handle_http_error(exc: HTTPException) -> flask.Response:
    status = exc.code or 500
    if status in (404, 405):
        message = f"Cannot {flask.request.method} {flask.request.path}"
    elif status == 429:
        logger.warning("Rate limit exceeded for %s", get_remote_address())
        message = _RATE_LIMIT_MESSAGE
    else:
        message = exc.description or exc.name
    return _error_response(message, status)


def _handle_unexpected_error(exc: Exception) -> flask.Response:
    logger.error("Unexpected failure", exc_info=exc)
    settings = _state().config.service
    message = str(exc) if settings.show_error_details else "Something went wrong!"
    return _error_response(message, 500)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _state() -> _ServiceState:
    return flask.current_app.extensions[_EXTENSION_KEY]


def _json_body() -> Any:
    return flask.request.get_json(silent=True)


def _parse(builder: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
    try:
        return builder(*args, **kwargs)
    except ValueError as exc:
        raise ApiError(400, str(exc)) from exc


def _run_async(coro):
    """Drive a service coroutine to completion from a synchronous view.

    The loop is closed without joining its worker threads, so a Gemini call
    abandoned by the per-attempt timeout does not hold the request open.
    """
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        try:
            _cancel_pending(loop)
            loop.run_until_complete(loop.shutdown_asyncgens())
        finally:
            loop.close()


def _cancel_pending(loop: asyncio.AbstractEventLoop) -> None:
    pending = asyncio.all_tasks(loop)
    if not pending:
        return
    for task in pending:
        task.cancel()
    loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _json_response(body: dict[str, Any], status: int = 200) -> flask.Response:
    response = flask.make_response(json.dumps(body, ensure_ascii=False), status)
    response.headers["Content-Type"] = "application/json; charset=utf-8"
    return response


def _success_response(message: str, data: Any) -> flask.Response:
    return _json_response(
        {"success": True, "message": message, "data": data, "timestamp": _timestamp()}
    )


def _error_response(message: str, status: int) -> flask.Response:
    return _json_response(
        {"success": False, "error": "fail" if 400 <= status < 500 else "error", "message": message},
        status=status,
    )


def _apply_headers(response: flask.Response) -> flask.Response:
    """Attach CORS and basic security headers to every response."""

    allowed = _state().config.service.allowed_origins
    origin = flask.request.headers.get("Origin")
    headers = response.headers
    if "*" in allowed:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in allowed:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    headers["Access-Control-Allow-Headers"] = "Content-Type,Authorization,X-API-Key"
    headers["X-Content-Type-Options"] = "nosniff"
    headers["X-Frame-Options"] = "SAMEORIGIN"
    headers["Referrer-Policy"] = "no-referrer"
    return response
