"""Command-line helper for the news summarization service."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[4]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.functions.news_summarization.core.config import load_config
from src.functions.news_summarization.core.contracts.summary import (
    ArticleInput,
    PromptLanguage,
    SummaryMode,
)
from src.functions.news_summarization.core.factory import service_from_config
from src.functions.news_summarization.core.llm.gemini_client import GeminiGateway
from src.functions.news_summarization.core.prompts import normalize_word_limit
from src.shared.utils.logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize news articles with Gemini")
    parser.add_argument("input", type=Path, nargs="?", help="JSON file holding one article or a list of articles")
    parser.add_argument("--output", type=Path, help="Optional JSON file to write the result to")
    parser.add_argument("--language", default="english", help="english|hindi (or en|hi)")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in SummaryMode],
        default=SummaryMode.SHORT.value,
        help="short (per article), long (per article) or consolidated (one summary)",
    )
    parser.add_argument("--word-limit", help="Word range such as 80-100 (long and consolidated modes)")
    parser.add_argument("--dry-run", action="store_true", help="Validate inputs without calling Gemini")
    parser.add_argument("--check-key", action="store_true", help="Only verify that the Gemini API key works")
    parser.add_argument("--pretty", dest="pretty", action="store_true", default=True, help="Pretty-print JSON output")
    parser.add_argument("--no-pretty", dest="pretty", action="store_false", help="Disable pretty printing")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def load_articles(payload: Any) -> list[ArticleInput]:
    """Accept a single article, a list, or an ``{"articles": [...]}`` wrapper."""

    if isinstance(payload, dict) and isinstance(payload.get("articles"), list):
        payload = payload["articles"]
    elif isinstance(payload, dict) and isinstance(payload.get("article"), dict):
        payload = [payload["article"]]
    elif isinstance(payload, dict):
        payload = [payload]

    if not isinstance(payload, list) or not payload:
        raise ValueError("Input JSON must contain at least one article object")
    if not all(isinstance(entry, dict) for entry in payload):
        raise ValueError("Every article must be a JSON object")
    return [ArticleInput.model_validate(entry) for entry in payload]


async def _summarize(args: argparse.Namespace, articles: list[ArticleInput]) -> Any:
    config = load_config()
    service = service_from_config(config)
    language = PromptLanguage.from_code(args.language)
    mode = SummaryMode(args.mode)

    if mode is SummaryMode.CONSOLIDATED:
        result = await service.summarize_consolidated(articles, language, word_limit=args.word_limit)
        return result.model_dump()

    results = await service.summarize_articles(articles, language, mode=mode, word_limit=args.word_limit)
    return [result.model_dump() for result in results]


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(level=args.log_level, include_timestamp=False)
    logger = logging.getLogger("summarize_cli")

    if args.check_key:
        config = load_config()
        gateway = GeminiGateway(config.llm, request_timeout=config.summarization.request_timeout_seconds)
        ok = asyncio.run(gateway.ping())
        logger.info("Gemini API key is %s", "valid" if ok else "NOT valid")
        raise SystemExit(0 if ok else 1)

    if args.input is None:
        logger.error("An input file is required unless --check-key is given")
        raise SystemExit(2)

    payload = json.loads(args.input.read_text(encoding="utf-8"))
    try:
        articles = load_articles(payload)
        PromptLanguage.from_code(args.language)
        normalize_word_limit(args.word_limit, SummaryMode(args.mode))
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        raise SystemExit(1) from exc

    if args.dry_run:
        logger.info("Dry-run successful for %d article(s)", len(articles))
        return

    result = asyncio.run(_summarize(args, articles))
    output = json.dumps(result, indent=2 if args.pretty else None, ensure_ascii=False)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
    else:
        print(output)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover - CLI convenience
        sys.exit(130)
