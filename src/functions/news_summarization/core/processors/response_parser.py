"""Repair and parse raw model output into a ``SummaryResult``."""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from src.shared.utils.logging import get_logger

from ..contracts.summary import SummaryResult
from ..errors import ResponseParseError

LOGGER = get_logger(__name__)

_LEADING_FENCE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```$")
# Escaped quotes inside values are not supported by this fallback.
_FIELDS_PATTERN = re.compile(
    r'"title"\s*:\s*"([^"]+)"\s*,\s*"summary"\s*:\s*"([^"]+)"',
    re.IGNORECASE,
)
_SMART_QUOTES = str.maketrans({"“": '"', "”": '"', "„": '"', "″": '"'})


def strip_code_fence(raw_text: str) -> str:
    text = raw_text.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text.rstrip(), count=1)
    return text.strip()


def _loads(text: str) -> Any:
    parsed = json.loads(text)
    if isinstance(parsed, str):
        # Double-encoded: the model returned the JSON object as a JSON string.
        parsed = json.loads(parsed)
    return parsed


def _to_result(parsed: Any) -> SummaryResult:
    if not isinstance(parsed, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(parsed).__name__}")
    title = parsed.get("title")
    summary = parsed.get("summary")
    if not isinstance(title, str) or not isinstance(summary, str):
        raise ResponseParseError("JSON object is missing string 'title' or 'summary'")
    try:
        return SummaryResult(title=title, summary=summary)
    except ValidationError as exc:
        raise ResponseParseError("Model returned an empty title or summary") from exc


def parse_summary_response(raw_text: str) -> SummaryResult:
    """Turn model output into a title/summary pair.

    Tolerates code fences, double-encoded JSON and typographic quotes, and
    falls back to a regex over the two expected fields.

    Raises:
        ResponseParseError: If nothing usable can be recovered.
    """

    cleaned = strip_code_fence(raw_text or "")
    if not cleaned:
        raise ResponseParseError("Model response is empty after removing code fences")

    for candidate in (cleaned, cleaned.translate(_SMART_QUOTES)):
        try:
            parsed = _loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
        return _to_result(parsed)

    LOGGER.warning("JSON parsing failed, attempting regex fallback")
    match = _FIELDS_PATTERN.search(cleaned.translate(_SMART_QUOTES))
    if match:
        return _to_result({"title": match.group(1).strip(), "summary": match.group(2).strip()})

    LOGGER.debug("Unparseable model output (first 200 chars): %s", cleaned[:200])
    raise ResponseParseError("Failed to parse summary JSON from model response.")
