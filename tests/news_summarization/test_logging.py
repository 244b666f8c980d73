import json
import logging

from src.shared.utils.logging import JsonFormatter, redact


def _record(message, *args, **extra):
    record = logging.LogRecord("news", logging.WARNING, __file__, 1, message, args, None)
    record.__dict__.update(extra)
    return record


def test_redact_masks_api_key_values():
    assert redact("headers={'X-API-Key': 's3cret'}") == "headers={'X-API-Key': '<redacted>'}"
    assert redact("x-api-key=abc123 retried") == "x-api-key=<redacted> retried"
    assert redact("nothing to hide") == "nothing to hide"


def test_json_formatter_emits_severity_and_extras():
    line = JsonFormatter().format(_record("Attempt %d failed", 2, article="Rain"))

    payload = json.loads(line)
    assert payload["severity"] == "WARNING"
    assert payload["logger"] == "news"
    assert payload["message"] == "Attempt 2 failed"
    assert payload["article"] == "Rain"
    assert payload["timestamp"].endswith("+00:00")


def test_json_formatter_keeps_unicode():
    line = JsonFormatter().format(_record("प्रमुख समाचार सारांश"))

    assert "प्रमुख समाचार सारांश" in line
