import pytest

from src.functions.news_summarization.core.contracts import CanonicalContent, PromptLanguage, SummaryMode
from src.functions.news_summarization.core.errors import PromptTemplateError
from src.functions.news_summarization.core.prompts import (
    build_consolidated_prompt,
    build_summary_prompt,
    format_consolidated_content,
    normalize_word_limit,
)


def _content(title="Monsoon reaches Kerala", description="Short desc", body="") -> CanonicalContent:
    return CanonicalContent(title=title, description=description, content=body)


def test_english_short_prompt_includes_article_and_json_shape():
    prompt = build_summary_prompt(_content(), PromptLanguage.ENGLISH)

    assert "Title: Monsoon reaches Kerala" in prompt
    assert "Description: Short desc" in prompt
    assert '{"title":' in prompt
    assert "50-60 word summary" in prompt
    assert prompt.endswith("--- JSON Response ---")


def test_hindi_prompt_is_selected_by_code():
    prompt = build_summary_prompt(_content(), "hi")

    assert "शीर्षक: Monsoon reaches Kerala" in prompt
    assert "--- JSON प्रतिक्रिया ---" in prompt


def test_long_mode_uses_requested_word_limit():
    prompt = build_summary_prompt(_content(), PromptLanguage.ENGLISH, SummaryMode.LONG, word_limit="120 to 140")

    assert "120-140 word summary" in prompt
    assert "Content: Short desc" in prompt


def test_long_mode_defaults_word_limit():
    prompt = build_summary_prompt(_content(), PromptLanguage.HINDI, SummaryMode.LONG)

    assert "80-100" in prompt


def test_prompt_uses_longer_of_description_and_content():
    prompt = build_summary_prompt(_content(body="A body that is clearly longer"), PromptLanguage.ENGLISH)

    assert "Description: A body that is clearly longer" in prompt


def test_prompt_content_is_truncated():
    prompt = build_summary_prompt(_content(body="x" * 50), PromptLanguage.ENGLISH, max_input_length=10)

    assert "x" * 10 in prompt
    assert "x" * 11 not in prompt


def test_prompt_keeps_braces_in_article_text():
    prompt = build_summary_prompt(_content(body="Budget {draft} released today"), PromptLanguage.ENGLISH)

    assert "Budget {draft} released today" in prompt


def test_unknown_language_raises_template_error():
    with pytest.raises(PromptTemplateError):
        build_summary_prompt(_content(), "french")


def test_summary_prompt_rejects_consolidated_mode():
    with pytest.raises(ValueError):
        build_summary_prompt(_content(), PromptLanguage.ENGLISH, SummaryMode.CONSOLIDATED)


def test_consolidated_content_labels_articles_in_order():
    contents = [_content(title=f"Story {i}", description="d" * 1500) for i in range(1, 4)]

    block = format_consolidated_content(contents)
    segments = block.split("\n\n")

    assert len(segments) == 3
    for index, segment in enumerate(segments, start=1):
        header, body = segment.split("\n", 1)
        assert header == f"Article {index}: Story {index}"
        assert len(body) == 1000


def test_consolidated_prompt_truncates_combined_text():
    contents = [_content(title=f"Story {i}", description="d" * 900) for i in range(1, 4)]

    prompt = build_consolidated_prompt(contents, PromptLanguage.ENGLISH, max_input_length=1200)

    assert "Article 1: Story 1" in prompt
    assert "Article 2: Story 2" in prompt
    assert "Article 3" not in prompt
    assert "140-160 word consolidated summary" in prompt


def test_consolidated_prompt_in_hindi():
    prompt = build_consolidated_prompt([_content()], PromptLanguage.HINDI, word_limit="100-120")

    assert "Article 1: Monsoon reaches Kerala" in prompt
    assert "100-120 शब्दों" in prompt


@pytest.mark.parametrize(
    "raw, mode, expected",
    [
        (None, SummaryMode.SHORT, "50-60"),
        ("", SummaryMode.LONG, "80-100"),
        ("  ", SummaryMode.CONSOLIDATED, "140-160"),
        ("90", SummaryMode.LONG, "90"),
        ("80 - 100", SummaryMode.LONG, "80-100"),
        ("80–100", SummaryMode.LONG, "80-100"),
        ("150 TO 170", SummaryMode.CONSOLIDATED, "150-170"),
    ],
)
def test_normalize_word_limit(raw, mode, expected):
    assert normalize_word_limit(raw, mode) == expected


@pytest.mark.parametrize("raw", ["lots", "100-", "0", "100-80", "-5"])
def test_normalize_word_limit_rejects_invalid_values(raw):
    with pytest.raises(ValueError):
        normalize_word_limit(raw, SummaryMode.LONG)
