"""Prompt templates and builders for news summarization requests."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from .contracts.summary import (
    DEFAULT_WORD_LIMITS,
    CanonicalContent,
    PromptLanguage,
    SummaryMode,
)
from .errors import PromptTemplateError

_WORD_LIMIT_PATTERN = re.compile(r"^\s*(\d{1,4})\s*(?:(?:-|–|to)\s*(\d{1,4})\s*)?$", re.IGNORECASE)

ENGLISH_SHORT_TEMPLATE = (
    "You are an expert news editor. Based on the provided title and description, craft a compelling "
    "new title and a concise {word_limit} word summary in English.\n\n"
    "Instructions:\n"
    "1. Your output must be only a single, valid JSON object.\n"
    "2. Do NOT include markdown, code blocks, or any other text outside the JSON.\n"
    "3. The summary must be {word_limit} words and capture the key points of the article.\n"
    "4. Paraphrase the original content and title to be unique and engaging. "
    "Do not copy sentences or phrases from the source verbatim.\n"
    "5. The response must exactly match this format:\n"
    '{{"title": "<A compelling, SEO-friendly title in English>", '
    '"summary": "<A {word_limit} word summary in English>"}}\n\n'
    "--- Article Details ---\n"
    "Title: {title}\n"
    "Description: {content}\n"
    "--- JSON Response ---"
)

ENGLISH_LONG_TEMPLATE = (
    "You are a senior news editor rewriting an article for a news app. Read the article below and "
    "produce an original headline and a detailed {word_limit} word summary in English.\n\n"
    "Instructions:\n"
    "1. Return exactly one valid JSON object and nothing else.\n"
    "2. Do NOT wrap the JSON in markdown or code fences and do not add commentary.\n"
    "3. The summary must be {word_limit} words, cover who, what, when, where and why, "
    "and keep every number, name and quote factually accurate.\n"
    "4. Paraphrase completely: do not copy sentences or distinctive phrases from the source.\n"
    "5. Use this exact structure:\n"
    '{{"title": "<An original headline in English>", '
    '"summary": "<A {word_limit} word summary in English>"}}\n\n'
    "--- Article ---\n"
    "Title: {title}\n"
    "Content: {content}\n"
    "--- JSON Response ---"
)

ENGLISH_CONSOLIDATED_TEMPLATE = (
    "You are a news anchor preparing a single bulletin from several news articles. Combine the "
    "articles below into one headline and one consolidated {word_limit} word summary in English.\n\n"
    "Instructions:\n"
    "1. Return exactly one valid JSON object and nothing else.\n"
    "2. Do NOT use markdown, code fences or any text outside the JSON.\n"
    "3. The summary must be {word_limit} words, flow as one narrative, and mention the most "
    "important development from each article.\n"
    "4. Paraphrase everything in your own words; never copy source sentences verbatim.\n"
    "5. Use this exact structure:\n"
    '{{"title": "<A headline covering all stories in English>", '
    '"summary": "<A {word_limit} word consolidated summary in English>"}}\n\n'
    "--- Articles ---\n"
    "{content}\n"
    "--- JSON Response ---"
)

HINDI_SHORT_TEMPLATE = (
    "आप एक विशेषज्ञ समाचार संपादक हैं। आपको दिए गए शीर्षक और विवरण के आधार पर, एक आकर्षक शीर्षक "
    "और एक संक्षिप्त, सारगर्भित सारांश हिंदी में तैयार करना है।\n\n"
    "निर्देश:\n"
    "1. प्रतिक्रिया केवल एक मान्य JSON ऑब्जेक्ट होनी चाहिए।\n"
    "2. किसी भी तरह का मार्कडाउन, कोड ब्लॉक या अतिरिक्त टेक्स्ट न जोड़ें।\n"
    "3. सारांश {word_limit} शब्दों के बीच होना चाहिए और मुख्य बिंदुओं को उजागर करना चाहिए।\n"
    "4. मूल लेख के वाक्यों या वाक्यांशों को हूबहू न लिखें, अपने शब्दों में लिखें।\n"
    "5. प्रतिक्रिया का प्रारूप बिल्कुल इस तरह होना चाहिए:\n"
    '{{"title": "<एक आकर्षक हिंदी शीर्षक>", '
    '"summary": "<यहाँ हिंदी में {word_limit} शब्दों का सारांश>"}}\n\n'
    "--- लेख का विवरण ---\n"
    "शीर्षक: {title}\n"
    "विवरण: {content}\n"
    "--- JSON प्रतिक्रिया ---"
)

HINDI_LONG_TEMPLATE = (
    "आप एक वरिष्ठ समाचार संपादक हैं। नीचे दिए गए लेख को पढ़कर एक नया शीर्षक और {word_limit} शब्दों का "
    "विस्तृत सारांश हिंदी में तैयार करें।\n\n"
    "निर्देश:\n"
    "1. केवल एक मान्य JSON ऑब्जेक्ट लौटाएँ, इसके अलावा कुछ नहीं।\n"
    "2. JSON को मार्कडाउन या कोड ब्लॉक में न लपेटें और कोई टिप्पणी न जोड़ें।\n"
    "3. सारांश {word_limit} शब्दों का हो, जिसमें कौन, क्या, कब, कहाँ और क्यों शामिल हों, "
    "और सभी नाम, आँकड़े और उद्धरण सही रहें।\n"
    "4. पूरी तरह अपने शब्दों में लिखें, मूल लेख के वाक्य या वाक्यांश हूबहू न दोहराएँ।\n"
    "5. ठीक इसी संरचना का उपयोग करें:\n"
    '{{"title": "<एक मौलिक हिंदी शीर्षक>", '
    '"summary": "<हिंदी में {word_limit} शब्दों का सारांश>"}}\n\n'
    "--- लेख ---\n"
    "शीर्षक: {title}\n"
    "सामग्री: {content}\n"
    "--- JSON प्रतिक्रिया ---"
)

HINDI_CONSOLIDATED_TEMPLATE = (
    "आप एक समाचार वाचक हैं जो कई समाचार लेखों से एक बुलेटिन तैयार कर रहे हैं। नीचे दिए गए सभी लेखों को "
    "मिलाकर एक शीर्षक और {word_limit} शब्दों का एक समेकित सारांश हिंदी में तैयार करें।\n\n"
    "निर्देश:\n"
    "1. केवल एक मान्य JSON ऑब्जेक्ट लौटाएँ, इसके अलावा कुछ नहीं।\n"
    "2. मार्कडाउन, कोड ब्लॉक या JSON के बाहर कोई टेक्स्ट न जोड़ें।\n"
    "3. सारांश {word_limit} शब्दों का हो, एक सहज कथा के रूप में हो और हर लेख की सबसे "
    "महत्वपूर्ण जानकारी शामिल करे।\n"
    "4. सब कुछ अपने शब्दों में लिखें, मूल वाक्यों को हूबहू न दोहराएँ।\n"
    "5. ठीक इसी संरचना का उपयोग करें:\n"
    '{{"title": "<सभी समाचारों को समेटता हिंदी शीर्षक>", '
    '"summary": "<हिंदी में {word_limit} शब्दों का समेकित सारांश>"}}\n\n'
    "--- लेख ---\n"
    "{content}\n"
    "--- JSON प्रतिक्रिया ---"
)

PROMPT_TEMPLATES: dict[tuple[PromptLanguage, SummaryMode], str] = {
    (PromptLanguage.ENGLISH, SummaryMode.SHORT): ENGLISH_SHORT_TEMPLATE,
    (PromptLanguage.ENGLISH, SummaryMode.LONG): ENGLISH_LONG_TEMPLATE,
    (PromptLanguage.ENGLISH, SummaryMode.CONSOLIDATED): ENGLISH_CONSOLIDATED_TEMPLATE,
    (PromptLanguage.HINDI, SummaryMode.SHORT): HINDI_SHORT_TEMPLATE,
    (PromptLanguage.HINDI, SummaryMode.LONG): HINDI_LONG_TEMPLATE,
    (PromptLanguage.HINDI, SummaryMode.CONSOLIDATED): HINDI_CONSOLIDATED_TEMPLATE,
}


def normalize_word_limit(word_limit: Optional[str], mode: SummaryMode) -> str:
    """Return a ``"min-max"`` (or single number) word limit for the prompt.

    Raises:
        ValueError: If ``word_limit`` is not a number or a numeric range.
    """

    if word_limit is None or not str(word_limit).strip():
        return DEFAULT_WORD_LIMITS[mode]
    match = _WORD_LIMIT_PATTERN.match(str(word_limit))
    if not match:
        raise ValueError(f"wordLimit must look like '80-100' or '90', got {word_limit!r}")
    low = int(match.group(1))
    high = int(match.group(2)) if match.group(2) else None
    if low <= 0 or (high is not None and high < low):
        raise ValueError(f"wordLimit range is invalid: {word_limit!r}")
    return f"{low}-{high}" if high is not None else str(low)


def truncate_content(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit]


def _resolve_template(language: PromptLanguage | str, mode: SummaryMode) -> str:
    try:
        resolved = language if isinstance(language, PromptLanguage) else PromptLanguage.from_code(language)
    except ValueError as exc:
        raise PromptTemplateError(f"No prompt available for the selected language: {language!r}") from exc
    template = PROMPT_TEMPLATES.get((resolved, mode))
    if template is None:
        raise PromptTemplateError(
            f"No prompt available for language {resolved.value!r} and mode {mode.value!r}"
        )
    return template


def build_summary_prompt(
    content: CanonicalContent,
    language: PromptLanguage | str,
    mode: SummaryMode = SummaryMode.SHORT,
    *,
    max_input_length: int = 8000,
    word_limit: Optional[str] = None,
) -> str:
    """Construct the single-article prompt sent to Gemini."""

    if mode is SummaryMode.CONSOLIDATED:
        raise ValueError("Use build_consolidated_prompt for consolidated summaries")
    template = _resolve_template(language, mode)
    return template.format(
        title=content.title,
        content=truncate_content(content.clean_content, max_input_length),
        word_limit=normalize_word_limit(word_limit, mode),
    )


def format_consolidated_content(
    contents: Sequence[CanonicalContent],
    *,
    per_article_chars: int = 1000,
) -> str:
    """Label each article as ``Article N: <title>`` followed by its capped text."""

    segments = [
        f"Article {index}: {item.title}\n{truncate_content(item.clean_content, per_article_chars)}"
        for index, item in enumerate(contents, start=1)
    ]
    return "\n\n".join(segments)


def build_consolidated_prompt(
    contents: Sequence[CanonicalContent],
    language: PromptLanguage | str,
    *,
    max_input_length: int = 8000,
    per_article_chars: int = 1000,
    word_limit: Optional[str] = None,
) -> str:
    """Construct the multi-article prompt for a consolidated bulletin."""

    template = _resolve_template(language, SummaryMode.CONSOLIDATED)
    combined = format_consolidated_content(contents, per_article_chars=per_article_chars)
    return template.format(
        content=truncate_content(combined, max_input_length),
        word_limit=normalize_word_limit(word_limit, SummaryMode.CONSOLIDATED),
    )
