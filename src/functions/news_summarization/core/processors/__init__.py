"""Pre- and post-processing around the model call."""

from .content_extractor import extract_article_content, has_content, has_title, strip_html
from .response_parser import parse_summary_response, strip_code_fence

__all__ = [
    "extract_article_content",
    "has_content",
    "has_title",
    "strip_html",
    "parse_summary_response",
    "strip_code_fence",
]
