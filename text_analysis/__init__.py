"""
Text Analysis Module

Lightweight analyses over plain text:
- Word-frequency counting
- Frequency-weighted extractive summarization
- Email and URL extraction
- Plain-text report rendering
"""

from .analyzer import (
    word_frequency_analysis,
    split_sentences,
    summarize_text,
    extract_emails,
    extract_urls
)
from .report import format_word_frequency, format_matches, format_summary

__all__ = [
    "word_frequency_analysis",
    "split_sentences",
    "summarize_text",
    "extract_emails",
    "extract_urls",
    "format_word_frequency",
    "format_matches",
    "format_summary",
]
