"""
Pattern Matching Module

This module provides the regex engine of the text processor:
- Find, highlight and replace operations with detailed match metadata
- Pattern validation
- A registry of named, reusable pattern configurations with JSON and
  plain-text persistence

Quick Start:
    from pattern_matching import MatchFlag, find_matches, create_common_pattern_collection

    matches = find_matches(text, r"\\b\\w{4}\\b", MatchFlag.CASE_INSENSITIVE)

    registry = create_common_pattern_collection()
    results = registry.process_text_with_all_patterns(text)
"""

# Errors
from .exceptions import (
    TextProcessingError,
    PatternSyntaxError,
    ReplacementError,
    InvalidArgumentError
)

# Base types
from .base import (
    MatchFlag,
    MatchResult,
    PatternEntry,
    compile_pattern
)

# Matching operations
from .matcher import (
    find_matches,
    count_matches,
    highlight_matches,
    replace_all,
    is_valid_pattern,
    get_detailed_matches
)

# Registry
from .registry import (
    PatternRegistry,
    create_common_pattern_collection,
    match_all_entries
)

__all__ = [
    # Errors
    "TextProcessingError",
    "PatternSyntaxError",
    "ReplacementError",
    "InvalidArgumentError",

    # Base types
    "MatchFlag",
    "MatchResult",
    "PatternEntry",
    "compile_pattern",

    # Matching operations
    "find_matches",
    "count_matches",
    "highlight_matches",
    "replace_all",
    "is_valid_pattern",
    "get_detailed_matches",

    # Registry
    "PatternRegistry",
    "create_common_pattern_collection",
    "match_all_entries",
]
