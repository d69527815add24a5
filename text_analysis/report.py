"""
Plain-text rendering of analysis and match results
"""
from typing import Dict, List, Optional

RULE = "-" * 40


def format_word_frequency(frequencies: Dict[str, int], limit: Optional[int] = None) -> str:
    """
    Render a word-frequency table

    Args:
        frequencies: Ordered word counts
        limit: Maximum number of rows; None shows all
    """
    lines = ["Word Frequency Analysis:", f"{'Word':<20} Frequency", RULE]

    for row, (word, count) in enumerate(frequencies.items(), 1):
        if limit is not None and row > limit:
            lines.append(f"... (showing top {limit} results)")
            break
        lines.append(f"{word:<20} {count}")

    return "\n".join(lines) + "\n"


def format_matches(label: str, matches: List[str]) -> str:
    """Render a match list with its total"""
    lines = [f"--- Matches in {label} ---"]

    if not matches:
        lines.append("No matches found")
    else:
        lines.extend(f"- {match}" for match in matches)
        lines.append(f"Total matches: {len(matches)}")

    return "\n".join(lines) + "\n"


def format_summary(summary: str) -> str:
    return f"Text Summary:\n\n{summary}\n"
