"""
Text Analyzer

Word-frequency counting, extractive summarization and email/URL
extraction. Every call builds and returns its own result; nothing is kept
between calls.
"""
from typing import Dict, List, NamedTuple, Optional
from collections import Counter
import re

# Characters removed from each token before counting
_NON_LETTER = re.compile(r'[^a-zA-Z]')

# Heuristic sentence boundary: a run of terminators plus trailing whitespace
_SENTENCE_BOUNDARY = re.compile(r'[.!?]+\s*')

EMAIL_PATTERN = re.compile(r'[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,6}')
URL_PATTERN = re.compile(r'https?://[-A-Za-z0-9+&@#/%?=~_|!:,.;]*[-A-Za-z0-9+&@#/%=~_|]')

# Words shorter than this do not contribute to sentence scores
SUMMARY_MIN_WORD_LENGTH = 4

# Sentences with fewer whitespace tokens are never selected
SUMMARY_MIN_SENTENCE_TOKENS = 3


class ScoredSentence(NamedTuple):
    index: int
    text: str
    score: float


def _clean_token(token: str) -> str:
    return _NON_LETTER.sub('', token.lower())


def word_frequency_analysis(text: Optional[str], min_word_length: int) -> Dict[str, int]:
    """
    Count word occurrences

    Tokens are split on whitespace, lowercased and stripped of everything but
    ASCII letters; tokens that end up empty or shorter than min_word_length
    are dropped.

    Args:
        text: Text to analyze
        min_word_length: Minimum cleaned word length to count

    Returns:
        Dict of word to count, ordered by descending count with ties in
        order of first occurrence
    """
    if not text:
        return {}

    counts = Counter()
    for token in text.split():
        word = _clean_token(token)
        if word and len(word) >= min_word_length:
            counts[word] += 1

    # sorted() is stable, so equal counts keep first-occurrence order
    return dict(sorted(counts.items(), key=lambda item: -item[1]))


def split_sentences(text: Optional[str]) -> List[str]:
    """
    Split text into sentence candidates on runs of '.', '!' and '?'

    Empty pieces at the end of the text are dropped.
    """
    if not text:
        return []

    sentences = _SENTENCE_BOUNDARY.split(text)
    while sentences and not sentences[-1]:
        sentences.pop()
    return sentences


def score_sentences(sentences: List[str], frequencies: Dict[str, int]) -> List[ScoredSentence]:
    """
    Score sentences by the average global frequency of their words

    Sentences with fewer than three tokens are left out.
    """
    scored = []

    for index, sentence in enumerate(sentences):
        tokens = sentence.split()
        if len(tokens) < SUMMARY_MIN_SENTENCE_TOKENS:
            continue

        total = 0
        for token in tokens:
            word = _clean_token(token)
            if len(word) >= SUMMARY_MIN_WORD_LENGTH:
                total += frequencies.get(word, 0)

        # Normalize by length so long sentences are not favoured
        scored.append(ScoredSentence(index, sentence, total / len(tokens)))

    return scored


def summarize_text(text: Optional[str], max_sentences: int) -> str:
    """
    Build an extractive summary of at most max_sentences sentences

    Text that already has no more than max_sentences sentences is returned
    unchanged. Otherwise the highest scoring sentences are kept in their
    original order, joined with ". " and terminated with ".".

    Args:
        text: Text to summarize
        max_sentences: Maximum number of sentences to keep

    Returns:
        The summary; "" for empty input or max_sentences < 1, and "." when
        no sentence is long enough to score
    """
    if not text or max_sentences < 1:
        return ""

    sentences = split_sentences(text)
    if len(sentences) <= max_sentences:
        return text

    frequencies = word_frequency_analysis(text, SUMMARY_MIN_WORD_LENGTH)
    scored = score_sentences(sentences, frequencies)

    # Ties keep scoring order, i.e. document order
    selected = sorted(scored, key=lambda s: -s.score)[:max_sentences]
    selected.sort(key=lambda s: s.index)

    return ". ".join(s.text.strip() for s in selected) + "."


def _unique(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))


def extract_emails(text: Optional[str]) -> List[str]:
    """Extract unique email addresses in order of first appearance"""
    if not text:
        return []
    return _unique(EMAIL_PATTERN.findall(text))


def extract_urls(text: Optional[str]) -> List[str]:
    """Extract unique http(s) URLs in order of first appearance"""
    if not text:
        return []
    return _unique(URL_PATTERN.findall(text))
