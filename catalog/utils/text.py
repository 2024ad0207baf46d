"""
Text normalization helpers for catalog indexing and search.

The same functions are applied to indexed product text and to incoming
search queries, so the vocabulary of the indexes and of the queries line up
exactly.

- normalize: lowercase, collapse whitespace, trim
- words: alphanumeric tokens of two or more characters
- trigrams: overlapping 3-character windows
"""

import re
from typing import List

_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+", re.IGNORECASE)

MIN_WORD_LENGTH = 2
TRIGRAM_SIZE = 3


def normalize(text: str) -> str:
    """
    Canonicalize free text.

    Args:
        text: Raw text (product name/description or a search query)

    Returns:
        Lowercased text with whitespace runs collapsed to a single space and
        leading/trailing whitespace removed.

    Examples:
        >>> normalize("  Red   SHOE\\n")
        'red shoe'
    """
    return _WHITESPACE_RE.sub(" ", text.lower()).strip()


def words(text: str) -> List[str]:
    """
    Split text into word tokens.

    Splits on any run of characters that are not ASCII letters or digits and
    drops tokens shorter than two characters. Single-letter tokens are never
    indexed, so one-letter queries cannot be answered from the word index.

    Examples:
        >>> words("a red-shoe, size 9")
        ['red', 'shoe', 'size']
    """
    return [token for token in _NON_ALNUM_RE.split(text) if len(token) >= MIN_WORD_LENGTH]


def trigrams(text: str) -> List[str]:
    """
    Return every overlapping 3-character window of text.

    Examples:
        >>> trigrams("shoe")
        ['sho', 'hoe']
        >>> trigrams("ab")
        []
    """
    if len(text) < TRIGRAM_SIZE:
        return []
    return [text[i:i + TRIGRAM_SIZE] for i in range(len(text) - TRIGRAM_SIZE + 1)]
