"""
Query language parser.

Syntax:
    fluffy cat -dog

- Words are separated by spaces
- A word starting with '-' is a minus word: documents containing it are
  excluded from results
- Every other word is a plus word: documents must contain at least one
- Stop words are dropped from both groups
- '-' alone, '--word' and words with control characters are rejected
"""

from dataclasses import dataclass
from typing import FrozenSet

from ..exceptions import InvalidArgumentError
from .tokenizer import is_valid_word, split_into_words


@dataclass(frozen=True)
class QueryWord:
    """One parsed query token"""
    data: str
    is_minus: bool
    is_stop: bool


@dataclass(frozen=True)
class Query:
    """Validated query: deduplicated plus and minus word sets"""
    plus_words: FrozenSet[str] = frozenset()
    minus_words: FrozenSet[str] = frozenset()


def parse_query_word(text: str, stop_words: FrozenSet[str]) -> QueryWord:
    """
    Parse a single query token.

    Exactly one leading '-' is stripped and marks the word as a minus word.

    Args:
        text: Raw token (no spaces)
        stop_words: Server stop words

    Returns:
        QueryWord with the stripped term

    Raises:
        InvalidArgumentError: Empty token, lone '-', '--word', or control characters

    Examples:
        >>> parse_query_word("-dog", frozenset())
        QueryWord(data='dog', is_minus=True, is_stop=False)
    """
    if not text:
        raise InvalidArgumentError("Query word is empty")

    word = text
    is_minus = False
    if word[0] == "-":
        is_minus = True
        word = word[1:]

    if not word:
        raise InvalidArgumentError(f"Query word {text!r} has no text after '-'")
    if word[0] == "-":
        raise InvalidArgumentError(f"Query word {text!r} starts with more than one '-'")
    if not is_valid_word(word):
        raise InvalidArgumentError(f"Query word {text!r} contains invalid characters")

    return QueryWord(data=word, is_minus=is_minus, is_stop=word in stop_words)


def parse_query(text: str, stop_words: FrozenSet[str]) -> Query:
    """
    Parse raw query text into plus and minus word sets.

    Parsing stops at the first invalid word; no partial query is returned.

    Args:
        text: Raw query text
        stop_words: Server stop words

    Returns:
        Query with deduplicated plus/minus words (stop words removed)

    Raises:
        InvalidArgumentError: If any word is malformed
    """
    plus_words = set()
    minus_words = set()

    for token in split_into_words(text):
        query_word = parse_query_word(token, stop_words)
        if query_word.is_stop:
            continue
        if query_word.is_minus:
            minus_words.add(query_word.data)
        else:
            plus_words.add(query_word.data)

    return Query(plus_words=frozenset(plus_words), minus_words=frozenset(minus_words))
