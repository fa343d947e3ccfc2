"""
Tokenizer for TF-IDF text processing.

Tokenization rules:
1. Split on runs of spaces (case is preserved, no punctuation stripping)
2. Reject words containing control characters (code points below ' ')
3. Filter stop words configured on the server

Stemming and lowercasing are intentionally not applied: "Cat" and "cat"
are different terms.
"""

from typing import FrozenSet, Iterable, List, Union

from ..exceptions import InvalidArgumentError


def split_into_words(text: str) -> List[str]:
    """
    Split text into raw words on runs of spaces.

    Only the space character separates words. Tabs, newlines and other
    control characters stay inside the word so validation can reject them.

    Args:
        text: Document or query text

    Returns:
        List of words in original order (empty for blank input)

    Examples:
        >>> split_into_words("  fluffy   cat ")
        ['fluffy', 'cat']

        >>> split_into_words("")
        []
    """
    if not text:
        return []
    return [word for word in text.split(" ") if word]


def is_valid_word(word: str) -> bool:
    """True if the word has no control characters (code points 0x00-0x1F)"""
    return not any(ord(c) < 32 for c in word)


def make_stop_words(stop_words: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """
    Build the immutable stop word set.

    Args:
        stop_words: Whitespace separated string, any iterable of words, or None

    Returns:
        Frozen set of stop words (empty strings dropped)

    Raises:
        InvalidArgumentError: If a stop word contains control characters
    """
    if stop_words is None:
        return frozenset()

    if isinstance(stop_words, str):
        words = split_into_words(stop_words)
    else:
        words = [word for word in stop_words if word]

    for word in words:
        if not is_valid_word(word):
            raise InvalidArgumentError(f"Stop word {word!r} contains invalid characters")

    return frozenset(words)


def split_into_words_no_stop(text: str, stop_words: FrozenSet[str]) -> List[str]:
    """
    Split document text into indexable words.

    Args:
        text: Document text
        stop_words: Words to drop

    Returns:
        Words without stop words, duplicates kept (needed for term frequency)

    Raises:
        InvalidArgumentError: If any word contains control characters
    """
    words = []
    for word in split_into_words(text):
        if not is_valid_word(word):
            raise InvalidArgumentError(f"Word {word!r} contains invalid characters")
        if word not in stop_words:
            words.append(word)
    return words
