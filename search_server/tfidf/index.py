"""
TF-IDF document index - forward and inverted term frequency maps.

Structure:
    forward:  document_id -> {term: tf}
    inverted: term -> {document_id: tf}

where tf = occurrences of term in document / number of non-stop words in document.

Both maps are private to DocumentIndex and change only through
add_document() / remove_document(), which update them together so that a
(term, document_id) pair is present in one map iff it is present in the other.

Not thread-safe: concurrent readers are fine, but mutations must be
serialized by the caller (no reader may run during add/remove).
"""

import bisect
import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, List, Mapping, Sequence

from ..document import DocumentRecord, DocumentStatus
from ..exceptions import DocumentNotFoundError, InvalidArgumentError
from .tokenizer import is_valid_word, split_into_words_no_stop

logger = logging.getLogger(__name__)

_EMPTY_POSTINGS: Mapping[int, float] = MappingProxyType({})


def compute_average_rating(ratings: Sequence[int]) -> int:
    """
    Integer average of ratings, truncated toward zero.

    Examples:
        >>> compute_average_rating([10, 11, 3])
        8
        >>> compute_average_rating([-9, -10, -4])
        -7
        >>> compute_average_rating([])
        0
    """
    if not ratings:
        return 0
    # int() truncates toward zero, floor division would round -7.67 to -8
    return int(sum(ratings) / len(ratings))


class DocumentIndex:
    """
    In-memory forward + inverted index with document metadata.

    Single owner of all per-document state: the text copy, status, rating,
    and both term frequency maps.
    """

    def __init__(self, stop_words: FrozenSet[str] = frozenset()):
        self._stop_words = frozenset(stop_words)
        self._documents: Dict[int, DocumentRecord] = {}
        self._document_ids: List[int] = []  # sorted
        self._word_to_document_freqs: Dict[str, Dict[int, float]] = defaultdict(dict)
        self._document_to_word_freqs: Dict[int, Dict[str, float]] = {}

    @property
    def stop_words(self) -> FrozenSet[str]:
        return self._stop_words

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[int]:
        # Copy so callers may remove documents while iterating
        return iter(list(self._document_ids))

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def add_document(
        self,
        document_id: int,
        text: str,
        status: DocumentStatus,
        ratings: Sequence[int],
    ) -> DocumentRecord:
        """
        Index a document.

        All preconditions are checked before anything is written, so a
        rejected document leaves the index untouched.

        Args:
            document_id: Non-negative, not yet indexed id
            text: Document text (no control characters)
            status: Caller-defined status tag
            ratings: User ratings, averaged into a single integer

        Returns:
            Stored DocumentRecord

        Raises:
            InvalidArgumentError: Negative id, duplicate id, or invalid characters
        """
        if document_id < 0:
            raise InvalidArgumentError(f"Document id {document_id} is negative")
        if document_id in self._documents:
            raise InvalidArgumentError(f"Document with id {document_id} already exists")
        if not is_valid_word(text):
            raise InvalidArgumentError(f"Document {document_id} text contains invalid characters")

        try:
            status = DocumentStatus(status)
        except ValueError:
            raise InvalidArgumentError(f"Unknown document status {status!r}") from None

        words = split_into_words_no_stop(text, self._stop_words)

        record = DocumentRecord(
            id=document_id,
            status=status,
            rating=compute_average_rating(ratings),
            text=text,
        )
        self._documents[document_id] = record
        bisect.insort(self._document_ids, document_id)

        word_freqs = self._document_to_word_freqs.setdefault(document_id, {})
        if words:
            inv_word_count = 1.0 / len(words)
            for word in words:
                word_freqs[word] = word_freqs.get(word, 0.0) + inv_word_count
                self._word_to_document_freqs[word][document_id] = word_freqs[word]

        logger.debug(
            f"Indexed document {document_id}: {len(words)} words, "
            f"{len(word_freqs)} unique terms, rating={record.rating}"
        )
        return record

    def remove_document(self, document_id: int) -> bool:
        """
        Remove a document from both maps and the metadata.

        Unknown ids are ignored.

        Returns:
            True if the document was indexed and has been removed
        """
        if document_id not in self._documents:
            return False

        word_freqs = self._document_to_word_freqs.pop(document_id, {})
        for word in word_freqs:
            postings = self._word_to_document_freqs.get(word)
            if postings is None:
                continue
            postings.pop(document_id, None)
            # Prune emptied entries so document_frequency() stays exact
            if not postings:
                del self._word_to_document_freqs[word]

        del self._documents[document_id]
        index = bisect.bisect_left(self._document_ids, document_id)
        del self._document_ids[index]

        logger.debug(f"Removed document {document_id}: {len(word_freqs)} terms affected")
        return True

    def get_document(self, document_id: int) -> DocumentRecord:
        """Raises DocumentNotFoundError for unknown ids"""
        try:
            return self._documents[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id) from None

    def get_word_frequencies(self, document_id: int) -> Mapping[str, float]:
        """
        Read-only view of a document's forward entry {term: tf}.

        Raises:
            DocumentNotFoundError: If the document is not indexed
        """
        if document_id not in self._documents:
            raise DocumentNotFoundError(document_id)
        return MappingProxyType(self._document_to_word_freqs[document_id])

    def get_postings(self, word: str) -> Mapping[int, float]:
        """Read-only view of a term's inverted entry {document_id: tf} (empty if unseen)"""
        postings = self._word_to_document_freqs.get(word)
        if not postings:
            return _EMPTY_POSTINGS
        return MappingProxyType(postings)

    def document_frequency(self, word: str) -> int:
        """Number of indexed documents containing the term"""
        return len(self._word_to_document_freqs.get(word, ()))

    def contains_word(self, document_id: int, word: str) -> bool:
        return document_id in self._word_to_document_freqs.get(word, ())
