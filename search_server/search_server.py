"""
SearchServer - public API of the in-memory TF-IDF search engine.

Combines the document index, the query parser and the TF-IDF scorer:

    server = SearchServer("and in on")
    server.add_document(1, "fluffy cat fluffy tail", DocumentStatus.ACTUAL, [7, 2, 7])
    server.find_top_documents("fluffy -dog")
    # [Document(id=1, relevance=..., rating=5)]

Concurrency contract:
- Read-only methods (find_top_documents, match_document,
  get_word_frequencies, iteration) may run in parallel on a quiescent server
- find_top_documents / match_document take parallel=True to fan out over
  query words in a thread pool, with results equal to the sequential path
- add_document / remove_document must never overlap with any other call;
  the server does not lock, callers serialize mutations
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .document import Document, DocumentRecord, DocumentStatus
from .predicates import DocumentPredicate, as_predicate
from .tfidf.index import DocumentIndex
from .tfidf.query import Query, parse_query
from .tfidf.scorer import DEFAULT_NUM_WORKERS, TfIdfScorer
from .tfidf.tokenizer import make_stop_words

logger = logging.getLogger(__name__)

# Maximum number of results returned by find_top_documents()
MAX_RESULT_DOCUMENT_COUNT = 5

# Relevance values closer than this are equal and ordered by rating
RELEVANCE_EPSILON = 1e-6


class _RankKey:
    """Sort key: relevance descending, rating descending within RELEVANCE_EPSILON"""

    __slots__ = ("relevance", "rating")

    def __init__(self, document: Document):
        self.relevance = document.relevance
        self.rating = document.rating

    def __lt__(self, other: "_RankKey") -> bool:
        if abs(self.relevance - other.relevance) < RELEVANCE_EPSILON:
            return self.rating > other.rating
        return self.relevance > other.relevance


class SearchServer:
    """
    In-memory search engine with plus/minus word queries and TF-IDF ranking.

    Args:
        stop_words: Whitespace separated string or iterable of stop words.
            Fixed for the lifetime of the server.

    Raises:
        InvalidArgumentError: If a stop word contains control characters
    """

    def __init__(self, stop_words: Union[str, Sequence[str], None] = None):
        self._index = DocumentIndex(make_stop_words(stop_words))
        self._scorer = TfIdfScorer(self._index)

    @property
    def stop_words(self):
        return self._index.stop_words

    @property
    def document_count(self) -> int:
        return len(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[int]:
        """Document ids in ascending order (restartable, snapshot of current ids)"""
        return iter(self._index)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._index

    # ------------------------------------------------------------------
    # Mutations (caller must serialize)
    # ------------------------------------------------------------------

    def add_document(
        self,
        document_id: int,
        document: str,
        status: DocumentStatus = DocumentStatus.ACTUAL,
        ratings: Sequence[int] = (),
    ) -> None:
        """
        Add a document to the index.

        Args:
            document_id: Unique non-negative id
            document: Document text
            status: Status tag (default: ACTUAL)
            ratings: Ratings averaged (truncated toward zero) into the document rating

        Raises:
            InvalidArgumentError: Negative/duplicate id or control characters in text
        """
        self._index.add_document(document_id, document, status, ratings)

    def remove_document(self, document_id: int) -> bool:
        """
        Remove a document. Unknown ids are a silent no-op.

        Returns:
            True if something was removed
        """
        return self._index.remove_document(document_id)

    # ------------------------------------------------------------------
    # Queries (read-only)
    # ------------------------------------------------------------------

    def parse_query(self, raw_query: str) -> Query:
        return parse_query(raw_query, self._index.stop_words)

    def find_top_documents(
        self,
        raw_query: str,
        status_or_predicate: Union[DocumentStatus, DocumentPredicate, None] = None,
        parallel: bool = False,
        num_workers: Optional[int] = None,
    ) -> List[Document]:
        """
        Rank documents for a query.

        Args:
            raw_query: Query text, e.g. "fluffy cat -dog"
            status_or_predicate: None for ACTUAL documents only, a DocumentStatus
                for exact status match, or a callable (id, status, rating) -> bool
            parallel: Score plus words in a thread pool (same results as sequential)
            num_workers: Thread pool size for the parallel path

        Returns:
            Up to MAX_RESULT_DOCUMENT_COUNT documents ordered by relevance
            (descending), ties broken by rating (descending)

        Raises:
            InvalidArgumentError: Malformed query word
        """
        predicate = as_predicate(status_or_predicate)
        query = self.parse_query(raw_query)

        document_to_relevance = self._scorer.find_all_documents(
            query, predicate, parallel=parallel, num_workers=num_workers
        )
        logger.debug(f"Query {raw_query!r}: {len(document_to_relevance)} matching documents")
        matched_documents = [
            Document(
                id=document_id,
                relevance=relevance,
                rating=self._index.get_document(document_id).rating,
            )
            for document_id, relevance in document_to_relevance.items()
        ]
        matched_documents.sort(key=_RankKey)

        return matched_documents[:MAX_RESULT_DOCUMENT_COUNT]

    def match_document(
        self,
        raw_query: str,
        document_id: int,
        parallel: bool = False,
        num_workers: Optional[int] = None,
    ) -> Tuple[List[str], DocumentStatus]:
        """
        Report which plus words of a query a document contains.

        Args:
            raw_query: Query text
            document_id: Indexed document id
            parallel: Look up query words in a thread pool
            num_workers: Thread pool size for the parallel path

        Returns:
            (sorted matched plus words, document status); the word list is
            empty if the document contains any minus word

        Raises:
            InvalidArgumentError: Malformed query word (checked first)
            DocumentNotFoundError: Unknown document id
        """
        query = self.parse_query(raw_query)
        record = self._index.get_document(document_id)

        def contains(word: str) -> bool:
            return self._index.contains_word(document_id, word)

        minus_words = list(query.minus_words)
        plus_words = list(query.plus_words)
        if parallel:
            with ThreadPoolExecutor(max_workers=num_workers or DEFAULT_NUM_WORKERS) as executor:
                has_minus = any(executor.map(contains, minus_words))
                found = list(executor.map(contains, plus_words))
        else:
            has_minus = any(contains(word) for word in minus_words)
            found = [contains(word) for word in plus_words]

        if has_minus:
            return [], record.status

        matched_words = sorted(word for word, is_found in zip(plus_words, found) if is_found)
        return matched_words, record.status

    def get_word_frequencies(self, document_id: int) -> Mapping[str, float]:
        """
        Term frequencies of a document ({term: tf}, read-only).

        Raises:
            DocumentNotFoundError: Unknown document id
        """
        return self._index.get_word_frequencies(document_id)

    def get_document(self, document_id: int) -> DocumentRecord:
        """Stored metadata of a document (raises DocumentNotFoundError)"""
        return self._index.get_document(document_id)

    def compute_relevance(self, raw_query: str, document_id: int) -> Optional[float]:
        """TF-IDF relevance of one document for a query, None if the document is excluded"""
        query = self.parse_query(raw_query)
        self._index.get_document(document_id)
        if any(self._index.contains_word(document_id, word) for word in query.minus_words):
            return None
        return self._scorer.score(document_id, query.plus_words)
