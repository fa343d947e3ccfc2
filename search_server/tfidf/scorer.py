"""
Classic TF-IDF scorer over a DocumentIndex.

Formula:
    relevance(doc) = Σ over plus words t present in doc of IDF(t) × TF(t, doc)

Where:
    TF(t, doc) = occurrences of t in doc / number of non-stop words in doc
    IDF(t)     = ln(N / df(t))
    N          = number of indexed documents
    df(t)      = number of documents containing t

Minus words never contribute to relevance, they only exclude documents.
Terms missing from the corpus are skipped (their IDF is undefined).

Scoring can run per plus word in a thread pool. Partial scores are merged in
the same word order as the sequential loop, so both paths produce identical
floats.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from ..predicates import DocumentPredicate
from .index import DocumentIndex
from .query import Query

# Default number of workers for parallel scoring
DEFAULT_NUM_WORKERS = 8


class TfIdfScorer:
    """
    Computes relevance for every document matching a parsed query.

    Holds only a reference to the index, never a copy of its data.
    """

    def __init__(self, index: DocumentIndex):
        self.index = index

    def inverse_document_frequency(self, word: str) -> float:
        """
        IDF(t) = ln(N / df(t)).

        Returns:
            IDF value, or 0.0 for a term no document contains
        """
        df = self.index.document_frequency(word)
        if df == 0:
            return 0.0
        return math.log(len(self.index) / df)

    def score(self, document_id: int, plus_words: Iterable[str]) -> float:
        """Relevance of a single document for the given plus words"""
        relevance = 0.0
        for word in plus_words:
            postings = self.index.get_postings(word)
            tf = postings.get(document_id)
            if tf is None:
                continue
            relevance += self.inverse_document_frequency(word) * tf
        return relevance

    def score_word(self, word: str, predicate: DocumentPredicate) -> Dict[int, float]:
        """tf * idf of one plus word for every document containing it that passes the predicate"""
        postings = self.index.get_postings(word)
        if not postings:
            return {}
        idf = self.inverse_document_frequency(word)
        partial: Dict[int, float] = {}
        for document_id, tf in postings.items():
            record = self.index.get_document(document_id)
            if predicate(document_id, record.status, record.rating):
                partial[document_id] = tf * idf
        return partial

    def find_all_documents(
        self,
        query: Query,
        predicate: DocumentPredicate,
        parallel: bool = False,
        num_workers: Optional[int] = None,
    ) -> Dict[int, float]:
        """
        Score every candidate document for a query.

        Candidate = contains at least one plus word, contains no minus word,
        and passes the predicate on (id, status, rating).

        Args:
            query: Parsed query
            predicate: Filter called once per candidate and plus word
            parallel: Score plus words in a thread pool
            num_workers: Thread pool size (default: DEFAULT_NUM_WORKERS)

        Returns:
            {document_id: relevance} (unordered)
        """
        plus_words = list(query.plus_words)

        def score_word(word: str) -> Dict[int, float]:
            return self.score_word(word, predicate)

        if parallel and len(plus_words) > 1:
            with ThreadPoolExecutor(max_workers=num_workers or DEFAULT_NUM_WORKERS) as executor:
                partials: List[Dict[int, float]] = list(executor.map(score_word, plus_words))
        else:
            partials = [score_word(word) for word in plus_words]

        document_to_relevance: Dict[int, float] = {}
        for partial in partials:
            for document_id, relevance in partial.items():
                document_to_relevance[document_id] = (
                    document_to_relevance.get(document_id, 0.0) + relevance
                )

        # Exclusion is absolute: any minus word disqualifies the document
        for word in query.minus_words:
            for document_id in self.index.get_postings(word):
                document_to_relevance.pop(document_id, None)

        return document_to_relevance
