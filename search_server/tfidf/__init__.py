"""
TF-IDF indexing and ranking.

Components:
- tokenizer: word splitting, control character validation, stop words
- query: plus/minus query language parser
- index: forward + inverted term frequency index (single point of mutation)
- scorer: IDF and TF-IDF relevance over the index
"""

from .index import DocumentIndex, compute_average_rating
from .query import Query, QueryWord, parse_query, parse_query_word
from .scorer import TfIdfScorer
from .tokenizer import is_valid_word, make_stop_words, split_into_words

__all__ = [
    "DocumentIndex",
    "compute_average_rating",
    "Query",
    "QueryWord",
    "parse_query",
    "parse_query_word",
    "TfIdfScorer",
    "is_valid_word",
    "make_stop_words",
    "split_into_words",
]
