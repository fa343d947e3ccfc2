"""
In-memory TF-IDF document search server.

Usage:
    from search_server import SearchServer, DocumentStatus

    server = SearchServer("and in on")
    server.add_document(1, "fluffy cat fluffy tail", DocumentStatus.ACTUAL, [7, 2, 7])
    server.find_top_documents("fluffy -dog")
"""

from .document import Document, DocumentRecord, DocumentStatus
from .exceptions import DocumentNotFoundError, InvalidArgumentError, SearchServerError
from .process_queries import process_queries, process_queries_joined
from .remove_duplicates import remove_duplicates
from .request_queue import RequestQueue
from .search_server import MAX_RESULT_DOCUMENT_COUNT, SearchServer
from .utils import log_duration

__all__ = [
    "Document",
    "DocumentRecord",
    "DocumentStatus",
    "DocumentNotFoundError",
    "InvalidArgumentError",
    "SearchServerError",
    "process_queries",
    "process_queries_joined",
    "remove_duplicates",
    "RequestQueue",
    "MAX_RESULT_DOCUMENT_COUNT",
    "SearchServer",
    "log_duration",
]
