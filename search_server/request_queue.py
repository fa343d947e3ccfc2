"""
Request history with a sliding window of the last day of requests.

Each find request advances a logical clock by one tick (one minute), so the
window holds the last MIN_IN_DAY requests. get_no_result_requests() reports
how many of them returned no documents.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Union

from .document import Document, DocumentStatus
from .predicates import DocumentPredicate
from .search_server import SearchServer

# Window length in ticks (minutes in a day)
MIN_IN_DAY = 1440


@dataclass(frozen=True)
class QueryResult:
    timestamp: int
    result_count: int


class RequestQueue:
    """
    Wraps a SearchServer and counts empty results over a trailing window.

    Not thread-safe, use one instance per caller or guard it with a lock.
    """

    def __init__(self, search_server: SearchServer, window: int = MIN_IN_DAY):
        if window <= 0:
            raise ValueError(f"window must be positive, got {window}")
        self.search_server = search_server
        self.window = window
        self._requests: Deque[QueryResult] = deque()
        self._current_time = 0
        self._no_result_requests = 0

    def add_find_request(
        self,
        raw_query: str,
        status_or_predicate: Union[DocumentStatus, DocumentPredicate, None] = None,
    ) -> List[Document]:
        """
        Run find_top_documents() and record the result size.

        Queries that fail to parse raise and are not recorded.
        """
        result = self.search_server.find_top_documents(raw_query, status_or_predicate)
        self.add_request(len(result))
        return result

    def add_request(self, result_count: int) -> None:
        """Record one request outcome and evict requests older than the window"""
        self._current_time += 1

        while self._requests and self._current_time - self._requests[0].timestamp >= self.window:
            expired = self._requests.popleft()
            if expired.result_count == 0:
                self._no_result_requests -= 1

        self._requests.append(QueryResult(timestamp=self._current_time, result_count=result_count))
        if result_count == 0:
            self._no_result_requests += 1

    def get_no_result_requests(self) -> int:
        return self._no_result_requests

    def __len__(self) -> int:
        return len(self._requests)
