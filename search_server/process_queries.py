"""
Parallel batch query processing.

Independent queries are evaluated with find_top_documents() in a
ThreadPoolExecutor over one shared server. Workers only receive the bound
find_top_documents method, never the server itself; the caller must make
sure no add/remove runs until the batch returns.

Usage:
    results = process_queries(server, ["fluffy cat", "dog -collar"])
    flat = process_queries_joined(server, ["fluffy cat", "dog -collar"])
"""

from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import List, Optional, Sequence

from .document import Document
from .search_server import SearchServer
from .tfidf.scorer import DEFAULT_NUM_WORKERS

# Minimum queries before enabling parallelism
MIN_QUERIES_FOR_PARALLEL = 4


def process_queries(
    search_server: SearchServer,
    queries: Sequence[str],
    num_workers: Optional[int] = None,
    min_queries_for_parallel: int = MIN_QUERIES_FOR_PARALLEL,
) -> List[List[Document]]:
    """
    Run find_top_documents() for every query.

    Args:
        search_server: Server to query (must not be mutated during the call)
        queries: Raw query strings
        num_workers: Thread pool size (default: DEFAULT_NUM_WORKERS)
        min_queries_for_parallel: Smaller batches run sequentially

    Returns:
        results[i] = ranked documents for queries[i]

    Raises:
        InvalidArgumentError: If any query is malformed (whole batch fails)
    """
    if not queries:
        return []

    find_top = search_server.find_top_documents

    # For small batches, run sequentially
    if len(queries) < min_queries_for_parallel:
        return [find_top(query) for query in queries]

    # executor.map preserves input order and re-raises the first failure
    with ThreadPoolExecutor(max_workers=num_workers or DEFAULT_NUM_WORKERS) as executor:
        return list(executor.map(find_top, queries))


def process_queries_joined(
    search_server: SearchServer,
    queries: Sequence[str],
    num_workers: Optional[int] = None,
) -> List[Document]:
    """Results of process_queries() concatenated in query order, rank order kept within each query"""
    return list(chain.from_iterable(process_queries(search_server, queries, num_workers)))
