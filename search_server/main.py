"""
Search Server - FastAPI application for in-memory TF-IDF document search

API over SearchServer:
- Document ingestion / removal / duplicate cleanup
- Ranked keyword search with plus/minus words and status filters
- Per-document word frequencies and query matching
- Parallel batch queries

Concurrency:
- Mutations and batch queries hold index_lock, so no add/remove can run
  while a batch is being evaluated in worker threads
- Single queries run on the event loop and never interleave with a mutation
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

# Load .env.local first (highest priority), then .env as fallback
env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

# Configure logging: console (brief) + file (detailed)
from .logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
console_level = getattr(logging, log_level, logging.INFO)
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/search-server.log") or None,
    console_level=console_level,
    file_level=logging.DEBUG  # Always DEBUG in file for troubleshooting
)

logger = logging.getLogger(__name__)


from fastapi import FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .document import Document, DocumentStatus
from .exceptions import DocumentNotFoundError, InvalidArgumentError
from .process_queries import process_queries, process_queries_joined
from .remove_duplicates import remove_duplicates
from .request_queue import MIN_IN_DAY, RequestQueue
from .search_server import MAX_RESULT_DOCUMENT_COUNT, SearchServer
from .utils import log_duration

# Configuration from environment variables
PORT = int(os.getenv("PORT", "8080"))
STOP_WORDS = os.getenv("SEARCH_STOP_WORDS", "")
QUERY_WORKERS = int(os.getenv("QUERY_WORKERS", "8"))

# Version tracking
APP_VERSION = "0.1.0"
APP_START_TIME = datetime.now(timezone.utc)

# Global instances (created in lifespan)
search_server: Optional[SearchServer] = None
request_queue: Optional[RequestQueue] = None
index_lock: Optional[asyncio.Lock] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the search server for this process"""
    global search_server, request_queue, index_lock

    search_server = SearchServer(STOP_WORDS)
    request_queue = RequestQueue(search_server, window=MIN_IN_DAY)
    index_lock = asyncio.Lock()
    logger.info(
        f"Search server initialized: {len(search_server.stop_words)} stop words, "
        f"{QUERY_WORKERS} query workers"
    )

    yield

    logger.info(f"Shutting down with {len(search_server)} documents indexed")
    search_server = None
    request_queue = None
    index_lock = None


# FastAPI app
app = FastAPI(
    title="Search Server API",
    description="In-memory TF-IDF document search with plus/minus word queries",
    version=APP_VERSION,
    lifespan=lifespan,
)


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    document_count: int


class DocumentAddRequest(BaseModel):
    id: int = Field(..., description="Unique non-negative document id")
    text: str = Field(..., description="Document text, words separated by spaces")
    status: DocumentStatus = Field(default=DocumentStatus.ACTUAL)
    ratings: List[int] = Field(default_factory=list, description="User ratings, averaged into the document rating")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": 1,
            "text": "fluffy cat fluffy tail",
            "status": "ACTUAL",
            "ratings": [7, 2, 7],
        }
    })


class DocumentAddResponse(BaseModel):
    id: int
    status: DocumentStatus
    rating: int
    message: str


class DocumentResult(BaseModel):
    id: int
    relevance: float
    rating: int

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResult":
        return cls(id=document.id, relevance=document.relevance, rating=document.rating)


class SearchRequest(BaseModel):
    query: str = Field(..., description="Query, e.g. 'fluffy cat -dog'")
    status: Optional[DocumentStatus] = Field(
        default=None,
        description="Only return documents with this status (default: ACTUAL)",
    )


class SearchResponse(BaseModel):
    query: str
    results: List[DocumentResult]
    total: int


class MatchRequest(BaseModel):
    query: str = Field(..., description="Query to match against the document")


class MatchResponse(BaseModel):
    document_id: int
    matched_words: List[str]
    status: DocumentStatus


class WordFrequenciesResponse(BaseModel):
    document_id: int
    frequencies: Dict[str, float]


class DocumentListResponse(BaseModel):
    total: int
    document_ids: List[int]


class DocumentDeleteResponse(BaseModel):
    document_id: int
    removed: bool
    message: str


class DeduplicateResponse(BaseModel):
    removed_ids: List[int]
    total_removed: int
    document_count: int


class BatchQueryRequest(BaseModel):
    queries: List[str] = Field(..., min_length=1, description="Independent queries, evaluated in parallel")
    joined: bool = Field(default=False, description="Return one flat list instead of one list per query")


class BatchQueryResponse(BaseModel):
    results: Optional[List[List[DocumentResult]]] = None
    documents: Optional[List[DocumentResult]] = None
    total: int


class NoResultStatsResponse(BaseModel):
    no_result_requests: int
    requests_in_window: int
    window: int


def _get_server() -> SearchServer:
    if search_server is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search server not initialized",
        )
    return search_server


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "Search Server API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "max_results": MAX_RESULT_DOCUMENT_COUNT,
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME.isoformat(),
        uptime_seconds=round(uptime, 2),
        document_count=len(_get_server()),
    )


@app.post("/v1/documents", response_model=DocumentAddResponse, status_code=status.HTTP_201_CREATED)
async def add_document(request: DocumentAddRequest):
    """
    Index a document

    Fails with 400 for a negative or already used id, or text containing
    control characters. A rejected document leaves the index unchanged.
    """
    server = _get_server()
    try:
        async with index_lock:
            server.add_document(request.id, request.text, request.status, request.ratings)
        record = server.get_document(request.id)
    except InvalidArgumentError as e:
        logger.warning(f"Rejected document {request.id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return DocumentAddResponse(
        id=record.id,
        status=record.status,
        rating=record.rating,
        message=f"Document {record.id} indexed",
    )


@app.get("/v1/documents", response_model=DocumentListResponse)
async def list_documents():
    """List indexed document ids in ascending order"""
    server = _get_server()
    document_ids = list(server)
    return DocumentListResponse(total=len(document_ids), document_ids=document_ids)


@app.get("/v1/documents/{document_id}/words", response_model=WordFrequenciesResponse)
async def get_word_frequencies(document_id: int):
    """Term frequencies of one document"""
    server = _get_server()
    try:
        frequencies = server.get_word_frequencies(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return WordFrequenciesResponse(document_id=document_id, frequencies=dict(frequencies))


@app.delete("/v1/documents/{document_id}", response_model=DocumentDeleteResponse)
async def delete_document(document_id: int):
    """
    Remove a document

    Idempotent: deleting an unknown id succeeds with removed=false.
    """
    server = _get_server()
    async with index_lock:
        removed = server.remove_document(document_id)

    message = f"Document {document_id} removed" if removed else f"Document {document_id} was not indexed"
    return DocumentDeleteResponse(document_id=document_id, removed=removed, message=message)


@app.post("/v1/documents/deduplicate", response_model=DeduplicateResponse)
async def deduplicate_documents():
    """Remove documents whose word set duplicates a lower-id document"""
    server = _get_server()
    async with index_lock:
        with log_duration("Remove duplicates", logger):
            removed_ids = remove_duplicates(server)

    return DeduplicateResponse(
        removed_ids=removed_ids,
        total_removed=len(removed_ids),
        document_count=len(server),
    )


@app.post("/v1/search", response_model=SearchResponse)
async def search(request: SearchRequest):
    """
    Ranked search

    **Query syntax:**
    - `fluffy cat` - documents containing fluffy or cat
    - `fluffy -dog` - documents containing fluffy but not dog
    - stop words are ignored

    Results are ordered by TF-IDF relevance, ties by rating, and capped at
    MAX_RESULT_DOCUMENT_COUNT. Every search is recorded in the request
    history used by /v1/stats/no-result-requests.
    """
    _get_server()
    try:
        documents = request_queue.add_find_request(request.query, request.status)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    results = [DocumentResult.from_document(document) for document in documents]
    return SearchResponse(query=request.query, results=results, total=len(results))


@app.post("/v1/documents/{document_id}/match", response_model=MatchResponse)
async def match_document(document_id: int, request: MatchRequest):
    """Plus words of a query found in the document (empty if a minus word matches)"""
    server = _get_server()
    try:
        matched_words, document_status = server.match_document(request.query, document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return MatchResponse(document_id=document_id, matched_words=matched_words, status=document_status)


@app.post("/v1/queries/batch", response_model=BatchQueryResponse, response_model_exclude_none=True)
async def batch_queries(request: BatchQueryRequest):
    """
    Evaluate independent queries in parallel (ACTUAL documents only)

    results[i] answers queries[i]. With joined=true the per-query lists are
    concatenated in query order. One malformed query fails the whole batch.
    """
    server = _get_server()
    run_batch = process_queries_joined if request.joined else process_queries
    try:
        async with index_lock:
            with log_duration(f"Batch of {len(request.queries)} queries", logger):
                batch = await asyncio.to_thread(run_batch, server, request.queries, QUERY_WORKERS)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if request.joined:
        documents = [DocumentResult.from_document(d) for d in batch]
        return BatchQueryResponse(documents=documents, total=len(documents))

    results = [[DocumentResult.from_document(d) for d in documents] for documents in batch]
    return BatchQueryResponse(results=results, total=sum(len(r) for r in results))


@app.get("/v1/stats/no-result-requests", response_model=NoResultStatsResponse)
async def no_result_requests():
    """Searches without results among the last `window` searches"""
    _get_server()
    return NoResultStatsResponse(
        no_result_requests=request_queue.get_no_result_requests(),
        requests_in_window=len(request_queue),
        window=request_queue.window,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "search_server.main:app",
        host="0.0.0.0",
        port=PORT,
    )
