"""
Document types shared by the index, the ranking code and the HTTP layer.
"""

from dataclasses import dataclass
from enum import Enum


class DocumentStatus(str, Enum):
    """Opaque status tag chosen by the caller at ingestion time"""
    ACTUAL = "ACTUAL"
    IRRELEVANT = "IRRELEVANT"
    BANNED = "BANNED"
    REMOVED = "REMOVED"


@dataclass(frozen=True)
class Document:
    """Single ranked search result"""
    id: int
    relevance: float
    rating: int

    def __str__(self) -> str:
        return f"{{ document_id = {self.id}, relevance = {self.relevance}, rating = {self.rating} }}"


@dataclass(frozen=True)
class DocumentRecord:
    """Metadata kept for every indexed document (immutable after ingestion)"""
    id: int
    status: DocumentStatus
    rating: int
    text: str
