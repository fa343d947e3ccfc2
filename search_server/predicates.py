"""
Document filters for find_top_documents().

A predicate is any callable taking (document_id, status, rating) and
returning a truthy value for documents that may appear in results.
Status based filtering is expressed as thin adapters over that contract.
"""

from typing import Callable, Union

from .document import DocumentStatus
from .exceptions import InvalidArgumentError

DocumentPredicate = Callable[[int, DocumentStatus, int], bool]


def status_predicate(status: DocumentStatus) -> DocumentPredicate:
    """Predicate accepting only documents with exactly this status"""
    status = DocumentStatus(status)

    def predicate(document_id: int, document_status: DocumentStatus, rating: int) -> bool:
        return document_status == status

    return predicate


def actual_predicate(document_id: int, status: DocumentStatus, rating: int) -> bool:
    """Default filter: ACTUAL documents only"""
    return status == DocumentStatus.ACTUAL


def as_predicate(filter_: Union[DocumentStatus, str, DocumentPredicate, None]) -> DocumentPredicate:
    """
    Normalize the filter argument accepted by the search API.

    Args:
        filter_: None (ACTUAL only), a DocumentStatus (or its name), or a predicate

    Returns:
        Predicate callable
    """
    if filter_ is None:
        return actual_predicate
    if isinstance(filter_, (DocumentStatus, str)):
        try:
            return status_predicate(DocumentStatus(filter_))
        except ValueError:
            raise InvalidArgumentError(f"Unknown document status {filter_!r}") from None
    if callable(filter_):
        return filter_
    raise TypeError(f"Expected DocumentStatus or predicate, got {type(filter_).__name__}")
