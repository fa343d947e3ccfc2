"""
Duplicate document detection.

Two documents are duplicates when they contain the same set of distinct
words. Word frequencies, word order and document length are ignored:

    "funny pet and nasty rat"      (id 2)
    "funny pet with curly hair"    (id 3)
    "funny pet and not very nasty rat" (id 4)   -> not a duplicate of 2
    "nasty rat and funny pet"      (id 5)       -> duplicate of 2, removed

The document with the lowest id is kept.
"""

import logging
from typing import Dict, FrozenSet, List

from .search_server import SearchServer

logger = logging.getLogger(__name__)


def remove_duplicates(search_server: SearchServer) -> List[int]:
    """
    Remove every document whose word set equals that of a lower-id document.

    Removal goes through SearchServer.remove_document(), so the caller must
    hold exclusive access to the server for the duration of the call.

    Args:
        search_server: Server to deduplicate in place

    Returns:
        Removed document ids in ascending order
    """
    first_owner: Dict[FrozenSet[str], int] = {}
    duplicates: List[int] = []

    for document_id in search_server:
        signature = frozenset(search_server.get_word_frequencies(document_id))
        if signature in first_owner:
            duplicates.append(document_id)
        else:
            first_owner[signature] = document_id

    for document_id in duplicates:
        logger.info(f"Found duplicate document id {document_id}")
        search_server.remove_document(document_id)

    return duplicates
