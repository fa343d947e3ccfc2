"""
Unit tests for duplicate removal.
"""

import logging

import pytest

from search_server import DocumentStatus, SearchServer, remove_duplicates


@pytest.fixture
def duplicate_server():
    server = SearchServer("and with")
    documents = {
        1: "funny pet and nasty rat",
        2: "funny pet with curly hair",
        3: "funny pet with curly hair",
        4: "funny pet and curly hair",
        5: "funny funny pet and nasty nasty rat",
        6: "funny pet and not very nasty rat",
        7: "very nasty rat and not very funny pet",
        8: "pet with rat and rat and rat",
        9: "nasty rat with curly hair",
    }
    for document_id, text in documents.items():
        server.add_document(document_id, text, DocumentStatus.ACTUAL, [1, 2])
    return server


class TestRemoveDuplicates:
    """Word-set based deduplication"""

    def test_removes_duplicates(self, duplicate_server):
        removed = remove_duplicates(duplicate_server)

        assert removed == [3, 4, 5, 7]
        assert list(duplicate_server) == [1, 2, 6, 8, 9]
        assert duplicate_server.document_count == 5

    def test_logs_each_removal(self, duplicate_server, caplog):
        with caplog.at_level(logging.INFO, logger="search_server.remove_duplicates"):
            remove_duplicates(duplicate_server)

        messages = [record.getMessage() for record in caplog.records]
        assert messages == [f"Found duplicate document id {document_id}" for document_id in (3, 4, 5, 7)]

    def test_second_pass_is_noop(self, duplicate_server):
        remove_duplicates(duplicate_server)
        assert remove_duplicates(duplicate_server) == []

    def test_no_duplicates(self, relevance_server):
        assert remove_duplicates(relevance_server) == []
        assert len(relevance_server) == 3

    def test_lowest_id_kept(self, server):
        server.add_document(9, "rat nasty", DocumentStatus.ACTUAL, [])
        server.add_document(3, "nasty rat rat", DocumentStatus.BANNED, [])

        assert remove_duplicates(server) == [9]
        assert list(server) == [3]

    def test_empty_documents_are_duplicates(self):
        """Documents made only of stop words share the empty word set"""
        server = SearchServer("and with")
        server.add_document(1, "and with", DocumentStatus.ACTUAL, [])
        server.add_document(2, "", DocumentStatus.ACTUAL, [])

        assert remove_duplicates(server) == [2]
