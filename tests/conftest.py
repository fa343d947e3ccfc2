"""Shared pytest fixtures"""

import sys
from pathlib import Path

import pytest

# Add project root to path for search_server imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from search_server import DocumentStatus, SearchServer


@pytest.fixture
def server():
    """Empty server without stop words"""
    return SearchServer()


@pytest.fixture
def relevance_server():
    """Three documents with distinct vocabulary, equal ratings"""
    server = SearchServer()
    server.add_document(100, "white cat new ring", DocumentStatus.ACTUAL, [1, 2, 3])
    server.add_document(101, "fluffy cat fluffy tail", DocumentStatus.ACTUAL, [1, 2, 3])
    server.add_document(102, "good dog big eyes", DocumentStatus.ACTUAL, [1, 2, 3])
    return server


@pytest.fixture
def pet_server():
    """Pet corpus with stop words 'and with'"""
    server = SearchServer("and with")
    server.add_document(1, "funny pet and nasty rat", DocumentStatus.ACTUAL, [7, 2, 7])
    server.add_document(2, "funny pet with curly hair", DocumentStatus.ACTUAL, [1, 2, 3])
    server.add_document(3, "funny pet and not very nasty rat", DocumentStatus.ACTUAL, [1, 2, 8])
    server.add_document(4, "pet with rat and rat and rat", DocumentStatus.ACTUAL, [1, 3, 2])
    server.add_document(5, "nasty rat with curly hair", DocumentStatus.ACTUAL, [1, 1, 1])
    return server
