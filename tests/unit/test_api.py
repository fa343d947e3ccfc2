"""
Unit tests for the HTTP API (FastAPI TestClient, in-process).

Each test gets a fresh app lifespan, so the index starts empty.
Stop words come from tests/unit/conftest.py ("and in on").
"""

import pytest
from fastapi.testclient import TestClient

from search_server.main import app

PET_DOCUMENTS = [
    {"id": 1, "text": "funny pet and nasty rat", "ratings": [7, 2, 7]},
    {"id": 2, "text": "funny pet with curly hair", "ratings": [1, 2, 3]},
    {"id": 3, "text": "funny pet and not very nasty rat", "ratings": [1, 2, 8]},
    {"id": 4, "text": "pet with rat and rat and rat", "ratings": [1, 3, 2]},
    {"id": 5, "text": "nasty rat with curly hair", "ratings": [1, 1, 1]},
]


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pet_client(client):
    for document in PET_DOCUMENTS:
        response = client.post("/v1/documents", json=document)
        assert response.status_code == 201
    return client


class TestService:
    """Root and health endpoints"""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "running"
        assert data["max_results"] == 5

    def test_health(self, pet_client):
        response = pet_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["document_count"] == 5


class TestDocuments:
    """Ingestion, listing and removal"""

    def test_add_document(self, client):
        response = client.post(
            "/v1/documents",
            json={"id": 7, "text": "fluffy cat", "status": "BANNED", "ratings": [10, 11, 3]},
        )
        assert response.status_code == 201
        assert response.json() == {
            "id": 7,
            "status": "BANNED",
            "rating": 8,
            "message": "Document 7 indexed",
        }

    @pytest.mark.parametrize(
        "payload",
        [
            {"id": -1, "text": "fluffy cat"},
            {"id": 1, "text": "fluffy\x01 cat"},
        ],
    )
    def test_add_invalid_document(self, client, payload):
        response = client.post("/v1/documents", json=payload)
        assert response.status_code == 400
        assert client.get("/v1/documents").json()["total"] == 0

    def test_add_duplicate_id(self, pet_client):
        response = pet_client.post("/v1/documents", json={"id": 1, "text": "other text"})
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_add_unknown_status(self, client):
        response = client.post("/v1/documents", json={"id": 1, "text": "cat", "status": "ARCHIVED"})
        assert response.status_code == 422

    def test_list_documents(self, pet_client):
        response = pet_client.get("/v1/documents")
        assert response.json() == {"total": 5, "document_ids": [1, 2, 3, 4, 5]}

    def test_word_frequencies(self, pet_client):
        response = pet_client.get("/v1/documents/4/words")
        assert response.status_code == 200
        data = response.json()
        # "and" is a stop word, "with" is not
        assert data["frequencies"] == pytest.approx({"pet": 0.2, "with": 0.2, "rat": 0.6})

    def test_word_frequencies_unknown(self, client):
        response = client.get("/v1/documents/42/words")
        assert response.status_code == 404

    def test_delete_document(self, pet_client):
        response = pet_client.delete("/v1/documents/3")
        assert response.status_code == 200
        assert response.json()["removed"] is True
        assert pet_client.get("/v1/documents").json()["document_ids"] == [1, 2, 4, 5]

        # Idempotent
        response = pet_client.delete("/v1/documents/3")
        assert response.status_code == 200
        assert response.json()["removed"] is False

    def test_deduplicate(self, pet_client):
        pet_client.post("/v1/documents", json={"id": 6, "text": "rat nasty and pet funny"})
        pet_client.post("/v1/documents", json={"id": 7, "text": "curly hair"})

        response = pet_client.post("/v1/documents/deduplicate")
        assert response.status_code == 200
        assert response.json() == {"removed_ids": [6], "total_removed": 1, "document_count": 6}


class TestSearch:
    """Ranked search and matching"""

    def test_search(self, pet_client):
        response = pet_client.post("/v1/search", json={"query": "curly hair"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {result["id"] for result in data["results"]} == {2, 5}

    def test_search_minus_word(self, pet_client):
        response = pet_client.post("/v1/search", json={"query": "nasty rat -not"})
        ids = [result["id"] for result in response.json()["results"]]
        assert 3 not in ids
        assert sorted(ids) == [1, 4, 5]

    def test_search_status(self, pet_client):
        pet_client.post("/v1/documents", json={"id": 10, "text": "curly parrot", "status": "BANNED"})

        actual = pet_client.post("/v1/search", json={"query": "parrot"}).json()
        banned = pet_client.post("/v1/search", json={"query": "parrot", "status": "BANNED"}).json()
        assert actual["total"] == 0
        assert [result["id"] for result in banned["results"]] == [10]

    @pytest.mark.parametrize("query", ["cat --dog", "cat -", "ca\x05t"])
    def test_search_invalid_query(self, pet_client, query):
        response = pet_client.post("/v1/search", json={"query": query})
        assert response.status_code == 400

    def test_no_result_stats(self, pet_client):
        pet_client.post("/v1/search", json={"query": "parrot"})
        pet_client.post("/v1/search", json={"query": "curly"})
        pet_client.post("/v1/search", json={"query": "cat --dog"})

        response = pet_client.get("/v1/stats/no-result-requests")
        assert response.json() == {
            "no_result_requests": 1,
            "requests_in_window": 2,
            "window": 1440,
        }

    def test_match(self, pet_client):
        response = pet_client.post("/v1/documents/3/match", json={"query": "very nasty dog and rat"})
        assert response.status_code == 200
        assert response.json() == {
            "document_id": 3,
            "matched_words": ["nasty", "rat", "very"],
            "status": "ACTUAL",
        }

    def test_match_minus_word(self, pet_client):
        response = pet_client.post("/v1/documents/3/match", json={"query": "nasty -not"})
        assert response.json()["matched_words"] == []

    def test_match_unknown_document(self, pet_client):
        response = pet_client.post("/v1/documents/99/match", json={"query": "nasty"})
        assert response.status_code == 404

    def test_match_invalid_query(self, pet_client):
        response = pet_client.post("/v1/documents/3/match", json={"query": "--nasty"})
        assert response.status_code == 400


class TestBatchQueries:
    """Parallel batch endpoint"""

    QUERIES = ["nasty rat -not", "not very funny nasty pet", "curly hair"]

    def test_batch(self, pet_client):
        response = pet_client.post("/v1/queries/batch", json={"queries": self.QUERIES})
        assert response.status_code == 200
        data = response.json()
        assert [len(results) for results in data["results"]] == [3, 5, 2]
        assert data["total"] == 10
        assert "documents" not in data

    def test_batch_joined(self, pet_client):
        response = pet_client.post("/v1/queries/batch", json={"queries": self.QUERIES, "joined": True})
        data = response.json()
        assert len(data["documents"]) == data["total"] == 10
        assert "results" not in data

    def test_batch_invalid_query(self, pet_client):
        response = pet_client.post("/v1/queries/batch", json={"queries": ["curly", "cat --dog"]})
        assert response.status_code == 400

    def test_batch_empty(self, pet_client):
        response = pet_client.post("/v1/queries/batch", json={"queries": []})
        assert response.status_code == 422
