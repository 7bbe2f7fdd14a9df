"""Tests for the topic expansion API endpoints."""

from collections.abc import Callable
from typing import Any

import httpx
from fastapi.testclient import TestClient

from topic_feedback_service.main import app
from topic_feedback_service.routers.expansion import get_search_client
from topic_feedback_service.search import SolrClient

from .fakes import InMemoryTopicStore


def use_solr(handler: Callable[[httpx.Request], httpx.Response]) -> list[httpx.Request]:
    """Route the endpoint's Solr client to a mock handler; returns the seen requests."""
    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    app.dependency_overrides[get_search_client] = lambda: SolrClient(
        base_url="http://solr.test/solr/trec",
        transport=httpx.MockTransport(recording_handler),
    )
    return seen


def solr_docs(*ids: str) -> Callable[[httpx.Request], httpx.Response]:
    docs: list[dict[str, Any]] = [{"id": doc_id} for doc_id in ids]
    return lambda request: httpx.Response(200, json={"response": {"docs": docs}})


class TestSelectTopics:
    """Tests for POST /api/v1/expansion/topics."""

    def test_latent_topics_with_terms(self, expansion_client: TestClient) -> None:
        response = expansion_client.post(
            "/api/v1/expansion/topics",
            json={"document_ids": ["A", "B", "C"], "threshold": -100.0},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["documents"] == ["A", "B"]
        assert data["enriched"] == [134, 474, 391, 81]
        assert data["latent_topics"] == [134, 474, 391, 81, 205, 310, 126, 247]
        assert [topic["topic_id"] for topic in data["topics"]] == data["latent_topics"]

        topic = data["topics"][0]
        assert topic["trigram_label"] == "special interest group"
        assert topic["bigrams_label"] == "public opinion, conflict interest"
        assert topic["unigrams_label"] == "issue, policy, public, issues"
        assert topic["expansion_words"] == ["issue", "policy", "public", "issues", "debate"]
        assert data["topics"][1]["trigram_label"] == "(No trigrams found)"

    def test_threshold_from_percentile(self, expansion_client: TestClient) -> None:
        response = expansion_client.post(
            "/api/v1/expansion/topics",
            json={"document_ids": ["A", "B"], "threshold_percentile": 0.25},
        )

        assert response.status_code == 200
        assert response.json()["threshold"] == -100.0

    def test_single_document_rejected(self, expansion_client: TestClient) -> None:
        response = expansion_client.post(
            "/api/v1/expansion/topics", json={"document_ids": ["A"]}
        )

        assert response.status_code == 422

    def test_percentile_out_of_range_is_bad_request(
        self, expansion_client: TestClient
    ) -> None:
        response = expansion_client.post(
            "/api/v1/expansion/topics",
            json={"document_ids": ["A", "B"], "threshold_percentile": 0.05},
        )

        assert response.status_code == 400
        assert "rank" in response.json()["detail"]

    def test_documents_without_topics_is_bad_request(
        self, expansion_client: TestClient
    ) -> None:
        response = expansion_client.post(
            "/api/v1/expansion/topics",
            json={"document_ids": ["missing", "also-missing"], "threshold": -100.0},
        )

        assert response.status_code == 400

    def test_sparse_related_topics_is_unprocessable(
        self, expansion_client: TestClient
    ) -> None:
        response = expansion_client.post(
            "/api/v1/expansion/topics",
            json={"document_ids": ["A", "B"], "threshold": -80.0},
        )

        assert response.status_code == 422
        assert "Topic 474" in response.json()["detail"]

    def test_store_failure_is_bad_gateway(
        self, expansion_client: TestClient, scenario_store: InMemoryTopicStore
    ) -> None:
        scenario_store.fail = True

        response = expansion_client.post(
            "/api/v1/expansion/topics",
            json={"document_ids": ["A", "B"], "threshold": -100.0},
        )

        assert response.status_code == 502


class TestExpandQuery:
    """Tests for POST /api/v1/expansion/query."""

    def test_expands_query_with_chosen_topics(self, expansion_client: TestClient) -> None:
        requests = use_solr(solr_docs("A", "B", "C"))

        response = expansion_client.post(
            "/api/v1/expansion/query",
            json={
                "query": "oil spill",
                "query_fields": {"text": 1.0},
                "topic_ids": [81, 391],
                "boost": 0.5,
                "threshold": -100.0,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["seed_documents"] == ["A", "B"]
        assert data["params"]["qf"] == "text^1.0"
        assert data["params"]["bq"].split() == [
            "united^0.5",
            "states^0.5",
            "trade^0.5",
            "tariff^0.5",
            "oil^0.5",
            "spill^0.5",
            "coast^0.5",
            "cleanup^0.5",
            "damage^0.5",
        ]
        assert "bq=united%5E0.5" in data["query_string"]
        assert data["topics"]["enriched"] == [134, 474, 391, 81]
        # The seed search runs before any boost terms exist
        assert "bq" not in requests[0].url.params

    def test_negative_field_scoped_expansion(self, expansion_client: TestClient) -> None:
        use_solr(solr_docs("A", "B"))

        response = expansion_client.post(
            "/api/v1/expansion/query",
            json={
                "query": "oil spill",
                "topic_ids": [474],
                "field": "text",
                "sign": "-",
                "threshold": -100.0,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["params"]["bq"].startswith("-text:court^1.0 -text:judge^1.0")
        assert list(data["boost_query"]) == ["text"]

    def test_without_topics_only_lists_latent_topics(
        self, expansion_client: TestClient
    ) -> None:
        use_solr(solr_docs("A", "B"))

        response = expansion_client.post(
            "/api/v1/expansion/query",
            json={"query": "oil spill", "threshold": -100.0},
        )

        assert response.status_code == 200
        data = response.json()
        assert "bq" not in data["params"]
        assert data["boost_query"] == {}
        assert len(data["topics"]["topics"]) == 8

    def test_reset_uses_positive_terms(self, expansion_client: TestClient) -> None:
        use_solr(solr_docs("A", "B"))

        response = expansion_client.post(
            "/api/v1/expansion/query",
            json={
                "query": "oil spill",
                "topic_ids": [81],
                "sign": "-",
                "reset": True,
                "threshold": -100.0,
            },
        )

        assert response.status_code == 200
        assert response.json()["boost_query"] == {
            "": {"united": 1.0, "states": 1.0, "trade": 1.0, "tariff": 1.0}
        }

    def test_unknown_topic_is_bad_request(self, expansion_client: TestClient) -> None:
        use_solr(solr_docs("A", "B"))

        response = expansion_client.post(
            "/api/v1/expansion/query",
            json={"query": "oil spill", "topic_ids": [12], "threshold": -100.0},
        )

        assert response.status_code == 400

    def test_single_search_result_is_bad_request(self, expansion_client: TestClient) -> None:
        use_solr(solr_docs("A"))

        response = expansion_client.post(
            "/api/v1/expansion/query",
            json={"query": "oil spill", "threshold": -100.0},
        )

        assert response.status_code == 400
        assert "two seed documents" in response.json()["detail"]

    def test_search_engine_failure_is_bad_gateway(self, expansion_client: TestClient) -> None:
        use_solr(lambda request: httpx.Response(503, text="unavailable"))

        response = expansion_client.post(
            "/api/v1/expansion/query",
            json={"query": "oil spill"},
        )

        assert response.status_code == 502

    def test_empty_query_rejected(self, expansion_client: TestClient) -> None:
        use_solr(solr_docs("A", "B"))

        response = expansion_client.post("/api/v1/expansion/query", json={"query": ""})

        assert response.status_code == 422
