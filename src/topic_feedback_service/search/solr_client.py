"""Solr search client.

Executes DisMax queries against a Solr core's /select handler and returns
the ranked result documents. Only the first two results are needed to seed
topic expansion; see first_two_result_ids().
"""

from collections.abc import Sequence
from typing import Any

import httpx

from topic_feedback_service.config import settings
from topic_feedback_service.exceptions import PreconditionError, SearchEngineError
from topic_feedback_service.logging_config import get_logger

from .dismax import DisMaxQuery

logger = get_logger(__name__)


class SolrClient:
    """Thin synchronous Solr client.

    Usage:
        with SolrClient("http://localhost:8983/solr/trec") as solr:
            docs = solr.search(DisMaxQuery("environmental policy"))
            seed_1, seed_2 = first_two_result_ids(docs)
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        id_field: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Solr client.

        Args:
            base_url: Core URL, e.g. http://localhost:8983/solr/core
            timeout_seconds: Request timeout
            id_field: Unique key field of result documents
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or settings.solr_url).rstrip("/")
        self.id_field = id_field or settings.solr_id_field
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout_seconds or settings.solr_timeout_seconds,
            transport=transport,
        )

    def search(self, query: DisMaxQuery, rows: int | None = None) -> list[dict[str, Any]]:
        """Execute a query and return the result documents in rank order.

        Args:
            query: DisMax query to execute
            rows: Number of results to request (settings.solr_rows if None)

        Returns:
            Result documents as returned by Solr

        Raises:
            SearchEngineError: On timeout, transport error, HTTP error status
                or a response without a document list
        """
        params = query.to_params()
        if not any(name == "rows" for name, _value in params):
            params.append(("rows", str(rows or settings.solr_rows)))
        params.append(("wt", "json"))

        try:
            response = self._client.get("/select", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise SearchEngineError(f"Timeout querying Solr at {self.base_url}: {e}") from e
        except httpx.HTTPStatusError as e:
            raise SearchEngineError(
                f"Solr returned HTTP {e.response.status_code} for {self.base_url}"
            ) from e
        except httpx.RequestError as e:
            raise SearchEngineError(f"Request to Solr failed: {e}") from e
        except ValueError as e:
            raise SearchEngineError(f"Solr returned a non-JSON response: {e}") from e

        try:
            docs = payload["response"]["docs"]
        except (KeyError, TypeError) as e:
            raise SearchEngineError("Solr response has no 'response.docs' list") from e
        if not isinstance(docs, list):
            raise SearchEngineError("Solr response 'response.docs' is not a list")

        logger.info("solr.search.completed", query=query.query[:100], results=len(docs))
        return docs

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "SolrClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def first_two_result_ids(
    results: Sequence[dict[str, Any]],
    id_field: str = "id",
) -> tuple[Any, Any]:
    """Return the IDs of the two top-ranked results.

    Raises:
        PreconditionError: If there are fewer than two results
        SearchEngineError: If a result lacks the ID field
    """
    if len(results) < 2:
        raise PreconditionError(
            f"Topic expansion needs two seed documents, search returned {len(results)}"
        )
    try:
        return results[0][id_field], results[1][id_field]
    except KeyError as e:
        raise SearchEngineError(f"Search result is missing the '{id_field}' field") from e
