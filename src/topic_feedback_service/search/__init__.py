"""Search engine integration: DisMax query building and Solr client."""

from .dismax import DisMaxParams, DisMaxQuery
from .solr_client import SolrClient, first_two_result_ids

__all__ = [
    "DisMaxParams",
    "DisMaxQuery",
    "SolrClient",
    "first_two_result_ids",
]
