"""Pydantic schemas for API request/response validation."""

from .expansion import (
    ExpandQueryRequest,
    ExpandQueryResponse,
    ExpansionSign,
    LatentTopicsResponse,
    NGramResponse,
    TopicsRequest,
    TopicTermsResponse,
    UnigramResponse,
)
from .health import HealthResponse

__all__ = [
    # Health
    "HealthResponse",
    # Expansion
    "ExpandQueryRequest",
    "ExpandQueryResponse",
    "ExpansionSign",
    "LatentTopicsResponse",
    "NGramResponse",
    "TopicsRequest",
    "TopicTermsResponse",
    "UnigramResponse",
]
