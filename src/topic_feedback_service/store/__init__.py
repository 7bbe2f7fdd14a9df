"""Topic model store: read access to the precomputed topic model."""

from .base import (
    CoherenceScore,
    NGram,
    TopicAffinity,
    TopicAssociation,
    TopicModelStore,
    Unigram,
)
from .sql_store import SQLTopicModelStore

__all__ = [
    "CoherenceScore",
    "NGram",
    "SQLTopicModelStore",
    "TopicAffinity",
    "TopicAssociation",
    "TopicModelStore",
    "Unigram",
]
