"""Abstract base class for topic model stores and the records they return."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CoherenceScore:
    """Semantic coherence of a topic. Lower scores mark "junk" topics."""

    topic_id: int
    score: float


@dataclass(frozen=True)
class TopicAssociation:
    """Association strength of a topic to a document."""

    topic_id: int
    probability: float


@dataclass(frozen=True)
class TopicAffinity:
    """Covariance of a topic to one of its co-topics."""

    topic_id: int
    co_topic_id: int
    covariance: float


@dataclass(frozen=True)
class NGram:
    """Scored n-gram of a topic. Size 1, 2 or 3 (unigram to trigram)."""

    text: str
    size: int
    score: float


@dataclass(frozen=True)
class Unigram:
    """Word and its probability within a topic's word distribution."""

    word: str
    probability: float


class TopicModelStore(ABC):
    """Read-only access to a precomputed topic model.

    Implementations raise TopicStoreError when the backing store fails or
    returns a malformed record. An empty result means "no data" and is never
    used to signal a failure.
    """

    @abstractmethod
    def coherence_scores(
        self,
        topic_ids: Sequence[int] | None = None,
        descending: bool = False,
    ) -> list[CoherenceScore]:
        """Return coherence scores sorted by score.

        Args:
            topic_ids: Restrict to these topics (all topics if None)
            descending: Sort highest score first instead of lowest first
        """

    @abstractmethod
    def topics_for_document(self, document_id: Any) -> list[TopicAssociation]:
        """Return the topics associated with a document, in stored order."""

    @abstractmethod
    def related_topics(self, topic_id: int) -> list[TopicAffinity]:
        """Return the co-topics of a topic, highest covariance first."""

    @abstractmethod
    def ngrams_for_topic(self, topic_id: int) -> list[NGram]:
        """Return all scored n-grams of a topic, in stored order."""

    @abstractmethod
    def unigrams_for_topic(self, topic_id: int) -> list[Unigram]:
        """Return the word distribution of a topic, in stored order."""

    @abstractmethod
    def topics_below_threshold(self, topic_ids: Sequence[int], threshold: float) -> list[int]:
        """Return those of topic_ids whose coherence is strictly below threshold."""
