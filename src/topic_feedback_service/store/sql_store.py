"""SQLAlchemy-backed topic model store."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from topic_feedback_service.exceptions import TopicStoreError
from topic_feedback_service.logging_config import get_logger
from topic_feedback_service.models.topic_model import (
    DocumentTopic,
    TopicAffinity as TopicAffinityRow,
    TopicCoherence,
    TopicNgram,
    TopicWord,
)

from .base import (
    CoherenceScore,
    NGram,
    TopicAffinity,
    TopicAssociation,
    TopicModelStore,
    Unigram,
)

logger = get_logger(__name__)

VALID_NGRAM_SIZES = frozenset({1, 2, 3})


class SQLTopicModelStore(TopicModelStore):
    """Topic model store reading the topic model tables through a Session.

    The store does not own the session; the caller (usually the get_db
    dependency) opens and closes it.

    Usage:
        with SessionLocal() as db:
            store = SQLTopicModelStore(db)
            topics = store.topics_for_document("LA092590-0030")
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def coherence_scores(
        self,
        topic_ids: Sequence[int] | None = None,
        descending: bool = False,
    ) -> list[CoherenceScore]:
        order = TopicCoherence.score.desc() if descending else TopicCoherence.score.asc()
        stmt = select(TopicCoherence.topic_id, TopicCoherence.score)
        if topic_ids is not None:
            if not topic_ids:
                return []
            stmt = stmt.where(TopicCoherence.topic_id.in_(list(topic_ids)))
        rows = self._fetch(stmt.order_by(order, TopicCoherence.id), "coherence_scores")
        return [CoherenceScore(topic_id=topic_id, score=score) for topic_id, score in rows]

    def topics_for_document(self, document_id: Any) -> list[TopicAssociation]:
        stmt = (
            select(DocumentTopic.topic_id, DocumentTopic.probability)
            .where(DocumentTopic.document_id == str(document_id))
            .order_by(DocumentTopic.id)
        )
        rows = self._fetch(stmt, "topics_for_document")
        return [
            TopicAssociation(topic_id=topic_id, probability=probability)
            for topic_id, probability in rows
        ]

    def related_topics(self, topic_id: int) -> list[TopicAffinity]:
        stmt = (
            select(TopicAffinityRow.co_topic_id, TopicAffinityRow.covariance)
            .where(TopicAffinityRow.topic_id == topic_id)
            .order_by(TopicAffinityRow.covariance.desc(), TopicAffinityRow.id)
        )
        rows = self._fetch(stmt, "related_topics")
        return [
            TopicAffinity(topic_id=topic_id, co_topic_id=co_topic_id, covariance=covariance)
            for co_topic_id, covariance in rows
        ]

    def ngrams_for_topic(self, topic_id: int) -> list[NGram]:
        stmt = (
            select(TopicNgram.text, TopicNgram.size, TopicNgram.score)
            .where(TopicNgram.topic_id == topic_id)
            .order_by(TopicNgram.id)
        )
        rows = self._fetch(stmt, "ngrams_for_topic")
        ngrams = []
        for text, size, score in rows:
            if size not in VALID_NGRAM_SIZES:
                raise TopicStoreError(
                    f"Malformed n-gram {text!r} for topic {topic_id}: size {size} not in 1..3"
                )
            ngrams.append(NGram(text=text, size=size, score=score))
        return ngrams

    def unigrams_for_topic(self, topic_id: int) -> list[Unigram]:
        stmt = (
            select(TopicWord.word, TopicWord.probability)
            .where(TopicWord.topic_id == topic_id)
            .order_by(TopicWord.id)
        )
        rows = self._fetch(stmt, "unigrams_for_topic")
        return [Unigram(word=word, probability=probability) for word, probability in rows]

    def topics_below_threshold(self, topic_ids: Sequence[int], threshold: float) -> list[int]:
        if not topic_ids:
            return []
        stmt = select(TopicCoherence.topic_id).where(
            TopicCoherence.topic_id.in_(list(topic_ids)),
            TopicCoherence.score < threshold,
        )
        return [row[0] for row in self._fetch(stmt, "topics_below_threshold")]

    def _fetch(self, stmt: Select, operation: str) -> list[Any]:
        """Execute a select and return all rows.

        Raises:
            TopicStoreError: If the database query fails
        """
        try:
            return list(self.db.execute(stmt).all())
        except SQLAlchemyError as e:
            logger.error("topic_store.query_failed", operation=operation, error=str(e))
            raise TopicStoreError(f"Topic store query '{operation}' failed: {e}") from e
