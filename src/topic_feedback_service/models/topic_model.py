"""Topic model database tables.

The tables hold the output of an offline LDA run:

- topic_coherence:  one semantic coherence score per topic (theta quality)
- document_topics:  topic proportions per document (theta)
- topic_affinities: topic-to-topic covariance ("related" topics)
- topic_ngrams:     scored n-grams (sizes 1-3) per topic
- topic_words:      word probabilities per topic (phi)

Every table carries a surrogate autoincrement key. Rows are returned in key
order so that ties in probability/score keep the order the model was loaded
in.
"""

from sqlalchemy import Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from topic_feedback_service.database import Base


class TopicCoherence(Base):
    """Semantic coherence score for a topic (lower means more "junk")."""

    __tablename__ = "topic_coherence"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    score: Mapped[float] = mapped_column(Float, nullable=False, index=True)


class DocumentTopic(Base):
    """Association strength between a document and a topic."""

    __tablename__ = "document_topics"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    document_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    topic_id: Mapped[int] = mapped_column(Integer, nullable=False)
    probability: Mapped[float] = mapped_column(Float, nullable=False)


class TopicAffinity(Base):
    """Covariance between a topic and one of its co-topics."""

    __tablename__ = "topic_affinities"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    co_topic_id: Mapped[int] = mapped_column(Integer, nullable=False)
    covariance: Mapped[float] = mapped_column(Float, nullable=False)


class TopicNgram(Base):
    """Scored n-gram drawn from a topic."""

    __tablename__ = "topic_ngrams"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(String(512), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (Index("idx_topic_ngrams_topic_size", "topic_id", "size"),)


class TopicWord(Base):
    """Word probability within a topic's word distribution."""

    __tablename__ = "topic_words"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    word: Mapped[str] = mapped_column(String(255), nullable=False)
    probability: Mapped[float] = mapped_column(Float, nullable=False)
